import uuid

def new_id() -> str:
    """ID opaco corto; nunca contiene el delimitador ","."""
    return uuid.uuid4().hex[:9]

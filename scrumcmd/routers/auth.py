from fastapi import APIRouter, HTTPException, status
from .. import schemas
from scrum_common.security import verify_credentials, create_access_token

router = APIRouter(prefix="/auth", tags=["Auth"])

@router.post("/login", response_model=schemas.Token)
async def login(credentials: schemas.LoginRequest):
    """
    **Acceso al panel**

    Compara contra el usuario único configurado por entorno y
    devuelve un token Bearer.
    """
    if not verify_credentials(credentials.username, credentials.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario o contraseña incorrectos",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = create_access_token({"sub": credentials.username})
    return {"access_token": token, "token_type": "bearer"}

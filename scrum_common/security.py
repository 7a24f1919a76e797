from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
import os
import secrets
from typing import Optional

# Configuración Criptográfica
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "SECRET_SCRUMCMD_CAMBIAME")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))

# Credenciales del acceso único (no hay gestión de usuarios)
GATE_USERNAME = os.getenv("SCRUMCMD_USERNAME", "PM-CMD")
GATE_PASSWORD = os.getenv("SCRUMCMD_PASSWORD", "changeme")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

# --- UTILIDADES ---
def verify_credentials(username: str, password: str) -> bool:
    """Compara contra las credenciales configuradas en tiempo constante."""
    user_ok = secrets.compare_digest(username.encode(), GATE_USERNAME.encode())
    pass_ok = secrets.compare_digest(password.encode(), GATE_PASSWORD.encode())
    return user_ok and pass_ok

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

# --- DEPENDENCIAS FASTAPI ---
class UserPayload:
    def __init__(self, sub: str):
        self.sub = sub

def get_current_user(token: str = Depends(oauth2_scheme)) -> UserPayload:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Credenciales inválidas o expiradas",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        username: str = payload.get("sub")

        if username is None or payload.get("type") != "access":
            raise credentials_exception

        return UserPayload(sub=username)
    except JWTError:
        raise credentials_exception

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from socialpod import models, schemas
from socialpod.config import settings
from socialpod.database import get_db


# ==========================
# AUTH CONFIG
# ==========================

READ_SCOPE = "read"
WRITE_SCOPE = "write"
KNOWN_SCOPES = (READ_SCOPE, WRITE_SCOPE)

# auto_error is off so the token may also arrive as ?access_token=...
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)


# ==========================
# PASSWORD UTILS
# ==========================

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Bcrypt max input length = 72 bytes
    Truncate safely to avoid crash
    """
    password_bytes = password.encode("utf-8")

    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
        password = password_bytes.decode("utf-8", errors="ignore")

    return pwd_context.hash(password)


# ==========================
# JWT TOKEN
# ==========================

def normalize_scopes(scope: Optional[str]) -> list:
    """Split a space separated scope string, keeping known scopes in canonical order."""
    requested = set((scope or "").split())
    return [name for name in KNOWN_SCOPES if name in requested]


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

    return encoded_jwt


def issue_user_token(user: models.User, scopes: Iterable[str]) -> str:
    return create_access_token(data={"sub": user.username, "scope": " ".join(scopes)})


# ==========================
# AUTH HELPERS
# ==========================

class Credential:
    """An authenticated API caller: the token's user and the scopes it grants."""

    def __init__(self, user: models.User, scopes: Iterable[str]):
        self.user = user
        self.scopes = frozenset(scopes)

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes


def authenticate_user(db: Session, username: str, password: str):
    user = db.query(models.User).filter(
        models.User.username == username
    ).first()

    if not user:
        return False

    if not verify_password(password, user.password_hash):
        return False

    return user


def get_current_credential(
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Query(None),
    db: Session = Depends(get_db)
) -> Credential:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = bearer_token or access_token
    if not token:
        raise credentials_exception

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception

        token_data = schemas.TokenData(
            username=username,
            scopes=normalize_scopes(payload.get("scope")),
        )

    except JWTError:
        raise credentials_exception

    user = db.query(models.User).filter(
        models.User.username == token_data.username
    ).first()

    if user is None or not user.is_active:
        raise credentials_exception

    return Credential(user, token_data.scopes)


def get_current_user(credential: Credential = Depends(get_current_credential)) -> models.User:
    if not credential.has_scope(READ_SCOPE):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access token lacks the 'read' scope",
        )
    return credential.user


def require_write_scope(credential: Credential = Depends(get_current_credential)) -> models.User:
    if not credential.has_scope(WRITE_SCOPE):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access token lacks the 'write' scope",
        )
    return credential.user

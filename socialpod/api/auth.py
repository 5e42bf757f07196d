import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from socialpod.crud import user as user_crud
from socialpod.database import get_db
from socialpod.schemas.auth import LoginRequest, RegisterRequest, Token
from socialpod.utils.security import (
    KNOWN_SCOPES,
    authenticate_user,
    issue_user_token,
    normalize_scopes,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ===== REGISTER ENDPOINT =====

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a local account with its person, profile and default aspects"""
    normalized_email = user_data.email.strip().lower()

    if user_crud.get_user_by_username(db, user_data.username):
        raise HTTPException(status_code=400, detail="Username already taken")
    if user_crud.get_user_by_email(db, normalized_email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        user = user_crud.create_user(
            db,
            username=user_data.username,
            email=normalized_email,
            password=user_data.password,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration failed for %s", user_data.username)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {
        "message": "Registration successful",
        "guid": user.person.guid,
        "diaspora_id": user.person.diaspora_id,
    }


# ===== LOGIN ENDPOINT =====

@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return an access token limited to the requested scopes"""
    requested = credentials.scope.split()
    scopes = normalize_scopes(credentials.scope)
    if not scopes or len(scopes) != len(set(requested)):
        raise HTTPException(
            status_code=400,
            detail=f"Scope must be a space separated subset of: {' '.join(KNOWN_SCOPES)}",
        )

    user = authenticate_user(db, credentials.username, credentials.password)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    return {
        "access_token": issue_user_token(user, scopes),
        "token_type": "bearer",
        "scope": " ".join(scopes),
    }

from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional

# ======================
# TOKEN SCHEMAS
# ======================

class Token(BaseModel):
    access_token: str
    token_type: str
    # Space separated subset of "read write"
    scope: str

class TokenData(BaseModel):
    username: Optional[str] = None
    scopes: List[str] = []


# ======================
# USER AUTHENTICATION SCHEMAS
# ======================

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=32, pattern=r"^[a-z0-9_]+$")
    email: EmailStr
    # Bcrypt limit is 72 bytes
    password: str = Field(..., min_length=6, max_length=72)
    first_name: Optional[str] = Field(None, max_length=127)
    last_name: Optional[str] = Field(None, max_length=127)

class LoginRequest(BaseModel):
    username: str
    password: str
    scope: str = "read write"

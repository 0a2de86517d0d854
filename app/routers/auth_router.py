from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr

from app.database import get_db
from app.logging import get_logger

from app.auth import (
    register_user,
    authenticate_user,
    create_access_token,
    get_current_user,
)


router = APIRouter(prefix="/auth", tags=["Authentication"])

logger = get_logger(__name__)


# ---------- Pydantic request models ----------

class RegisterRequest(BaseModel):
    email: EmailStr
    username: str
    password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

# ----------------- REGISTER ------------------

@router.post("/register")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    if len(payload.password) < 8:
        raise HTTPException(
            status_code=400,
            detail="Password must be at least 8 characters long",
        )

    # Usernames end up inside direct channel slugs
    if not payload.username or "/" in payload.username:
        raise HTTPException(
            status_code=400,
            detail="Username must be non-empty and cannot contain '/'",
        )

    try:
        user = register_user(
            db,
            email=payload.email,
            username=payload.username,
            password=payload.password,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("User registered", extra={"user_id": user.id})

    return {
        "message": "Registration successful",
        "user_id": user.id,
    }


# ------------------- LOGIN -------------------

@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, email=payload.email, password=payload.password)

    if not user:
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    token = create_access_token({"sub": user.id})

    return {
        "access_token": token,
        "token_type": "bearer",
    }

# -------------------- ME ---------------------

@router.get("/me")
def get_me(current_user=Depends(get_current_user)):
    return {
        "id": current_user.id,
        "email": current_user.email,
        "username": current_user.username,
        "blocking_others_count": current_user.blocking_others_count,
        "blocked_by_count": current_user.blocked_by_count,
    }

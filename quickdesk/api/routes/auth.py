import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from quickdesk.api.dependencies import get_db
from quickdesk.api.security import get_current_user
from quickdesk.core.config import settings
from quickdesk.models.user import ROLE_ADMIN, User
from quickdesk.schemas.auth_schema import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from quickdesk.services.agent_matcher import normalize_tags
from quickdesk.services.auth_service import create_access_token, hash_password, verify_password


logger = logging.getLogger(__name__)
router = APIRouter()


def _issue_token(user: User) -> str:
    return create_access_token(
        subject=str(user.id),
        claims={"email": user.email, "role": user.role},
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    if request.role == ROLE_ADMIN and request.admin_key not in settings.ADMIN_REGISTRATION_KEYS:
        raise HTTPException(status_code=403, detail="Invalid admin key")

    email = request.email.lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=409, detail="User already exists")

    user = User(
        username=request.username,
        email=email,
        password_hash=hash_password(request.password),
        role=request.role,
        specializations=normalize_tags(request.specializations),
        rating=0.0,
        total_ratings=0,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered %s '%s'", user.role, user.username)

    return TokenResponse(
        message="User registered successfully",
        access_token=_issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == request.email.lower()).first()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not verify_password(request.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return TokenResponse(
        message="Login successful",
        access_token=_issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return user

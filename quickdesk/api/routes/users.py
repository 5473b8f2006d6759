from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quickdesk.api.dependencies import get_db
from quickdesk.api.security import require_admin
from quickdesk.models.user import User
from quickdesk.schemas.auth_schema import UserResponse

router = APIRouter()


@router.get("/", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """All accounts, admin only. Password hashes never leave the server."""
    return db.query(User).order_by(User.id.asc()).all()

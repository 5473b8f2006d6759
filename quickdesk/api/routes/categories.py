from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quickdesk.api.dependencies import get_db
from quickdesk.api.security import get_current_user, require_admin
from quickdesk.models.category import Category
from quickdesk.models.user import User
from quickdesk.schemas.category_schema import CategoryResponse, CreateCategoryRequest
from quickdesk.services.category_service import create_category

router = APIRouter()


@router.get("/", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.query(Category).order_by(Category.id.asc()).all()


@router.post("/", response_model=CategoryResponse, status_code=201)
def add_category(
    request: CreateCategoryRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return create_category(db, request.name)

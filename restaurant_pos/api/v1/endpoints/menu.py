"""Menu category and item endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant_pos.api.deps import http_error
from restaurant_pos.core.errors import PosError
from restaurant_pos.db.session import get_db
from restaurant_pos.models.menu import Category, MenuItem
from restaurant_pos.schemas.menu import CategoryCreate, CategoryResponse, MenuItemCreate, MenuItemResponse
from restaurant_pos.services import menu_service

router: APIRouter = APIRouter()


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(active_only: bool = False, db: Session = Depends(get_db)) -> list[Category]:
    return menu_service.list_categories(db, active_only=active_only)


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)) -> Category:
    try:
        return menu_service.create_category(db, **payload.model_dump())
    except PosError as exc:
        raise http_error(exc) from exc


@router.get("/items", response_model=list[MenuItemResponse])
def list_menu_items(
    category_id: int | None = None,
    available_only: bool = False,
    db: Session = Depends(get_db),
) -> list[MenuItem]:
    return menu_service.list_menu_items(db, category_id=category_id, available_only=available_only)


@router.post("/items", response_model=MenuItemResponse, status_code=201)
def create_menu_item(payload: MenuItemCreate, db: Session = Depends(get_db)) -> MenuItem:
    try:
        return menu_service.create_menu_item(db, **payload.model_dump())
    except PosError as exc:
        raise http_error(exc) from exc

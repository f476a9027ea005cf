"""Menu category and item helpers shared by the API routes."""

from decimal import Decimal

from sqlalchemy.orm import Session

from restaurant_pos.core.errors import NotFoundError
from restaurant_pos.db.session import write_transaction
from restaurant_pos.models.menu import Category, MenuItem
from restaurant_pos.utils.money import to_money


def list_categories(db: Session, *, active_only: bool = False) -> list[Category]:
    """Return categories in display order."""
    query = db.query(Category)
    if active_only:
        query = query.filter(Category.is_active.is_(True))
    return query.order_by(Category.display_order.asc(), Category.id.asc()).all()


def create_category(
    db: Session,
    *,
    name: str,
    name_ar: str,
    display_order: int = 0,
    is_active: bool = True,
) -> Category:
    with write_transaction(db, "Creating category"):
        category = Category(name=name, name_ar=name_ar, display_order=display_order, is_active=is_active)
        db.add(category)
    db.refresh(category)
    return category


def list_menu_items(
    db: Session,
    *,
    category_id: int | None = None,
    available_only: bool = False,
) -> list[MenuItem]:
    """Return menu items, optionally narrowed to one category or to sellable items."""
    query = db.query(MenuItem)
    if category_id is not None:
        query = query.filter(MenuItem.category_id == category_id)
    if available_only:
        query = query.filter(MenuItem.is_available.is_(True))
    return query.order_by(MenuItem.id.asc()).all()


def create_menu_item(
    db: Session,
    *,
    name: str,
    name_ar: str,
    price: Decimal,
    category_id: int | None = None,
    cost_price: Decimal | None = None,
    is_available: bool = True,
    image: str | None = None,
    color: str | None = None,
) -> MenuItem:
    if category_id is not None and db.get(Category, category_id) is None:
        raise NotFoundError(f"Category {category_id} not found")

    with write_transaction(db, "Creating menu item"):
        menu_item = MenuItem(
            name=name,
            name_ar=name_ar,
            category_id=category_id,
            price=to_money(price),
            cost_price=to_money(cost_price) if cost_price is not None else None,
            is_available=is_available,
            image=image,
            color=color,
            order_count=0,
        )
        db.add(menu_item)
    db.refresh(menu_item)
    return menu_item

"""API v1 router composition."""

from fastapi import APIRouter

from restaurant_pos.api.v1.endpoints import menu, orders, payments, reports, settings, tables, tickets

api_router: APIRouter = APIRouter()
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(payments.router, prefix="/orders", tags=["payments"])
api_router.include_router(tickets.router, tags=["tickets"])
api_router.include_router(menu.router, prefix="/menu", tags=["menu"])
api_router.include_router(tables.router, prefix="/tables", tags=["tables"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])

"""Reporting endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant_pos.db.session import get_db
from restaurant_pos.schemas.report import StationStats
from restaurant_pos.services.report_service import get_stats

router: APIRouter = APIRouter()


@router.get("/stats", response_model=StationStats)
def read_stats(db: Session = Depends(get_db)) -> StationStats:
    return get_stats(db)

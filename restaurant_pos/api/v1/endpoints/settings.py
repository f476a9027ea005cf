"""Settings and language endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant_pos.api.deps import get_station, http_error
from restaurant_pos.core.errors import PosError
from restaurant_pos.db.session import get_db
from restaurant_pos.schemas.settings import LanguagePayload, RestaurantSettings
from restaurant_pos.services.station import StationContext

router: APIRouter = APIRouter()


@router.get("", response_model=RestaurantSettings)
def read_settings(station: StationContext = Depends(get_station)) -> RestaurantSettings:
    return station.get_settings()


@router.put("", response_model=RestaurantSettings)
def replace_settings(
    payload: RestaurantSettings,
    db: Session = Depends(get_db),
    station: StationContext = Depends(get_station),
) -> RestaurantSettings:
    """Replace the whole settings record; nothing changes if the save fails."""
    try:
        return station.update_settings(db, payload)
    except PosError as exc:
        raise http_error(exc) from exc


@router.get("/language", response_model=LanguagePayload)
def read_language(station: StationContext = Depends(get_station)) -> LanguagePayload:
    return LanguagePayload(language=station.get_language())


@router.put("/language", response_model=LanguagePayload)
def change_language(payload: LanguagePayload, station: StationContext = Depends(get_station)) -> LanguagePayload:
    try:
        return LanguagePayload(language=station.set_language(payload.language))
    except PosError as exc:
        raise http_error(exc) from exc

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import AwareDatetime, BaseModel, Field
from services.errors import ReservationFailed
from services.reservations import ReservationsService

router = APIRouter(prefix="/reservations", tags=["reservations"])


class ReservationIn(BaseModel):
    user_id: int = Field(gt=0)
    car_id: int = Field(gt=0)
    start_date: AwareDatetime
    end_date: AwareDatetime


class ReservationPatch(BaseModel):
    user_id: Optional[int] = Field(default=None, gt=0)
    car_id: Optional[int] = Field(default=None, gt=0)
    start_date: Optional[AwareDatetime] = None
    end_date: Optional[AwareDatetime] = None


class ReservationOut(BaseModel):
    id: int
    user_id: int
    car_id: int
    start_date: datetime
    end_date: datetime
    duration_days: int


class ReservationSummary(BaseModel):
    id: int
    user_id: int
    start_date: datetime
    end_date: datetime
    duration_days: int


def get_reservations_service(request: Request) -> ReservationsService:
    return request.app.state.reservations_service


def _to_http(exc: ReservationFailed) -> HTTPException:
    # detail stays generic whatever went wrong underneath
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@router.post("", status_code=201, response_model=ReservationOut)
def create_reservation(payload: ReservationIn,
                       service: ReservationsService = Depends(get_reservations_service)):
    try:
        return service.create_reservation(
            payload.user_id, payload.car_id, payload.start_date, payload.end_date
        )
    except ReservationFailed as e:
        raise _to_http(e) from e


@router.patch("/{reservation_id}", response_model=ReservationOut)
def update_reservation(reservation_id: int, payload: ReservationPatch,
                       service: ReservationsService = Depends(get_reservations_service)):
    try:
        return service.update_reservation(reservation_id, payload.model_dump(exclude_unset=True))
    except ReservationFailed as e:
        raise _to_http(e) from e


@router.get("", response_model=list[ReservationSummary])
def list_reservations(service: ReservationsService = Depends(get_reservations_service)):
    return service.get_reservations_with_duration()

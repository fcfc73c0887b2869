from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import AwareDatetime
from services.cars import CarsService

router = APIRouter(prefix="/cars", tags=["cars"])


def get_cars_service(request: Request) -> CarsService:
    return request.app.state.cars_service


@router.get("/{car_id}/availability")
def car_availability(car_id: int, start_date: AwareDatetime, end_date: AwareDatetime,
                     service: CarsService = Depends(get_cars_service)):
    if end_date <= start_date:
        raise HTTPException(status_code=400, detail="end_date must be after start_date")
    available = service.is_car_available(car_id, start_date, end_date)
    return {"car_id": car_id, "start_date": start_date, "end_date": end_date, "available": available}

# app.py
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from db import create_pool
from routers import cars, reservations
from services.cars import CarsService
from services.reservations import ReservationsService

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # one pool for the whole process, shared by every service
    pool = create_pool()
    pool.open()
    cars_service = CarsService(pool)
    app.state.cars_service = cars_service
    app.state.reservations_service = ReservationsService(pool, cars_service)
    logger.info("Database pool opened")
    try:
        yield
    finally:
        pool.close()
        logger.info("Database pool closed")


app = FastAPI(title="Car Rental Reservations API", lifespan=lifespan)

# CORS
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}

# API Routers
app.include_router(cars.router)
app.include_router(reservations.router)

from datetime import datetime

from psycopg_pool import ConnectionPool

from services.availability import car_is_available


class CarsService:
    """Availability oracle, answered from the stored reservations."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def is_car_available(self, car_id: int, start_date: datetime, end_date: datetime, conn=None) -> bool:
        # an open connection joins the caller's transaction
        if conn is not None:
            return car_is_available(conn, car_id, start_date, end_date)
        with self.pool.connection() as conn:
            return car_is_available(conn, car_id, start_date, end_date)

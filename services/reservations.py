import logging
from datetime import datetime, timedelta

import psycopg
from psycopg_pool import ConnectionPool

from services.availability import lock_car
from services.cars import CarsService
from services.errors import (
    CREATE_FAILED,
    UPDATE_FAILED,
    ConflictError,
    NotFoundError,
    ReservationError,
    ReservationFailed,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

# columns a patch may touch; duration_days is always derived
UPDATABLE_FIELDS = ("user_id", "car_id", "start_date", "end_date")

RESERVATION_COLUMNS = "id, user_id, car_id, start_date, end_date, duration_days"


def calculate_duration(start_date: datetime, end_date: datetime) -> int:
    """Whole days between the two instants; partial days round up."""
    return -((start_date - end_date) // ONE_DAY)


def _check_order(start_date, end_date):
    try:
        reversed_range = end_date <= start_date
    except TypeError as e:
        # one date carries a timezone and the other doesn't
        raise ValidationError(f"Dates are not comparable: {e}") from e
    if reversed_range:
        raise ValidationError("End date cannot be before start date")


def _insert_reservation(conn, fields: dict) -> dict:
    return conn.execute(f"""
        INSERT INTO public.reservations (
          user_id, car_id, start_date, end_date, duration_days
        ) VALUES (
          %(user_id)s, %(car_id)s, %(start_date)s, %(end_date)s, %(duration_days)s
        )
        RETURNING {RESERVATION_COLUMNS}
    """, fields).fetchone()


def _update_reservation(conn, reservation_id: int, fields: dict) -> dict | None:
    updates = [f"{name} = %({name})s" for name in fields]
    params = {**fields, "reservation_id": reservation_id}
    return conn.execute(f"""
        UPDATE public.reservations
           SET {', '.join(updates)}
         WHERE id = %(reservation_id)s
        RETURNING {RESERVATION_COLUMNS}
    """, params).fetchone()


def _select_reservations(conn) -> list[dict]:
    return conn.execute("""
        SELECT id, user_id, start_date, end_date, duration_days
        FROM public.reservations
    """).fetchall()


class ReservationsService:
    def __init__(self, pool: ConnectionPool, cars: CarsService | None = None):
        self.pool = pool
        self.cars = cars or CarsService(pool)

    def create_reservation(self, user_id: int, car_id: int, start_date: datetime, end_date: datetime) -> dict:
        """
        Book a car for [start_date, end_date).

        The availability check and the insert share one transaction holding a
        per-car advisory lock, so concurrent bookings of one car can't both
        pass the check. Any failure surfaces as ReservationFailed(CREATE_FAILED).
        """
        try:
            _check_order(start_date, end_date)

            with self.pool.connection() as conn, conn.transaction():
                lock_car(conn, car_id)
                if not self.cars.is_car_available(car_id, start_date, end_date, conn=conn):
                    raise ConflictError("Car is already booked for the selected dates")

                reservation = _insert_reservation(conn, {
                    "user_id": user_id,
                    "car_id": car_id,
                    "start_date": start_date,
                    "end_date": end_date,
                    "duration_days": calculate_duration(start_date, end_date),
                })
        except ReservationError as e:
            logger.error(f"Error creating reservation: {e}")
            raise ReservationFailed(CREATE_FAILED, reason=e) from e
        except psycopg.Error as e:
            logger.error(f"Error creating reservation: {e}")
            raise ReservationFailed(CREATE_FAILED, reason=StoreError(str(e))) from e
        except Exception as e:
            logger.exception("Unexpected error creating reservation")
            raise ReservationFailed(CREATE_FAILED, reason=StoreError(str(e))) from e

        logger.info(f"Created reservation {reservation['id']} for car {car_id}")
        return reservation

    def update_reservation(self, reservation_id: int, new_data: dict) -> dict:
        """
        Apply a partial patch. Absent or None fields keep their stored value.
        duration_days is recomputed only when both dates are in the patch.

        Availability is not re-checked here, so moving dates can double-book.
        """
        try:
            fields = {
                name: new_data[name]
                for name in UPDATABLE_FIELDS
                if new_data.get(name) is not None
            }
            if not fields:
                raise ValidationError("No fields to update")

            start_date = fields.get("start_date")
            end_date = fields.get("end_date")
            if start_date is not None and end_date is not None:
                _check_order(start_date, end_date)
                fields["duration_days"] = calculate_duration(start_date, end_date)

            with self.pool.connection() as conn:
                reservation = _update_reservation(conn, reservation_id, fields)
            if reservation is None:
                raise NotFoundError("Reservation not found")
        except ReservationError as e:
            logger.error(f"Error updating reservation {reservation_id}: {e}")
            raise ReservationFailed(UPDATE_FAILED, reason=e) from e
        except psycopg.errors.CheckViolation as e:
            # single-date patches are only ordered by the table's CHECK
            logger.error(f"Error updating reservation {reservation_id}: {e}")
            reason = ValidationError("End date cannot be before start date")
            raise ReservationFailed(UPDATE_FAILED, reason=reason) from e
        except psycopg.Error as e:
            logger.error(f"Error updating reservation {reservation_id}: {e}")
            raise ReservationFailed(UPDATE_FAILED, reason=StoreError(str(e))) from e
        except Exception as e:
            logger.exception(f"Unexpected error updating reservation {reservation_id}")
            raise ReservationFailed(UPDATE_FAILED, reason=StoreError(str(e))) from e

        logger.info(f"Updated reservation {reservation_id}")
        return reservation

    def get_reservations_with_duration(self) -> list[dict]:
        with self.pool.connection() as conn:
            return _select_reservations(conn)

from datetime import datetime


def car_is_available(conn, car_id: int, start_date: datetime, end_date: datetime) -> bool:
    """
    True if the car has no reservation overlapping [start_date, end_date).
    Uses the Postgres tstzrange overlap operator (&&); touching ends don't clash.
    """
    sql = """
    select 1
    from public.reservations r
    where r.car_id = %(car_id)s
      and tstzrange(r.start_date, r.end_date, '[)') && tstzrange(%(s)s, %(e)s, '[)')
    limit 1;
    """
    row = conn.execute(sql, {"car_id": car_id, "s": start_date, "e": end_date}).fetchone()
    return row is None


def lock_car(conn, car_id: int) -> None:
    """
    Serialize writers for one car until the current transaction ends.
    Must run inside conn.transaction().
    """
    conn.execute("select pg_advisory_xact_lock(%(car_id)s)", {"car_id": car_id})

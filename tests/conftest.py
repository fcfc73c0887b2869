"""Fake pool/connection objects standing in for psycopg_pool and psycopg."""

from contextlib import contextmanager

import pytest


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)


class FakeConnection:
    """
    Records every statement and answers from scripted rows.

    respond("insert into", [row]) makes any statement containing that
    fragment (case-insensitive) return the rows. fail("update", exc) raises.
    """

    def __init__(self):
        self.executed = []
        self.transactions = 0
        self._responses = []

    def respond(self, fragment, rows):
        self._responses.append((fragment.lower(), rows))

    def fail(self, fragment, exc):
        self._responses.append((fragment.lower(), exc))

    def execute(self, sql, params=None):
        normalized = " ".join(sql.split())
        self.executed.append((normalized, params))
        for fragment, answer in self._responses:
            if fragment in normalized.lower():
                if isinstance(answer, Exception):
                    raise answer
                return FakeCursor(answer)
        return FakeCursor([])

    @contextmanager
    def transaction(self):
        self.transactions += 1
        yield

    def statements(self, fragment):
        return [(sql, params) for sql, params in self.executed if fragment.lower() in sql.lower()]


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.checkouts = 0

    @contextmanager
    def connection(self):
        self.checkouts += 1
        yield self.conn


class StubCars:
    def __init__(self, available=True):
        self.available = available
        self.calls = []

    def is_car_available(self, car_id, start_date, end_date, conn=None):
        self.calls.append((car_id, start_date, end_date, conn))
        return self.available


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def pool(conn):
    return FakePool(conn)


@pytest.fixture
def make_cars():
    """make_cars(available=False) builds an availability oracle with a fixed answer."""
    def _make(available=True):
        return StubCars(available=available)
    return _make

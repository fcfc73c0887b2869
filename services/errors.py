"""Errors raised by the reservation services.

Internal failures are tagged (validation / not found / conflict / store) so
they stay distinguishable in logs and tests. At the service boundary they are
collapsed into a ReservationFailed carrying one generic message.
"""

CREATE_FAILED = "Failed to create reservation. Please try again later."
UPDATE_FAILED = "Failed to update reservation. Please try again later."


class ReservationError(Exception):
    status_code = 500


class ValidationError(ReservationError):
    status_code = 400


class NotFoundError(ReservationError):
    status_code = 404


class ConflictError(ReservationError):
    status_code = 409


class StoreError(ReservationError):
    status_code = 500


class ReservationFailed(Exception):
    """Caller-facing failure. `reason` holds the internal ReservationError."""

    def __init__(self, message: str, reason: ReservationError):
        super().__init__(message)
        self.message = message
        self.reason = reason

    @property
    def status_code(self) -> int:
        return self.reason.status_code

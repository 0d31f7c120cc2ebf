"""
Domain errors raised by the service layer.

Routers let these propagate; the handlers registered in ``fleetos.main``
turn them into JSON responses with the matching status code.
"""

from fastapi import status


class FleetError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(FleetError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(FleetError):
    status_code = status.HTTP_409_CONFLICT


class InvalidTransitionError(ConflictError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move work order from '{current}' to '{requested}'.")
        self.current = current
        self.requested = requested

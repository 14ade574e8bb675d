"""Domain errors raised by the service layer.

Each one is an HTTPException so the routers can let them propagate untouched.
"""

from fastapi import HTTPException


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class UnauthorizedError(HTTPException):
    """Caller does not own the resource or lacks the required role"""

    def __init__(self, detail: str = "Not authorized"):
        super().__init__(status_code=403, detail=detail)


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=400, detail=detail)


class ConflictError(HTTPException):
    """Requested time range overlaps a booking that still holds the spot"""

    def __init__(self, detail: str = "Time range is already booked"):
        super().__init__(status_code=409, detail=detail)


class InvalidStateError(HTTPException):
    def __init__(self, detail: str = "Operation not allowed in the current state"):
        super().__init__(status_code=409, detail=detail)


class TransientStoreError(HTTPException):
    def __init__(self, detail: str = "Storage temporarily unavailable. Please try again."):
        super().__init__(status_code=503, detail=detail)

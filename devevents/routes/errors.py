from fastapi import HTTPException

from devevents.core.errors import (
    DevEventsError,
    DuplicateConstraintError,
    ReferentialError,
    StorageError,
    ValidationError,
)


def to_http_exception(e: DevEventsError) -> HTTPException:
    """Map a persistence-layer error to the HTTP response callers see."""
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail={"field": e.field, "message": e.reason})
    if isinstance(e, ReferentialError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, DuplicateConstraintError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, StorageError):
        return HTTPException(status_code=503, detail="Storage is unavailable, please try again later.")
    return HTTPException(status_code=500, detail=str(e))

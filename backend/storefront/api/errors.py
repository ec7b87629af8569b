from fastapi import HTTPException

from storefront.services.exceptions import (
    ConcurrentModification,
    CounterUnavailable,
    InvalidInput,
    InvalidTransition,
    NotFound,
    SelectionInvalid,
    StorefrontException,
)


def to_http(exc: StorefrontException) -> HTTPException:
    """Translate a service error into the HTTP error the routers raise."""
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, SelectionInvalid):
        return HTTPException(
            status_code=422,
            detail={
                "message": "Invalid option selection",
                "violations": [v.model_dump() for v in exc.violations],
            },
        )
    if isinstance(exc, InvalidTransition):
        return HTTPException(
            status_code=409,
            detail={
                "message": str(exc),
                "current": exc.current,
                "requested": exc.requested,
            },
        )
    if isinstance(exc, ConcurrentModification):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, CounterUnavailable):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, InvalidInput):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail="Internal error")

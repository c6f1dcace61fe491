"""
Request context shared by the routers.

Tenant and actor identify every call. They come from the
X-Tenant-Id and X-Actor-Id headers; authentication happens in
front of this service.
"""

import uuid

from fastapi import Header, HTTPException

from erp_ledger.exceptions import LedgerError
from erp_ledger.schemas.posting import ResultError


# Error code -> HTTP status; anything else is a 400
STATUS_FOR_CODE = {
    "not_found": 404,
    "source_already_posted": 409,
    "already_reversed": 409,
}


def get_tenant_id(x_tenant_id: uuid.UUID = Header()) -> uuid.UUID:
    return x_tenant_id


def get_actor_id(x_actor_id: uuid.UUID = Header()) -> uuid.UUID:
    return x_actor_id


def result_error(error: ResultError) -> HTTPException:
    """HTTP error for a failed PostingResult or ReversalResult."""
    return HTTPException(
        status_code=STATUS_FOR_CODE.get(error.code, 400),
        detail=error.model_dump(mode="json"),
    )


def http_error(exc: ValueError) -> HTTPException:
    """HTTP error for an exception raised by a service."""
    if isinstance(exc, LedgerError):
        return result_error(ResultError.from_exception(exc))
    return HTTPException(status_code=400, detail=str(exc))

"""
HTTP routes.

Each route decodes its input, calls exactly one aggregator operation
and maps the outcome to a status code:

    Created           -> 201
    MalformedInput    -> 422
    StaleOrFuture     -> 204
    Cleared           -> 204
    Statistics        -> 200
    Denied            -> 401
    Empty             -> 204
    LocationSet       -> 201
    InvalidLocation   -> 400
    LocationCleared   -> 205

Bodies that cannot be decoded at all are answered with 400 by the
validation error handler registered in the app factory.

Handlers are plain `def`: FastAPI runs them in its thread pool, and the
aggregator's lock keeps concurrent requests consistent.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse

from txstats import __version__
from txstats.api.schemas import (
    HealthPayload,
    LocationPayload,
    StatisticsPayload,
    TransactionPayload,
)
from txstats.audit import create_correlation_id
from txstats.core import Aggregator
from txstats.models.transaction import Outcome

router = APIRouter()

SERVICE_NAME = "transaction-statistics"


def get_aggregator(request: Request) -> Aggregator:
    """The single aggregator built at startup."""
    return request.app.state.aggregator


def get_correlation_id(
    x_correlation_id: Optional[str] = Header(default=None),
) -> UUID:
    """Use the caller's X-Correlation-ID when it is a UUID, else mint one."""
    if x_correlation_id:
        try:
            return UUID(x_correlation_id)
        except ValueError:
            pass
    return create_correlation_id()


def invalid_input(status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": "invalid input"})


# --- Transactions ---

@router.post("/transaction")
def create_transaction(
    payload: TransactionPayload,
    aggregator: Aggregator = Depends(get_aggregator),
    correlation_id: UUID = Depends(get_correlation_id),
):
    """Insert a new transaction."""
    result = aggregator.admit(
        payload.amount,
        payload.timestamp,
        correlation_id=correlation_id,
    )

    if result.outcome == Outcome.MALFORMED_INPUT:
        return invalid_input(422)
    if result.outcome == Outcome.STALE_OR_FUTURE:
        return Response(status_code=204)

    return JSONResponse(status_code=201, content=result.message)


@router.delete("/transaction")
def delete_transactions(
    aggregator: Aggregator = Depends(get_aggregator),
    correlation_id: UUID = Depends(get_correlation_id),
):
    """Delete every transaction."""
    aggregator.reset(correlation_id=correlation_id)
    return Response(status_code=204)


# --- Statistics ---

@router.get("/statistics")
def get_statistics(
    location: Optional[str] = Header(default=None),
    aggregator: Aggregator = Depends(get_aggregator),
    correlation_id: UUID = Depends(get_correlation_id),
):
    """Statistics over every transaction since the last reset."""
    result = aggregator.snapshot(location, correlation_id=correlation_id)

    if result.outcome == Outcome.DENIED:
        return JSONResponse(
            status_code=401,
            content={"detail": "unauthorized"},
        )
    if result.outcome == Outcome.EMPTY:
        return Response(status_code=204)

    body = StatisticsPayload.from_statistics(result.statistics)
    return JSONResponse(status_code=200, content=body.model_dump())


# --- Location ---

@router.post("/location")
def set_location(
    payload: LocationPayload,
    aggregator: Aggregator = Depends(get_aggregator),
    correlation_id: UUID = Depends(get_correlation_id),
):
    """Update the account's city."""
    result = aggregator.set_location(payload.city, correlation_id=correlation_id)

    if result.outcome == Outcome.INVALID_LOCATION:
        return invalid_input(400)

    return JSONResponse(status_code=201, content=result.message)


@router.put("/location")
def reset_location(
    aggregator: Aggregator = Depends(get_aggregator),
    correlation_id: UUID = Depends(get_correlation_id),
):
    """Reset the account's city to unset."""
    aggregator.clear_location(correlation_id=correlation_id)
    return Response(status_code=205)


# --- Health Check ---

@router.get("/health", response_model=HealthPayload)
def health_check():
    """Health check endpoint."""
    return HealthPayload(status="healthy", service=SERVICE_NAME, version=__version__)

"""
HTTP client for the Transaction Statistics API.

Maps every HTTP response back onto the core's Outcome values, so callers
(the dashboard, scripts, tests) see the same distinguishable outcomes
the aggregator produced.

Only transport failures are retried. A 204 or 401 is an answer, not a
failure, and is never retried.
"""

from datetime import datetime
from typing import Any, Optional

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from txstats.api.schemas import StatisticsPayload
from txstats.config import ClientSettings
from txstats.models.transaction import Outcome, SnapshotResult


class TransactionStatsError(Exception):
    """Base exception for client errors."""
    pass


class ServiceUnavailableError(TransactionStatsError):
    """The API could not be reached after all retry attempts."""
    pass


class UnexpectedResponseError(TransactionStatsError):
    """The API answered with a status this client does not understand."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Unexpected response status {status_code}: {body[:200]}")


class TransactionStatsClient:
    """
    Synchronous client for the five account operations.

    Usage:
        client = TransactionStatsClient()
        client.create_transaction(120.5, datetime.now(ZoneInfo("Asia/Kolkata")))
        result = client.get_statistics(location="bangalore")
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        http_client: Optional[httpx.Client] = None,
        backoff_multiplier: float = 1.0,
    ):
        """
        Args:
            settings: Base URL, timeout and retry attempts.
            http_client: Pre-built client (e.g. a test client). When given,
                        its own base URL and timeout are used.
            backoff_multiplier: Scale for exponential backoff between retries.
        """
        self._settings = settings or ClientSettings()
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            base_url=self._settings.base_url,
            timeout=self._settings.timeout_seconds,
        )
        self._backoff = backoff_multiplier

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "TransactionStatsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        retrying = Retrying(
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(multiplier=self._backoff, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    response = self._http.request(method, path, json=json, headers=headers)
        except httpx.TransportError as e:
            raise ServiceUnavailableError(f"{method} {path} failed: {e}") from e
        return response

    def create_transaction(
        self,
        amount: float,
        timestamp: Optional[datetime],
    ) -> Outcome:
        """
        Submit a transaction.

        Returns:
            CREATED, MALFORMED_INPUT or STALE_OR_FUTURE
        """
        body = {
            "amount": amount,
            "timestamp": timestamp.isoformat() if timestamp else None,
        }
        response = self._request("POST", "/transaction", json=body)

        if response.status_code == 201:
            return Outcome.CREATED
        if response.status_code in (400, 422):
            return Outcome.MALFORMED_INPUT
        if response.status_code == 204:
            return Outcome.STALE_OR_FUTURE
        raise UnexpectedResponseError(response.status_code, response.text)

    def delete_transactions(self) -> Outcome:
        response = self._request("DELETE", "/transaction")
        if response.status_code == 204:
            return Outcome.CLEARED
        raise UnexpectedResponseError(response.status_code, response.text)

    def get_statistics(self, location: Optional[str] = None) -> SnapshotResult:
        """
        Read statistics, asserting `location` (sent as the location header).
        """
        headers = {"location": location} if location else None
        response = self._request("GET", "/statistics", headers=headers)

        if response.status_code == 200:
            payload = StatisticsPayload.model_validate(response.json())
            return SnapshotResult(
                outcome=Outcome.STATISTICS,
                message="ok",
                statistics=payload.to_statistics(),
            )
        if response.status_code == 401:
            return SnapshotResult(outcome=Outcome.DENIED, message="unauthorized")
        if response.status_code == 204:
            return SnapshotResult(outcome=Outcome.EMPTY, message="transactions not found")
        raise UnexpectedResponseError(response.status_code, response.text)

    def set_location(self, city: str) -> Outcome:
        """
        Returns:
            LOCATION_SET or INVALID_LOCATION
        """
        response = self._request("POST", "/location", json={"city": city})
        if response.status_code == 201:
            return Outcome.LOCATION_SET
        if response.status_code == 400:
            return Outcome.INVALID_LOCATION
        raise UnexpectedResponseError(response.status_code, response.text)

    def reset_location(self) -> Outcome:
        response = self._request("PUT", "/location")
        if response.status_code == 205:
            return Outcome.LOCATION_CLEARED
        raise UnexpectedResponseError(response.status_code, response.text)

    def health(self) -> dict:
        response = self._request("GET", "/health")
        if response.status_code != 200:
            raise UnexpectedResponseError(response.status_code, response.text)
        return response.json()

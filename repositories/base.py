"""
Base Repository

Provides the foundation for all API repository classes: one shared
requests.Session, URL building from ApiConfig, timing logs, and translation
of transport/HTTP failures into ApiError.

Design Principles:
1. Dependency Injection - Receives ApiConfig (and optionally a Session), doesn't create config
2. Single failure type - Every backend failure surfaces as ApiError
3. Consistent interface - All repositories inherit _get/_post/_put/_delete
"""

from typing import Any, Mapping, Optional
import logging
import time

import requests

from config import ApiConfig
from logging_config import setup_logging

logger = setup_logging(__name__)


class ApiError(Exception):
    """Raised when the backend API is unreachable or returns a non-2xx status.

    Attributes:
        status_code: HTTP status, None for transport failures (timeouts, DNS, TLS)
        message: Short description including the method and path
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class BaseRepository:
    """
    Base class for all API repository implementations.

    Attributes:
        api: ApiConfig with base url, timeout and TLS settings
        session: requests.Session used for every call
    """

    def __init__(
        self,
        api: ApiConfig,
        session: Optional[requests.Session] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """
        Initialize repository with API configuration.

        Args:
            api: ApiConfig instance
            session: Optional session (tests pass a Mock)
            logger_instance: Optional logger (defaults to module logger)
        """
        self.api = api
        self.session = session or requests.Session()
        self._logger = logger_instance or logger

    def _request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None if empty).

        Raises:
            ApiError: On connection errors, timeouts, non-2xx responses or
                an undecodable body.
        """
        url = self.api.url(path)
        start = time.perf_counter()
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.api.timeout,
                verify=self.api.verify_ssl,
            )
        except requests.RequestException as e:
            self._logger.error(f"{method} {path} failed: {e}")
            raise ApiError(f"{method} {path} failed: {e}") from e

        elapsed = round((time.perf_counter() - start) * 1000, 2)
        self._logger.info(f"{method} {path} -> {response.status_code} ({elapsed} ms)")

        if not 200 <= response.status_code < 300:
            raise ApiError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                f"{method} {path} returned invalid JSON",
                status_code=response.status_code,
            ) from e

    def _get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._request("GET", path, params=params)

    def _post(self, path: str, payload: Any) -> Any:
        return self._request("POST", path, json=payload)

    def _put(self, path: str, payload: Any) -> Any:
        return self._request("PUT", path, json=payload)

    def _delete(self, path: str) -> Any:
        return self._request("DELETE", path)

"""
HTTP client for the ticketing backend.
"""

import logging
import time
from typing import Any, Dict, Optional
from uuid import uuid4

import httpx

from ..cache import KeyValueStore, StorageKeys, create_store
from ..config import get_settings
from ..utils.exceptions import (
    ApiRequestError,
    AuthenticationError,
    NotFoundError,
    SeatAlreadyBookedError,
)
from ..utils.logging_config import request_id_var
from ..utils.retry import RetryConfig, TRANSIENT_ERRORS, retry_async

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Thin wrapper around ``httpx.AsyncClient``.

    Adds the bearer token from the session store, tags every call with an
    ``X-Request-ID``, retries GET requests that failed before a response
    arrived, and maps error responses onto the client's exception types.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        settings = get_settings()
        self.store = store or create_store()
        self.retry_config = retry_config or RetryConfig.from_settings()
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout if timeout is not None else settings.api_timeout_seconds,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def _auth_headers(self) -> Dict[str, str]:
        token = await self.store.get(StorageKeys.AUTH_TOKEN)
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises:
            AuthenticationError: On 401; stored credentials are cleared
            NotFoundError: On 404
            SeatAlreadyBookedError: On 409
            ApiRequestError: On any other error status, a body that is not JSON,
                timeout or transport failure
        """
        request_id = str(uuid4())
        token = request_id_var.set(request_id)
        try:
            headers = {**(await self._auth_headers()), "X-Request-ID": request_id}
            if params:
                params = {key: value for key, value in params.items() if value is not None}

            start_time = time.time()
            if method.upper() == "GET":
                response = await retry_async(
                    self._http.request,
                    self.retry_config,
                    TRANSIENT_ERRORS,
                    method, endpoint, params=params, headers=headers,
                )
            else:
                response = await self._http.request(method, endpoint, json=json, params=params, headers=headers)
            logger.debug(
                "%s %s -> %s in %.4fs", method, endpoint, response.status_code, time.time() - start_time
            )

            if response.is_error:
                await self._raise_for_status(response, endpoint)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                logger.error("Invalid JSON response: %s %s -> %s", method, endpoint, response.status_code)
                raise ApiRequestError(
                    "Invalid JSON response", status_code=response.status_code, details={"endpoint": endpoint}
                ) from e
        except httpx.TimeoutException as e:
            logger.error("Request timeout: %s %s", method, endpoint)
            raise ApiRequestError("Request timeout", details={"endpoint": endpoint}) from e
        except httpx.TransportError as e:
            logger.error("Request failed: %s %s: %s", method, endpoint, e)
            raise ApiRequestError(f"Request failed: {e}", details={"endpoint": endpoint}) from e
        finally:
            request_id_var.reset(token)

    async def _raise_for_status(self, response: httpx.Response, endpoint: str) -> None:
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = _error_message(body) or f"HTTP {response.status_code}: {response.reason_phrase}"
        status_code = response.status_code

        if status_code == 401:
            await self.store.remove(StorageKeys.AUTH_TOKEN)
            await self.store.remove(StorageKeys.CURRENT_USER)
            raise AuthenticationError(message)
        if status_code == 404:
            raise NotFoundError(message, resource_type="endpoint", resource_id=endpoint)
        if status_code == 409:
            raise SeatAlreadyBookedError(message, details={"endpoint": endpoint})
        raise ApiRequestError(message, status_code=status_code, details={"endpoint": endpoint})

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: Any = None) -> Any:
        return await self.request("POST", endpoint, json=data)

    async def patch(self, endpoint: str, data: Any = None) -> Any:
        return await self.request("PATCH", endpoint, json=data)

    async def delete(self, endpoint: str, data: Any = None) -> Any:
        return await self.request("DELETE", endpoint, json=data)


def _error_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    for key in ("message", "detail", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None

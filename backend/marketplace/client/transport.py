"""
HTTP transport for the client: one authorization interceptor, one error
translation point.
"""

from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from marketplace.client.config import get_client_settings
from marketplace.client.errors import TransportFailure, UnexpectedError, error_from_response
from marketplace.client.session import SessionStore
from marketplace.core.logging import get_logger

logger = get_logger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your internet connection."


class BearerAuth(httpx.Auth):
    """
    Attaches the store's current token to each request and invalidates the
    store when the server answers 401. The store is read per request, so a
    logout takes effect on the very next call.
    """

    def __init__(self, store: SessionStore):
        self._store = store

    def auth_flow(self, request: httpx.Request):
        token = self._store.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        else:
            request.headers.pop("Authorization", None)

        response = yield request

        if response.status_code == 401:
            self._store.invalidate()


class ApiClient:
    def __init__(
        self,
        store: SessionStore,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_client_settings()
        self.store = store
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT,
            auth=BearerAuth(store),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def request(self, method: str, url: str, **kwargs: Any) -> dict:
        """
        Send a request and return the decoded JSON body.
        Raises a ClientError subclass for transport failures, non-2xx
        responses and ``success: false`` bodies.
        """
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("api_transport_error", method=method, url=url, error=str(e))
            raise TransportFailure(NETWORK_ERROR_MESSAGE) from e

        if response.is_error:
            error = error_from_response(response)
            logger.info(
                "api_error_response",
                method=method,
                url=url,
                status_code=response.status_code,
                error=type(error).__name__,
            )
            raise error

        try:
            body = response.json()
        except ValueError as e:
            raise UnexpectedError("Malformed response from server", status_code=response.status_code) from e

        if isinstance(body, dict) and body.get("success") is False:
            raise error_from_response(response)
        return body

    async def get(self, url: str, **kwargs: Any) -> dict:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> dict:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> dict:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> dict:
        return await self.request("DELETE", url, **kwargs)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model_cls: type[ModelT], data: Any) -> ModelT:
    """Validate a response payload; a shape mismatch is an unexpected error."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        logger.warning("api_response_invalid", model=model_cls.__name__, errors=e.error_count())
        raise UnexpectedError("Malformed response from server") from e

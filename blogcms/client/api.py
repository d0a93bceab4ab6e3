"""HTTP client for the blog API, used by the admin data-access hooks."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api/v1"


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, field: str | None = None):
        self.status_code = status_code
        self.message = message
        self.field = field
        super().__init__(f"HTTP {status_code}: {message}")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500


def _clean(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None}


def _error_from(response: httpx.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = None
    message = response.reason_phrase or f"HTTP {response.status_code}"
    field = None
    if isinstance(body, dict):
        detail = body.get("detail")
        field = body.get("field")
        if isinstance(detail, str):
            message = detail
        elif isinstance(detail, list) and detail:
            # Errores de validación de FastAPI: se toma el primero.
            first = detail[0]
            message = first.get("msg", message)
            loc = first.get("loc") or []
            field = str(loc[-1]) if loc else None
    return ApiError(response.status_code, message, field)


class ApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` with bearer/API-key auth.

    Responses are decoded JSON; ``204 No Content`` yields ``None``. The
    resource groups (``categories``, ``galleries``...) mirror the API routes.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        token: str | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.token = token
        self.api_key = api_key

        self.auth = AuthResource(self)
        self.categories = Resource(self, "/categories")
        self.galleries = PublishableResource(self, "/galleries")
        self.posts = PublishableResource(self, "/posts")
        self.media = MediaResource(self, "/media")
        self.home = HomeResource(self)
        self.api_keys = Resource(self, "/api-keys")

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        elif self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
        files: Any = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=_clean(params),
                data=_clean(data),
                files=files,
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            logger.warning("API request failed", extra={"method": method, "path": path, "error": str(exc)})
            raise

        if response.is_error:
            raise _error_from(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()


# ---------------- Resource groups ----------------
class Resource:
    def __init__(self, client: ApiClient, path: str) -> None:
        self.client = client
        self.path = path

    async def list(self, **params: Any) -> Any:
        return await self.client.request("GET", self.path, params=params)

    async def get(self, item_id: str, **params: Any) -> Any:
        return await self.client.request("GET", f"{self.path}/{item_id}", params=params)

    async def get_by_slug(self, slug: str, **params: Any) -> Any:
        return await self.client.request("GET", f"{self.path}/slug/{slug}", params=params)

    async def create(self, data: Mapping[str, Any]) -> Any:
        return await self.client.request("POST", self.path, json=dict(data))

    async def update(self, item_id: str, data: Mapping[str, Any], **params: Any) -> Any:
        return await self.client.request("PUT", f"{self.path}/{item_id}", json=dict(data), params=params)

    async def delete(self, item_id: str, **params: Any) -> None:
        await self.client.request("DELETE", f"{self.path}/{item_id}", params=params)


class PublishableResource(Resource):
    async def publish(self, item_id: str, **params: Any) -> Any:
        return await self.client.request("POST", f"{self.path}/{item_id}/publish", params=params)

    async def unpublish(self, item_id: str, **params: Any) -> Any:
        return await self.client.request("POST", f"{self.path}/{item_id}/unpublish", params=params)


class MediaResource(Resource):
    async def upload(
        self,
        filename: str,
        content: bytes,
        *,
        content_type: str = "application/octet-stream",
        alternative_text: str | None = None,
        caption: str | None = None,
    ) -> Any:
        return await self.client.request(
            "POST",
            self.path,
            files={"file": (filename, content, content_type)},
            data={"alternative_text": alternative_text, "caption": caption},
        )


class HomeResource:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def get(self) -> Any:
        return await self.client.request("GET", "/home")

    async def update(self, data: Mapping[str, Any]) -> Any:
        return await self.client.request("PUT", "/home", json=dict(data))


class AuthResource:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def login(self, email: str, password: str) -> Any:
        result = await self.client.request("POST", "/auth/login", data={"username": email, "password": password})
        self.client.token = result["access_token"]
        return result

    async def logout(self) -> None:
        try:
            await self.client.request("POST", "/auth/logout")
        finally:
            self.client.token = None

    async def me(self) -> Any:
        return await self.client.request("GET", "/auth/me")

"""HTTP client for the WordPress REST API."""

from __future__ import annotations

import asyncio
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final, cast

import httpx

from mediafixer.adapters.http_resilience import ResilientClient
from mediafixer.domain.ports import CONTAINER_TYPES, CONTENT_STATUSES

from .schema import (
    CategoryPayload,
    ErrorResponse,
    MediaIdPayload,
    MediaPayload,
    PostPayload,
    PostTypePayload,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from mediafixer.config.wordpress import WordPressConfig

log = getLogger(__name__)

MAX_PER_PAGE: Final[int] = 100
INVALID_PAGE_CODE: Final[str] = "rest_post_invalid_page_number"
CONTAINER_ENDPOINTS: Final[dict[str, str]] = {"post": "posts", "page": "pages"}
# Editor and menu types that never parent an upload.
INTERNAL_TYPES: Final[frozenset[str]] = frozenset(
    {
        "attachment",
        "nav_menu_item",
        "wp_block",
        "wp_font_face",
        "wp_font_family",
        "wp_global_styles",
        "wp_navigation",
        "wp_template",
        "wp_template_part",
    }
)

type JSONPayload = dict[str, object] | list[object]


class WordPressAPIError(RuntimeError):
    """Raised when the REST API answers with an error status."""

    def __init__(self, message: str, *, status_code: int, code: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def _default_client_factory(config: WordPressConfig) -> ResilientClient:
    return ResilientClient(
        config.resilience,
        auth=httpx.BasicAuth(config.user, config.app_password),
    )


def _api_error(response: httpx.Response) -> WordPressAPIError:
    code: str | None = None
    message = response.reason_phrase or "WordPress API error"
    try:
        error = ErrorResponse.model_validate(response.json())
    except ValueError:
        pass
    else:
        code = error.code
        message = error.message or message
    return WordPressAPIError(
        f"WordPress API error {response.status_code}: {message}",
        status_code=response.status_code,
        code=code,
    )


def _newest(posts: Sequence[PostPayload]) -> PostPayload | None:
    if not posts:
        return None
    return max(posts, key=lambda post: post.date_gmt or datetime.min)


class WordPressClient:
    """Low-level client for the ``wp/v2`` endpoints the fixer uses."""

    def __init__(
        self,
        *,
        config: WordPressConfig,
        client_factory: Callable[[WordPressConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or _default_client_factory

    @property
    def api_url(self) -> str:
        return self._config.api_url

    def list_media_ids(self, *, offset: int, count: int) -> list[int]:
        return asyncio.run(self._list_media_ids_async(offset=offset, count=count))

    def fetch_media(self, media_id: int) -> MediaPayload | None:
        return asyncio.run(self._fetch_media_async(media_id))

    def fetch_content(self, content_id: int) -> PostPayload | None:
        return asyncio.run(self._fetch_content_async(content_id))

    def search_content(
        self,
        token: str,
        *,
        container_types: Sequence[str] = CONTAINER_TYPES,
        statuses: Sequence[str] = CONTENT_STATUSES,
    ) -> PostPayload | None:
        return asyncio.run(
            self._search_content_async(
                token,
                container_types=container_types,
                statuses=statuses,
            )
        )

    def fetch_category_slugs(self, post_id: int) -> set[str]:
        return asyncio.run(self._fetch_category_slugs_async(post_id))

    def update_media(self, media_id: int, fields: dict[str, str]) -> MediaPayload:
        return asyncio.run(self._update_media_async(media_id, fields))

    async def _list_media_ids_async(self, *, offset: int, count: int) -> list[int]:
        ids: list[int] = []
        async with self._client_factory(self._config) as client:
            while len(ids) < count:
                per_page = min(MAX_PER_PAGE, count - len(ids))
                params: dict[str, str | int] = {
                    "media_type": "image",
                    "orderby": "id",
                    "order": "asc",
                    "per_page": per_page,
                    "offset": offset + len(ids),
                    "_fields": "id",
                }
                try:
                    payload = await self._request_json(client, "GET", "media", params=params)
                except WordPressAPIError as exc:
                    if exc.code == INVALID_PAGE_CODE:
                        break
                    raise
                batch = [MediaIdPayload.model_validate(item).id for item in _as_list(payload)]
                ids.extend(batch)
                if len(batch) < per_page:
                    break
        return ids

    async def _fetch_media_async(self, media_id: int) -> MediaPayload | None:
        async with self._client_factory(self._config) as client:
            payload = await self._request_json(
                client,
                "GET",
                f"media/{media_id}",
                params={"context": "edit"},
                allow_missing=True,
            )
        if payload is None:
            return None
        return MediaPayload.model_validate(payload)

    async def _fetch_content_async(self, content_id: int) -> PostPayload | None:
        async with self._client_factory(self._config) as client:
            payload = await self._fetch_from_endpoints(
                client, content_id, CONTAINER_ENDPOINTS.values()
            )
            if payload is None:
                # Attached parents may be any public post type, e.g. a shop product.
                endpoints = await self._custom_type_endpoints(client)
                payload = await self._fetch_from_endpoints(client, content_id, endpoints)
        if payload is None:
            return None
        return PostPayload.model_validate(payload)

    async def _fetch_from_endpoints(
        self,
        client: ResilientClient,
        content_id: int,
        endpoints: Iterable[str],
    ) -> JSONPayload | None:
        for endpoint in endpoints:
            payload = await self._request_json(
                client,
                "GET",
                f"{endpoint}/{content_id}",
                params={"context": "edit"},
                allow_missing=True,
            )
            if payload is not None:
                return payload
        return None

    async def _custom_type_endpoints(self, client: ResilientClient) -> list[str]:
        payload = await self._request_json(client, "GET", "types")
        if not isinstance(payload, dict):
            return []
        endpoints: list[str] = []
        for slug, item in payload.items():
            if slug in CONTAINER_ENDPOINTS or slug in INTERNAL_TYPES:
                continue
            post_type = PostTypePayload.model_validate(item)
            if post_type.rest_base and post_type.rest_namespace == "wp/v2":
                endpoints.append(post_type.rest_base)
        return endpoints

    async def _search_content_async(
        self,
        token: str,
        *,
        container_types: Sequence[str],
        statuses: Sequence[str],
    ) -> PostPayload | None:
        found: list[PostPayload] = []
        async with self._client_factory(self._config) as client:
            for container_type in container_types:
                endpoint = CONTAINER_ENDPOINTS.get(container_type)
                if endpoint is None:
                    log.warning("No REST endpoint for content type %r", container_type)
                    continue
                params: dict[str, str | int] = {
                    "search": token,
                    "search_columns": "post_content",
                    "status": ",".join(statuses),
                    "orderby": "date",
                    "order": "desc",
                    "per_page": 1,
                    "context": "edit",
                }
                payload = await self._request_json(client, "GET", endpoint, params=params)
                found.extend(PostPayload.model_validate(item) for item in _as_list(payload))
        return _newest(found)

    async def _fetch_category_slugs_async(self, post_id: int) -> set[str]:
        async with self._client_factory(self._config) as client:
            payload = await self._request_json(
                client,
                "GET",
                f"posts/{post_id}",
                params={"context": "edit", "_fields": "id,categories"},
                allow_missing=True,
            )
            if payload is None:
                return set()
            category_ids = PostPayload.model_validate(payload).categories
            if not category_ids:
                return set()
            categories = await self._request_json(
                client,
                "GET",
                "categories",
                params={
                    "include": ",".join(str(value) for value in category_ids),
                    "per_page": MAX_PER_PAGE,
                    "_fields": "id,slug",
                },
            )
        return {CategoryPayload.model_validate(item).slug for item in _as_list(categories)}

    async def _update_media_async(self, media_id: int, fields: dict[str, str]) -> MediaPayload:
        async with self._client_factory(self._config) as client:
            payload = await self._request_json(
                client,
                "POST",
                f"media/{media_id}",
                params={"context": "edit"},
                json=fields,
            )
        return MediaPayload.model_validate(payload)

    async def _request_json(
        self,
        client: ResilientClient,
        method: str,
        path: str,
        *,
        params: dict[str, str | int] | None = None,
        json: dict[str, str] | None = None,
        allow_missing: bool = False,
    ) -> JSONPayload | None:
        response = await client.request(method, path, params=params, json=json)
        if allow_missing and response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.is_error:
            error = _api_error(response)
            log.debug("%s %s failed: %s", method, path, error)
            raise error
        return cast("JSONPayload", response.json())


def _as_list(payload: JSONPayload | None) -> list[object]:
    if isinstance(payload, list):
        return payload
    raise WordPressAPIError("Unexpected WordPress response payload", status_code=200)

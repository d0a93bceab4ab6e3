"""Data-access hooks for the admin client.

Each read is a :class:`Query` with a stable cache key; each write is a
:class:`Mutation` whose success invalidates exactly the keys whose data it
changes. Keys:

- ``("categories",)``, ``("galleries", filters)``, ``("posts", filters)``,
  ``("media",)``, ``("home",)``, ``("apiKeys",)`` for lists
- ``(entity, id)`` for details
- ``("auth", "me")`` for the current user
"""

from __future__ import annotations

from typing import Any, Mapping

from blogcms.client.api import ApiClient
from blogcms.client.query import Mutation, Query, QueryClient

CURRENT_USER_KEY = ("auth", "me")
# Identificador que usan los formularios de alta; nunca existe en el API.
NEW_ITEM_ID = "new"


class ContentHooks:
    def __init__(self, api: ApiClient, query_client: QueryClient | None = None) -> None:
        self.api = api
        self.query_client = query_client or QueryClient()

    def _invalidate(self, *keys: tuple) -> None:
        for key in keys:
            self.query_client.invalidate_queries(key)

    def _invalidates(self, *keys: tuple) -> Any:
        return lambda *_, **__: self._invalidate(*keys)

    def _invalidates_detail(self, entity: str) -> Any:
        # (result, item_id, ...) -> lista y detalle del item afectado
        return lambda _, item_id, *__, **___: self._invalidate((entity,), (entity, item_id))

    # ---------------- Categories ----------------
    def use_categories(self) -> Query:
        return Query(self.query_client, ("categories",), self.api.categories.list)

    def use_category(self, category_id: str) -> Query:
        return Query(
            self.query_client,
            ("categories", category_id),
            lambda: self.api.categories.get(category_id),
            enabled=bool(category_id),
        )

    def use_create_category(self) -> Mutation:
        return Mutation(self.api.categories.create, on_success=self._invalidates(("categories",)))

    def use_update_category(self) -> Mutation:
        return Mutation(self.api.categories.update, on_success=self._invalidates_detail("categories"))

    def use_delete_category(self) -> Mutation:
        return Mutation(self.api.categories.delete, on_success=self._invalidates(("categories",)))

    # ---------------- Galleries ----------------
    def use_galleries(self, filters: Mapping[str, Any] | None = None) -> Query:
        return Query(
            self.query_client,
            ("galleries", filters),
            lambda: self.api.galleries.list(**(filters or {})),
        )

    def use_gallery(self, gallery_id: str) -> Query:
        return Query(
            self.query_client,
            ("galleries", gallery_id),
            lambda: self.api.galleries.get(gallery_id),
            enabled=bool(gallery_id) and gallery_id != NEW_ITEM_ID,
        )

    def use_create_gallery(self) -> Mutation:
        return Mutation(self.api.galleries.create, on_success=self._invalidates(("galleries",)))

    def use_update_gallery(self) -> Mutation:
        return Mutation(self.api.galleries.update, on_success=self._invalidates_detail("galleries"))

    def use_delete_gallery(self) -> Mutation:
        return Mutation(self.api.galleries.delete, on_success=self._invalidates(("galleries",)))

    def use_publish_gallery(self) -> Mutation:
        return Mutation(self.api.galleries.publish, on_success=self._invalidates_detail("galleries"))

    def use_unpublish_gallery(self) -> Mutation:
        return Mutation(self.api.galleries.unpublish, on_success=self._invalidates_detail("galleries"))

    # ---------------- Posts ----------------
    def use_posts(self, filters: Mapping[str, Any] | None = None) -> Query:
        return Query(
            self.query_client,
            ("posts", filters),
            lambda: self.api.posts.list(**(filters or {})),
        )

    def use_post(self, post_id: str, locale: str | None = None) -> Query:
        # Cada idioma es un item distinto; ("posts", id) sigue invalidando todos.
        key = ("posts", post_id, locale) if locale else ("posts", post_id)
        return Query(
            self.query_client,
            key,
            lambda: self.api.posts.get(post_id, locale=locale),
            enabled=bool(post_id) and post_id != NEW_ITEM_ID,
        )

    def use_create_post(self) -> Mutation:
        return Mutation(self.api.posts.create, on_success=self._invalidates(("posts",)))

    def use_update_post(self) -> Mutation:
        return Mutation(self.api.posts.update, on_success=self._invalidates_detail("posts"))

    def use_delete_post(self) -> Mutation:
        return Mutation(self.api.posts.delete, on_success=self._invalidates(("posts",)))

    def use_publish_post(self) -> Mutation:
        return Mutation(self.api.posts.publish, on_success=self._invalidates_detail("posts"))

    def use_unpublish_post(self) -> Mutation:
        return Mutation(self.api.posts.unpublish, on_success=self._invalidates_detail("posts"))

    # ---------------- Media ----------------
    def use_media(self) -> Query:
        return Query(self.query_client, ("media",), self.api.media.list)

    def use_upload_media(self) -> Mutation:
        return Mutation(self.api.media.upload, on_success=self._invalidates(("media",)))

    def use_update_media(self) -> Mutation:
        return Mutation(self.api.media.update, on_success=self._invalidates(("media",)))

    def use_delete_media(self) -> Mutation:
        return Mutation(self.api.media.delete, on_success=self._invalidates(("media",)))

    # ---------------- Home ----------------
    def use_home(self) -> Query:
        return Query(self.query_client, ("home",), self.api.home.get)

    def use_update_home(self) -> Mutation:
        return Mutation(self.api.home.update, on_success=self._invalidates(("home",)))

    # ---------------- API keys ----------------
    def use_api_keys(self) -> Query:
        return Query(self.query_client, ("apiKeys",), self.api.api_keys.list)

    def use_create_api_key(self) -> Mutation:
        return Mutation(self.api.api_keys.create, on_success=self._invalidates(("apiKeys",)))

    def use_delete_api_key(self) -> Mutation:
        return Mutation(self.api.api_keys.delete, on_success=self._invalidates(("apiKeys",)))

    # ---------------- Auth ----------------
    def use_current_user(self) -> Query:
        # Sin reintentos: un 401 debe resolverse como "no autenticado" de inmediato.
        return Query(self.query_client, CURRENT_USER_KEY, self.api.auth.me, retry=False)

    def use_login(self) -> Mutation:
        return Mutation(self.api.auth.login, on_success=self._invalidates(CURRENT_USER_KEY))

    def use_logout(self) -> Mutation:
        return Mutation(self.api.auth.logout, on_success=self._after_logout)

    def _after_logout(self, *_: Any, **__: Any) -> None:
        # El None tiene que sobrevivir al clear().
        self.query_client.clear()
        self.query_client.set_query_data(CURRENT_USER_KEY, None)

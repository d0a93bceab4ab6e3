"""Content entities: categories, galleries, posts, media and the home page."""

from __future__ import annotations

from blogcms.core.config import settings
from blogcms.entities.base import CURRENT_TIMESTAMP, Attribute, Entity, pattern

STATUSES = ("draft", "published")
SLUG_PATTERN = r"[a-z0-9]+(?:-[a-z0-9]+)*"


def _audit(with_status: bool = True) -> dict[str, Attribute]:
    fields = {
        "created_at": Attribute(required=True, default=CURRENT_TIMESTAMP, read_only=True),
        "updated_at": Attribute(required=True, default=CURRENT_TIMESTAMP, watch=True, setter=CURRENT_TIMESTAMP),
        "created_by": Attribute(),
        "updated_by": Attribute(),
    }
    if with_status:
        fields["status"] = Attribute(required=True, default="draft", choices=STATUSES)
        fields["published_at"] = Attribute()
    return fields


Category = Entity(
    "category",
    attributes={
        "id": Attribute(required=True, read_only=True),
        "name": Attribute(required=True),
        "description": Attribute(),
        "slug": Attribute(required=True, pattern=SLUG_PATTERN),
        **_audit(),
    },
    indexes={
        "primary": pattern("CATEGORY#{id}", "CATEGORY"),
    },
)

Gallery = Entity(
    "gallery",
    attributes={
        "id": Attribute(required=True, read_only=True),
        "title": Attribute(required=True),
        "description": Attribute(),
        "slug": Attribute(required=True, pattern=SLUG_PATTERN),
        "image_ids": Attribute(type="list", items="string"),
        "category_id": Attribute(),
        **_audit(),
    },
    indexes={
        "primary": pattern("GALLERY#{id}", "GALLERY"),
        "by_category": pattern("CATEGORY#{category_id}", "GALLERY#{created_at}", index="GSI1"),
    },
)

Post = Entity(
    "post",
    attributes={
        "id": Attribute(required=True, read_only=True),
        "title": Attribute(required=True),
        "content": Attribute(),
        "rich_content": Attribute(type="any"),
        "excerpt": Attribute(),
        "slug": Attribute(required=True, pattern=SLUG_PATTERN),
        "read_time_minute": Attribute(type="number"),
        "featured_picture_id": Attribute(),
        "category_id": Attribute(),
        "locale": Attribute(required=True, default=lambda: settings.DEFAULT_LOCALE),
        **_audit(),
    },
    indexes={
        "primary": pattern("POST#{id}", "POST#{locale}"),
        "by_category": pattern("CATEGORY#{category_id}", "POST#{created_at}", index="GSI1"),
        "by_status": pattern("STATUS#{status}", "POST#{published_at}", index="GSI3"),
    },
)

Media = Entity(
    "media",
    attributes={
        "id": Attribute(required=True, read_only=True),
        "name": Attribute(required=True),
        "alternative_text": Attribute(),
        "caption": Attribute(),
        "width": Attribute(type="number"),
        "height": Attribute(type="number"),
        "url": Attribute(required=True),
        "formats": Attribute(type="map"),
        "hash": Attribute(required=True),
        "ext": Attribute(required=True),
        "mime": Attribute(required=True),
        "size": Attribute(type="number", required=True),
        "provider_id": Attribute(),
        **_audit(with_status=False),
    },
    indexes={
        "primary": pattern("MEDIA#{id}", "MEDIA"),
    },
)

Home = Entity(
    "home",
    attributes={
        "id": Attribute(required=True, default="home", read_only=True),
        "title": Attribute(),
        "description": Attribute(),
        "short_description": Attribute(),
        "keywords": Attribute(),
        "hero_image_id": Attribute(),
        **_audit(),
    },
    indexes={
        "primary": pattern("HOME#{id}", "HOME"),
    },
)

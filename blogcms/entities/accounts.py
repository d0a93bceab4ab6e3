"""Entities backing authentication: users and API keys."""

from __future__ import annotations

from blogcms.entities.base import CURRENT_TIMESTAMP, Attribute, Entity, pattern

_TIMESTAMPS = {
    "created_at": Attribute(required=True, default=CURRENT_TIMESTAMP, read_only=True),
    "updated_at": Attribute(required=True, default=CURRENT_TIMESTAMP, watch=True, setter=CURRENT_TIMESTAMP),
}

User = Entity(
    "user",
    attributes={
        "id": Attribute(required=True, read_only=True),
        "email": Attribute(required=True),
        "name": Attribute(),
        "hashed_password": Attribute(required=True, hidden=True),
        "is_active": Attribute(type="boolean", required=True, default=True),
        "last_login_at": Attribute(),
        **_TIMESTAMPS,
    },
    indexes={
        "primary": pattern("USER#{id}", "USER"),
        "by_email": pattern("USER_EMAIL#{email}", "USER", index="GSI2"),
    },
)

ApiKey = Entity(
    "api_key",
    attributes={
        "id": Attribute(required=True, read_only=True),
        "name": Attribute(required=True),
        "prefix": Attribute(required=True, read_only=True),
        "key_hash": Attribute(required=True, read_only=True, hidden=True),
        "last_used_at": Attribute(),
        "created_by": Attribute(),
        **_TIMESTAMPS,
    },
    indexes={
        "primary": pattern("APIKEY#{id}", "APIKEY"),
        "by_hash": pattern("APIKEY_HASH#{key_hash}", "APIKEY", index="GSI2"),
    },
)

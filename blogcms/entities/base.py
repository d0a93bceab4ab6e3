"""Declarative entity definitions mapped onto single-table storage keys.

An :class:`Entity` lists its attributes and its access patterns. Every access
pattern is a pair of key templates (``"GALLERY#{created_at}"``) whose
placeholders are filled from the record, so the physical keys of an item are
always derived, never supplied by callers.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from blogcms.services.exceptions import DomainValidationError


class _CurrentTimestamp:
    """Sentinel resolved to the write's timestamp (one value per create/update)."""

    def __repr__(self) -> str:
        return "CURRENT_TIMESTAMP"


CURRENT_TIMESTAMP = _CurrentTimestamp()

_TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "list": lambda v: isinstance(v, list),
    "map": lambda v: isinstance(v, dict),
    "any": lambda v: True,
}


def utcnow_iso() -> str:
    # Fixed-width UTC ISO strings sort lexicographically in time order.
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


@dataclass(frozen=True)
class Attribute:
    type: str = "string"
    required: bool = False
    default: Any = None
    choices: tuple[str, ...] | None = None
    items: str | None = None
    pattern: str | None = None
    watch: bool = False
    setter: Any = None
    read_only: bool = False
    hidden: bool = False

    def resolve(self, value: Any, now: str) -> Any:
        if value is CURRENT_TIMESTAMP:
            return now
        if callable(value):
            return value()
        return value


@dataclass(frozen=True)
class KeyTemplate:
    template: str

    @property
    def composites(self) -> tuple[str, ...]:
        return tuple(name for _, name, _, _ in string.Formatter().parse(self.template) if name)

    @property
    def prefix(self) -> str:
        """Static text before the first placeholder."""
        for literal, _, _, _ in string.Formatter().parse(self.template):
            return literal
        return ""

    def render(self, values: Mapping[str, Any]) -> str | None:
        parts: dict[str, str] = {}
        for name in self.composites:
            value = values.get(name)
            if value is None or value == "":
                return None
            parts[name] = str(value)
        return self.template.format(**parts)


@dataclass(frozen=True)
class AccessPattern:
    pk: KeyTemplate
    sk: KeyTemplate
    index: str | None = None

    @property
    def columns(self) -> tuple[str, str]:
        if self.index is None:
            return "pk", "sk"
        name = self.index.lower()
        return f"{name}pk", f"{name}sk"

    @property
    def composites(self) -> tuple[str, ...]:
        return self.pk.composites + self.sk.composites


def pattern(pk: str, sk: str, index: str | None = None) -> AccessPattern:
    return AccessPattern(pk=KeyTemplate(pk), sk=KeyTemplate(sk), index=index)


class Entity:
    def __init__(
        self,
        name: str,
        attributes: Mapping[str, Attribute],
        indexes: Mapping[str, AccessPattern],
    ) -> None:
        if "primary" not in indexes:
            raise ValueError(f"Entity {name} needs a primary access pattern")
        self.name = name
        self.attributes = dict(attributes)
        self.indexes = dict(indexes)
        for access in self.indexes.values():
            unknown = [c for c in access.composites if c not in self.attributes]
            if unknown:
                raise ValueError(f"Entity {name} key template uses unknown attributes {unknown}")

    def __repr__(self) -> str:
        return f"Entity({self.name!r})"

    @property
    def primary(self) -> AccessPattern:
        return self.indexes["primary"]

    # ---------------- Records ----------------
    def prepare_create(self, data: Mapping[str, Any], *, now: str | None = None) -> dict[str, Any]:
        """Build a full record for a new item: defaults, watched values, validation."""
        now = now or utcnow_iso()
        record = {k: v for k, v in data.items() if k in self.attributes and v is not None}
        for name, attr in self.attributes.items():
            if name not in record and attr.default is not None:
                record[name] = attr.resolve(attr.default, now)
            if attr.watch:
                record[name] = attr.resolve(attr.setter, now)
        self.validate(record)
        return record

    def prepare_update(
        self,
        current: Mapping[str, Any],
        changes: Mapping[str, Any],
        *,
        now: str | None = None,
    ) -> dict[str, Any]:
        """Merge a partial update into ``current``. ``None`` removes an attribute."""
        now = now or utcnow_iso()
        frozen = set(self.primary.composites)
        record = dict(current)
        for name, value in changes.items():
            attr = self.attributes.get(name)
            if attr is None or attr.watch:
                continue
            if (attr.read_only or name in frozen) and value != current.get(name):
                raise DomainValidationError(f"Attribute '{name}' of {self.name} cannot be modified", field=name)
            if value is None:
                record.pop(name, None)
            else:
                record[name] = value
        for name, attr in self.attributes.items():
            if attr.watch:
                value = attr.resolve(attr.setter, now)
                previous = current.get(name)
                if attr.setter is CURRENT_TIMESTAMP and previous and previous > value:
                    value = previous
                record[name] = value
        self.validate(record)
        return record

    def validate(self, record: Mapping[str, Any]) -> None:
        for name, attr in self.attributes.items():
            value = record.get(name)
            if value is None:
                if attr.required:
                    raise DomainValidationError(f"Missing required attribute '{name}' on {self.name}", field=name)
                continue
            if not _TYPE_CHECKS[attr.type](value):
                raise DomainValidationError(f"Attribute '{name}' must be of type {attr.type}", field=name)
            if attr.choices and value not in attr.choices:
                raise DomainValidationError(
                    f"Attribute '{name}' must be one of {', '.join(attr.choices)}", field=name
                )
            if attr.items and not all(_TYPE_CHECKS[attr.items](item) for item in value):
                raise DomainValidationError(f"Attribute '{name}' must only contain {attr.items} values", field=name)
            if attr.pattern and not re.fullmatch(attr.pattern, value):
                raise DomainValidationError(f"Attribute '{name}' has an invalid format", field=name)

    def public(self, record: Mapping[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in record.items() if not (k in self.attributes and self.attributes[k].hidden)}

    # ---------------- Keys ----------------
    def keys(self, record: Mapping[str, Any]) -> dict[str, str | None]:
        """Physical key columns for every access pattern of ``record``.

        Secondary patterns whose composites are missing produce no keys, so the
        item simply stays out of that index.
        """
        keys: dict[str, str | None] = {}
        for access in self.indexes.values():
            pk_column, sk_column = access.columns
            pk = access.pk.render(record)
            sk = access.sk.render(record)
            if pk is None or sk is None:
                if access.index is None:
                    self._raise_missing(access, record)
                pk = sk = None
            keys[pk_column] = pk
            keys[sk_column] = sk
        return keys

    def primary_key(self, **composites: Any) -> tuple[str, str]:
        pk = self.primary.pk.render(composites)
        sk = self.primary.sk.render(composites)
        if pk is None or sk is None:
            self._raise_missing(self.primary, composites)
        return pk, sk

    def partition_key(self, access_pattern: str, **composites: Any) -> str:
        access = self.indexes[access_pattern]
        pk = access.pk.render(composites)
        if pk is None:
            self._raise_missing(access, composites, pk_only=True)
        return pk

    def _raise_missing(self, access: AccessPattern, values: Mapping[str, Any], pk_only: bool = False) -> None:
        names = access.pk.composites if pk_only else access.composites
        missing = next((n for n in names if values.get(n) in (None, "")), names[0] if names else "id")
        raise DomainValidationError(f"Missing key attribute '{missing}' on {self.name}", field=missing)

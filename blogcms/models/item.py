# blogcms/models/item.py
from __future__ import annotations

from sqlalchemy import JSON, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from blogcms.db.session import Base


class ContentItem(Base):
    """Single-table storage: every entity lives here, located by PK/SK.

    The GSI columns hold the derived keys of the secondary access patterns;
    they stay NULL for items that do not participate in an index.
    """

    __tablename__ = "content_items"

    pk: Mapped[str] = mapped_column("PK", String(255), primary_key=True)
    sk: Mapped[str] = mapped_column("SK", String(255), primary_key=True)
    entity: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    gsi1pk: Mapped[str | None] = mapped_column("GSI1PK", String(255), nullable=True)
    gsi1sk: Mapped[str | None] = mapped_column("GSI1SK", String(255), nullable=True)
    gsi2pk: Mapped[str | None] = mapped_column("GSI2PK", String(255), nullable=True)
    gsi2sk: Mapped[str | None] = mapped_column("GSI2SK", String(255), nullable=True)
    gsi3pk: Mapped[str | None] = mapped_column("GSI3PK", String(255), nullable=True)
    gsi3sk: Mapped[str | None] = mapped_column("GSI3SK", String(255), nullable=True)

    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)


Index("ix_content_items_gsi1", ContentItem.gsi1pk, ContentItem.gsi1sk)
# GSI2 guarda claves únicas (email de usuario, hash de API key).
Index("ix_content_items_gsi2", ContentItem.gsi2pk, ContentItem.gsi2sk, unique=True)
Index("ix_content_items_gsi3", ContentItem.gsi3pk, ContentItem.gsi3sk)

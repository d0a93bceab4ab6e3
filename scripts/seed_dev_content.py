"""Seed script for a development blog: admin user, base categories and home page."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

# Ensure project root is on PYTHONPATH when running as a script.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from blogcms.core.config import settings
from blogcms.db.operations import commit_async
from blogcms.db.session_async import AsyncSessionLocal
from blogcms.schemas.category import CategoryCreate
from blogcms.schemas.home import HomeUpdate
from blogcms.schemas.user import UserCreate
from blogcms.services import category_service, home_service, user_service
from blogcms.services.exceptions import ResourceNotFoundError

SEED_ACTOR = "seed"


@dataclass(frozen=True, slots=True)
class DevCategory:
    name: str
    slug: str
    description: str


DEV_ADMIN = UserCreate(email="admin.dev@example.com", name="Dev Admin", password="AdminDev123!")

DEV_CATEGORIES: tuple[DevCategory, ...] = (
    DevCategory(name="General", slug="general", description="General category for posts and galleries"),
    DevCategory(name="Technology", slug="technology", description="Technology-related posts and content"),
)

DEV_HOME = HomeUpdate(
    title="Welcome",
    description="Personal blog and gallery showcasing technology, thoughts, and creativity.",
    short_description="Personal blog and gallery",
    keywords="blog, gallery, personal, technology",
    status="published",
)


async def seed_dev_content() -> dict[str, int]:
    """Insert the development content that is missing; existing items are left alone."""
    logger = logging.getLogger("seed_dev_content")
    logger.info("Seeding development content into %s", settings.ASYNC_DATABASE_URL)

    created = 0
    skipped = 0

    async with AsyncSessionLocal() as session:
        if await user_service.get_by_email(session, DEV_ADMIN.email):
            skipped += 1
        else:
            await user_service.create_user(session, DEV_ADMIN)
            created += 1

        for dev_category in DEV_CATEGORIES:
            try:
                await category_service.get_category_by_slug(session, dev_category.slug)
                skipped += 1
                continue
            except ResourceNotFoundError:
                pass
            payload = CategoryCreate(
                name=dev_category.name,
                slug=dev_category.slug,
                description=dev_category.description,
                status="published",
            )
            await category_service.create_category(session, payload, actor=SEED_ACTOR)
            created += 1

        home = await home_service.get_home(session)
        if home.get("status") == "published":
            skipped += 1
        else:
            await home_service.update_home(session, DEV_HOME, actor=SEED_ACTOR)
            created += 1

        await commit_async(session)

    logger.info("Development content ready", extra={"created": created, "skipped": skipped})
    return {"created": created, "skipped": skipped}


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed_dev_content())


if __name__ == "__main__":
    main()

"""Service layer for the campus blog."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore

from campusrides.core.constants import (
    BLOG_SEARCH_LIMIT,
    BLOG_SLUG_MAX_LENGTH,
    BLOGS_COLLECTION,
    DEFAULT_BLOG_PAGE_SIZE,
)
from campusrides.core.dates import utcnow
from campusrides.core.storage import upload_image
from campusrides.core.types import Failure, Result, Success
from campusrides.errors import ValidationError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from werkzeug.datastructures import FileStorage

logger = logging.getLogger(__name__)


def generate_slug(title: str) -> str:
    """Turn a title into a lowercase, hyphenated slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", (title or "").lower()).strip("-")
    return slug[:BLOG_SLUG_MAX_LENGTH].rstrip("-")


class BlogService:
    """Service class for blog posts."""

    @staticmethod
    def _newest_first(query: Any) -> Any:
        return query.order_by("createdAt", direction=firestore.Query.DESCENDING)

    @staticmethod
    def _to_list(docs: Any) -> list[dict[str, Any]]:
        return [{**doc.to_dict(), "id": doc.id} for doc in docs]

    @staticmethod
    def get_all_blogs(db: Client) -> list[dict[str, Any]]:
        """Return every post, newest first."""
        query = BlogService._newest_first(db.collection(BLOGS_COLLECTION))
        blogs = BlogService._to_list(query.stream())
        logger.debug(f"Fetched {len(blogs)} blogs")
        return blogs

    @staticmethod
    def get_blog_by_slug(db: Client, slug: str) -> Optional[dict[str, Any]]:
        """Return a post by slug, or None."""
        if not slug:
            raise ValidationError("Slug is required")
        blog_doc = db.collection(BLOGS_COLLECTION).document(slug).get()
        if not blog_doc.exists:
            return None
        return {**blog_doc.to_dict(), "id": blog_doc.id}

    @staticmethod
    def _by_field(db: Client, field: str, value: str) -> list[dict[str, Any]]:
        if not value:
            raise ValidationError(f"{field.capitalize()} is required")
        query = db.collection(BLOGS_COLLECTION).where(
            filter=firestore.FieldFilter(field, "==", value)
        )
        return BlogService._to_list(BlogService._newest_first(query).stream())

    @staticmethod
    def get_blogs_by_category(db: Client, category: str) -> list[dict[str, Any]]:
        """Return a category's posts, newest first."""
        return BlogService._by_field(db, "category", category)

    @staticmethod
    def get_blogs_by_author(db: Client, author: str) -> list[dict[str, Any]]:
        """Return an author's posts, newest first."""
        return BlogService._by_field(db, "author", author)

    @staticmethod
    def get_recent_blogs(
        db: Client, limit_count: int = DEFAULT_BLOG_PAGE_SIZE
    ) -> list[dict[str, Any]]:
        """Return the newest posts."""
        query = BlogService._newest_first(db.collection(BLOGS_COLLECTION))
        return BlogService._to_list(query.limit(limit_count).stream())

    @staticmethod
    def get_paginated_blogs(
        db: Client,
        limit_count: int = DEFAULT_BLOG_PAGE_SIZE,
        last_doc_id: Optional[str] = None,
    ) -> tuple[list[dict[str, Any]], Optional[str]]:
        """Return one page of posts and the cursor for the next page.

        The cursor is the id of the last post on the page, or None when the
        page is empty.
        """
        blogs_ref = db.collection(BLOGS_COLLECTION)
        query = BlogService._newest_first(blogs_ref)
        if last_doc_id:
            last_doc = blogs_ref.document(last_doc_id).get()
            if last_doc.exists:
                query = query.start_after(last_doc)
        blogs = BlogService._to_list(query.limit(limit_count).stream())
        cursor = blogs[-1]["id"] if blogs else None
        return blogs, cursor

    @staticmethod
    def search_blogs_by_title(db: Client, search_term: str) -> list[dict[str, Any]]:
        """Return posts whose title starts with ``search_term``."""
        if not search_term:
            return []
        query = (
            db.collection(BLOGS_COLLECTION)
            .where(filter=firestore.FieldFilter("title", ">=", search_term))
            .where(filter=firestore.FieldFilter("title", "<=", search_term + "\uf8ff"))
            .limit(BLOG_SEARCH_LIMIT)
        )
        return BlogService._to_list(query.stream())

    @staticmethod
    def get_blog_categories(db: Client) -> list[str]:
        """Return the distinct categories in use, sorted."""
        categories = {
            doc.to_dict().get("category")
            for doc in db.collection(BLOGS_COLLECTION).stream()
        }
        return sorted(c for c in categories if c)

    @staticmethod
    def create_blog(  # noqa: PLR0913
        db: Client,
        bucket: Any,
        title: str,
        excerpt: str,
        content: str,
        author: str,
        category: str,
        image: Optional[FileStorage] = None,
        slug: Optional[str] = None,
    ) -> Result:
        """Publish a post stored under its slug."""
        slug = (slug or "").strip() or generate_slug(title)
        if not slug:
            return Failure.validation(
                "Unable to generate a valid slug from the blog title"
            )

        now = utcnow().isoformat()
        image_url = None
        try:
            if image and bucket is not None:
                image_url = upload_image(bucket, f"blogs/{slug}", image)
            db.collection(BLOGS_COLLECTION).document(slug).set(
                {
                    "title": title,
                    "excerpt": excerpt,
                    "content": content,
                    "author": author,
                    "category": category,
                    "image": image_url,
                    "slug": slug,
                    "createdAt": now,
                    "updatedAt": now,
                }
            )
        except Exception as e:
            logger.error(f"Error creating blog {slug}: {e}")
            return Failure.store()

        logger.info(f"Blog created with slug {slug}")
        return Success("Blog created!", id=slug)

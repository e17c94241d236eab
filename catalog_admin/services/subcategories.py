"""Subcategory store.

Subcategory slugs are unique per owning category, not globally. A subcategory
may hang off one parent subcategory of the same category; the hierarchy is
limited to a single level of nesting.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_admin.core.errors import DuplicateSlug, InvalidParent, InvalidSlug, NotFound
from catalog_admin.core.text import create_slug
from catalog_admin.db.models import Category, Subcategory

logger = logging.getLogger("catalog_admin.subcategories")

_UPDATABLE_FIELDS = ("category_id", "parent_subcategory_id", "name", "slug", "description", "status")


def serialize_subcategory(subcategory: Subcategory) -> Dict[str, Any]:
    return {
        "id": subcategory.id,
        "category_id": subcategory.category_id,
        "parent_subcategory_id": subcategory.parent_subcategory_id,
        "name": subcategory.name,
        "slug": subcategory.slug,
        "description": subcategory.description,
        "status": subcategory.status,
        "created_at": subcategory.created_at,
        "updated_at": subcategory.updated_at,
    }


def get_subcategories_by_category(db: Session, category_id: int) -> List[Subcategory]:
    return list(
        db.scalars(
            select(Subcategory)
            .where(Subcategory.category_id == category_id)
            .order_by(Subcategory.name.asc())
        ).all()
    )


def get_child_subcategories(db: Session, parent_subcategory_id: int) -> List[Subcategory]:
    return list(
        db.scalars(
            select(Subcategory)
            .where(Subcategory.parent_subcategory_id == parent_subcategory_id)
            .order_by(Subcategory.name.asc())
        ).all()
    )


def get_subcategory(db: Session, subcategory_id: int) -> Optional[Subcategory]:
    return db.get(Subcategory, subcategory_id)


def get_subcategory_by_slug(db: Session, category_id: int, slug: str) -> Optional[Subcategory]:
    return db.scalars(
        select(Subcategory).where(Subcategory.category_id == category_id, Subcategory.slug == slug)
    ).first()


def _validate_parent(
    db: Session,
    parent_id: Optional[int],
    *,
    category_id: int,
    subcategory: Optional[Subcategory] = None,
) -> Optional[int]:
    if not parent_id:
        return None

    if subcategory is not None and parent_id == subcategory.id:
        raise InvalidParent("A subcategory cannot be its own parent.")

    parent = get_subcategory(db, parent_id)
    if not parent:
        raise InvalidParent("Selected parent subcategory does not exist.")
    if parent.category_id != category_id:
        raise InvalidParent("Parent subcategory must belong to the same category.")
    if parent.parent_subcategory_id is not None:
        raise InvalidParent("Subcategories can only be nested one level deep.")
    if subcategory is not None and get_child_subcategories(db, subcategory.id):
        raise InvalidParent("A subcategory with children cannot be nested under another subcategory.")
    return parent.id


def create_subcategory(db: Session, data: Mapping[str, Any]) -> Subcategory:
    category_id = data["category_id"]
    if not db.get(Category, category_id):
        raise NotFound("Category not found")

    name = data["name"]
    slug = (data.get("slug") or "").strip() or create_slug(name)
    if not slug:
        raise InvalidSlug("Unable to generate a valid slug. Please provide one manually.")

    if get_subcategory_by_slug(db, category_id, slug):
        raise DuplicateSlug(slug, scope="subcategory")

    parent_id = _validate_parent(db, data.get("parent_subcategory_id"), category_id=category_id)

    subcategory = Subcategory(
        category_id=category_id,
        parent_subcategory_id=parent_id,
        name=name,
        slug=slug,
        description=data.get("description") or None,
        status=data.get("status") or "Active",
    )
    db.add(subcategory)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateSlug(slug, scope="subcategory")
    db.refresh(subcategory)
    logger.info(
        "subcategory_created",
        extra={"subcategory_id": subcategory.id, "category_id": category_id, "slug": slug},
    )
    return subcategory


def update_subcategory(db: Session, subcategory_id: int, updates: Mapping[str, Any]) -> Subcategory:
    subcategory = get_subcategory(db, subcategory_id)
    if not subcategory:
        raise NotFound("Subcategory not found")

    changes = {key: value for key, value in updates.items() if key in _UPDATABLE_FIELDS}
    for required in ("name", "status", "category_id"):
        if not changes.get(required):
            changes.pop(required, None)

    target_category_id = changes.get("category_id", subcategory.category_id)
    if target_category_id != subcategory.category_id:
        if not db.get(Category, target_category_id):
            raise NotFound("Category not found")
        if get_child_subcategories(db, subcategory.id):
            raise InvalidParent("Detach child subcategories before moving this subcategory.")

    explicit_slug = (changes.get("slug") or "").strip()
    if changes.get("name") and not explicit_slug:
        changes["slug"] = create_slug(changes["name"])
        if not changes["slug"]:
            raise InvalidSlug("Unable to generate a valid slug. Please provide one manually.")
    elif explicit_slug:
        changes["slug"] = explicit_slug
    else:
        changes.pop("slug", None)

    new_slug = changes.get("slug", subcategory.slug)
    existing = get_subcategory_by_slug(db, target_category_id, new_slug)
    if existing and existing.id != subcategory.id:
        raise DuplicateSlug(new_slug, scope="subcategory")

    if "parent_subcategory_id" in changes:
        changes["parent_subcategory_id"] = _validate_parent(
            db,
            changes["parent_subcategory_id"],
            category_id=target_category_id,
            subcategory=subcategory,
        )
    elif target_category_id != subcategory.category_id and subcategory.parent_subcategory_id:
        # The old parent lives in the previous category.
        changes["parent_subcategory_id"] = None

    for key, value in changes.items():
        setattr(subcategory, key, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateSlug(new_slug, scope="subcategory")
    db.refresh(subcategory)
    logger.info("subcategory_updated", extra={"subcategory_id": subcategory.id, "fields": sorted(changes)})
    return subcategory


def delete_subcategory(db: Session, subcategory_id: int) -> None:
    subcategory = get_subcategory(db, subcategory_id)
    if not subcategory:
        raise NotFound("Subcategory not found")

    db.delete(subcategory)
    db.commit()
    logger.info("subcategory_deleted", extra={"subcategory_id": subcategory_id})

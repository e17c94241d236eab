"""Category store.

Categories are the top level of the catalog hierarchy. Products point at a
category through its slug, so the slug is unique across all categories and a
category cannot be removed while any product still references it.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_admin.core.errors import DuplicateSlug, HasDependents, InvalidSlug, NotFound
from catalog_admin.core.text import create_slug, like_pattern
from catalog_admin.db.models import Category, Product

logger = logging.getLogger("catalog_admin.categories")

_UPDATABLE_FIELDS = ("name", "slug", "description", "status", "catalogue_url")


def serialize_category(category: Category, product_count: int = 0) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "status": category.status,
        "catalogue_url": category.catalogue_url,
        "product_count": product_count,
        "created_at": category.created_at,
        "updated_at": category.updated_at,
    }


def _product_counts(db: Session, slugs: List[str]) -> Dict[str, int]:
    if not slugs:
        return {}
    rows = db.execute(
        select(Product.category, func.count(Product.id))
        .where(Product.category.in_(slugs))
        .group_by(Product.category)
    ).all()
    return {slug: count for slug, count in rows}


def _with_counts(db: Session, categories: List[Category]) -> List[Dict[str, Any]]:
    counts = _product_counts(db, [category.slug for category in categories])
    return [serialize_category(category, counts.get(category.slug, 0)) for category in categories]


def _count_products(db: Session, slug: str) -> int:
    return db.scalar(select(func.count(Product.id)).where(Product.category == slug)) or 0


def get_categories(db: Session) -> List[Dict[str, Any]]:
    categories = db.scalars(select(Category).order_by(Category.name.asc())).all()
    return _with_counts(db, list(categories))


def get_active_categories(db: Session) -> List[Dict[str, Any]]:
    categories = db.scalars(
        select(Category).where(Category.status == "Active").order_by(Category.name.asc())
    ).all()
    return [serialize_category(category) for category in categories]


def search_categories(db: Session, term: str) -> List[Dict[str, Any]]:
    pattern = like_pattern(term)
    categories = db.scalars(
        select(Category)
        .where(
            or_(
                Category.name.ilike(pattern, escape="\\"),
                Category.description.ilike(pattern, escape="\\"),
            )
        )
        .order_by(Category.name.asc())
    ).all()
    return _with_counts(db, list(categories))


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.get(Category, category_id)


def get_category_by_slug(db: Session, slug: str) -> Optional[Category]:
    return db.scalars(select(Category).where(Category.slug == slug)).first()


def category_product_count(db: Session, category: Category) -> int:
    return _count_products(db, category.slug)


def _resolve_slug(name: str, explicit: Optional[str]) -> str:
    slug = (explicit or "").strip() or create_slug(name)
    if not slug:
        raise InvalidSlug("Unable to generate a valid slug. Please provide one manually.")
    return slug


def create_category(db: Session, data: Mapping[str, Any]) -> Category:
    name = data["name"]
    slug = _resolve_slug(name, data.get("slug"))

    if get_category_by_slug(db, slug):
        raise DuplicateSlug(slug)

    category = Category(
        name=name,
        slug=slug,
        description=data.get("description") or None,
        status=data.get("status") or "Active",
        catalogue_url=data.get("catalogue_url") or None,
    )
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same slug.
        db.rollback()
        raise DuplicateSlug(slug)
    db.refresh(category)
    logger.info("category_created", extra={"category_id": category.id, "slug": slug})
    return category


def update_category(db: Session, category_id: int, updates: Mapping[str, Any]) -> Category:
    category = get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")

    changes = {key: value for key, value in updates.items() if key in _UPDATABLE_FIELDS}
    for required in ("name", "status"):
        if not changes.get(required):
            changes.pop(required, None)
    explicit_slug = (changes.get("slug") or "").strip()
    if changes.get("name") and not explicit_slug:
        changes["slug"] = _resolve_slug(changes["name"], None)
    elif explicit_slug:
        changes["slug"] = explicit_slug
    else:
        changes.pop("slug", None)

    new_slug = changes.get("slug")
    if new_slug and new_slug != category.slug:
        existing = get_category_by_slug(db, new_slug)
        if existing and existing.id != category.id:
            raise DuplicateSlug(new_slug)

    for key, value in changes.items():
        setattr(category, key, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateSlug(new_slug or category.slug)
    db.refresh(category)
    logger.info("category_updated", extra={"category_id": category.id, "fields": sorted(changes)})
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")

    product_count = _count_products(db, category.slug)
    if product_count > 0:
        raise HasDependents(product_count)

    db.delete(category)
    db.commit()
    logger.info("category_deleted", extra={"category_id": category_id})

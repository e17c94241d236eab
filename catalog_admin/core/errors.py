class CatalogError(Exception):
    """Base class for errors raised by the catalog stores."""

    status_code = 400


class NotFound(CatalogError):
    status_code = 404


class DuplicateSlug(CatalogError):
    """Raised when a slug is already taken within its scope."""

    status_code = 409

    def __init__(self, slug: str, scope: str = "category"):
        self.slug = slug
        self.scope = scope
        if scope == "category":
            message = f'A category with the slug "{slug}" already exists'
        else:
            message = f'A subcategory with the slug "{slug}" already exists in this category'
        super().__init__(message)


class HasDependents(CatalogError):
    status_code = 409

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Cannot delete category. It has {count} product(s) assigned to it.")


class InvalidParent(CatalogError):
    """Raised when a subcategory parent would break the one-level hierarchy."""


class InvalidSlug(CatalogError):
    pass


class StorageError(CatalogError):
    """Raised when a file cannot be stored or removed."""

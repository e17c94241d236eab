from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from catalog_admin.core.errors import NotFound, StorageError
from catalog_admin.core.security import require_api_key
from catalog_admin.db.session import get_db
from catalog_admin.routers.responses import success
from catalog_admin.schemas import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
    SubcategoryCreate,
    SubcategoryUpdate,
)
from catalog_admin.services import categories as category_store
from catalog_admin.services import products as product_store
from catalog_admin.services import storage
from catalog_admin.services import subcategories as subcategory_store

router = APIRouter(prefix="/api", tags=["Admin"], dependencies=[Depends(require_api_key)])


# --- Categories ---
@router.get("/categories")
def list_categories(
    q: str = Query("", alias="q"),
    active: bool = Query(False),
    db: Session = Depends(get_db),
):
    search_term = q.strip()
    if active:
        rows = category_store.get_active_categories(db)
    elif search_term:
        rows = category_store.search_categories(db, search_term)
    else:
        rows = category_store.get_categories(db)
    return success(rows)


@router.post("/categories", status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    category = category_store.create_category(db, payload.model_dump())
    return success(category_store.serialize_category(category))


@router.get("/categories/{category_id}")
def read_category(category_id: int, db: Session = Depends(get_db)):
    category = category_store.get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")
    count = category_store.category_product_count(db, category)
    return success(category_store.serialize_category(category, count))


@router.patch("/categories/{category_id}")
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    category = category_store.update_category(db, category_id, payload.model_dump(exclude_unset=True))
    count = category_store.category_product_count(db, category)
    return success(category_store.serialize_category(category, count))


@router.delete("/categories/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    category_store.delete_category(db, category_id)
    return success(message="Category deleted successfully")


# --- Subcategories ---
@router.get("/categories/{category_id}/subcategories")
def list_subcategories(category_id: int, db: Session = Depends(get_db)):
    rows = subcategory_store.get_subcategories_by_category(db, category_id)
    return success([subcategory_store.serialize_subcategory(row) for row in rows])


@router.post("/subcategories", status_code=status.HTTP_201_CREATED)
def create_subcategory(payload: SubcategoryCreate, db: Session = Depends(get_db)):
    subcategory = subcategory_store.create_subcategory(db, payload.model_dump())
    return success(subcategory_store.serialize_subcategory(subcategory))


@router.get("/subcategories/{subcategory_id}")
def read_subcategory(subcategory_id: int, db: Session = Depends(get_db)):
    subcategory = subcategory_store.get_subcategory(db, subcategory_id)
    if not subcategory:
        raise NotFound("Subcategory not found")
    return success(subcategory_store.serialize_subcategory(subcategory))


@router.get("/subcategories/{subcategory_id}/children")
def list_child_subcategories(subcategory_id: int, db: Session = Depends(get_db)):
    rows = subcategory_store.get_child_subcategories(db, subcategory_id)
    return success([subcategory_store.serialize_subcategory(row) for row in rows])


@router.patch("/subcategories/{subcategory_id}")
def update_subcategory(subcategory_id: int, payload: SubcategoryUpdate, db: Session = Depends(get_db)):
    subcategory = subcategory_store.update_subcategory(db, subcategory_id, payload.model_dump(exclude_unset=True))
    return success(subcategory_store.serialize_subcategory(subcategory))


@router.delete("/subcategories/{subcategory_id}")
def delete_subcategory(subcategory_id: int, db: Session = Depends(get_db)):
    subcategory_store.delete_subcategory(db, subcategory_id)
    return success(message="Subcategory deleted successfully")


# --- Products ---
@router.get("/products")
def list_products(
    q: str = Query("", alias="q"),
    category: Optional[str] = Query(None),
    product_status: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    search_term = q.strip()
    if search_term:
        rows = product_store.search_products(db, search_term)
    elif category:
        rows = product_store.get_products_by_category(db, category)
    elif product_status:
        rows = product_store.get_products_by_status(db, product_status)
    else:
        rows = product_store.get_products(db)
    return success([product_store.serialize_product(row) for row in rows])


@router.post("/products", status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    product = product_store.create_product(db, payload.model_dump())
    return success(product_store.serialize_product(product))


@router.get("/products/{product_id}")
def read_product(product_id: int, db: Session = Depends(get_db)):
    product = product_store.get_product(db, product_id)
    if not product:
        raise NotFound("Product not found")
    return success(product_store.serialize_product(product, include_html=True))


@router.patch("/products/{product_id}")
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    product = product_store.update_product(db, product_id, payload.model_dump(exclude_unset=True))
    return success(product_store.serialize_product(product))


@router.delete("/products/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product_store.delete_product(db, product_id)
    return success(message="Product deleted successfully")


# --- Storage ---
@router.post("/storage/{bucket}", status_code=status.HTTP_201_CREATED)
async def upload_to_bucket(bucket: str, files: List[UploadFile] = File(...)):
    pending = []
    for upload in files:
        if not upload or not upload.filename:
            continue

        content = await upload.read()
        await upload.close()
        valid, error = storage.validate_file(upload.filename, len(content))
        if not valid:
            raise StorageError(error)
        pending.append((upload.filename, content))

    if not pending:
        raise StorageError("No files were uploaded.")

    uploaded: List[dict] = []
    try:
        for name, content in pending:
            url = storage.upload_file(content, name, bucket)
            uploaded.append(
                {
                    "name": name,
                    "url": url,
                    "type": storage.get_file_type(name),
                    "size": storage.format_file_size(len(content)),
                }
            )
    except StorageError:
        # All or nothing: drop whatever this request already wrote.
        for item in uploaded:
            storage.delete_file(item["url"], bucket)
        raise
    return success(uploaded)


@router.delete("/storage/{bucket}")
def delete_from_bucket(bucket: str, url: str = Query(...)):
    storage.delete_file(url, bucket)
    return success(message="File deleted successfully")

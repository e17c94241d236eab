from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

CategoryStatus = Literal["Active", "Inactive"]
ProductStatus = Literal["Active", "Draft", "Inactive"]


# --- Category ---
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=160)
    slug: Optional[str] = Field(None, max_length=160)
    description: Optional[str] = None
    status: CategoryStatus = "Active"
    catalogue_url: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=160)
    slug: Optional[str] = Field(None, max_length=160)
    description: Optional[str] = None
    status: Optional[CategoryStatus] = None
    catalogue_url: Optional[str] = None


# --- Subcategory ---
class SubcategoryCreate(BaseModel):
    category_id: int
    parent_subcategory_id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=160)
    slug: Optional[str] = Field(None, max_length=160)
    description: Optional[str] = None
    status: CategoryStatus = "Active"


class SubcategoryUpdate(BaseModel):
    category_id: Optional[int] = None
    parent_subcategory_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=160)
    slug: Optional[str] = Field(None, max_length=160)
    description: Optional[str] = None
    status: Optional[CategoryStatus] = None


# --- Product attachments ---
class VideoAttachment(BaseModel):
    title: str = ""
    url: str
    thumbnail: Optional[str] = None


class FileAttachment(BaseModel):
    name: str = ""
    url: str
    type: str = "document"


class SectionState(BaseModel):
    enabled: bool = False


class ProductData(BaseModel):
    features: List[str] = []
    images: List[str] = []
    models: List[str] = []
    charts: List[str] = []
    schematics: List[str] = []
    dimensions: List[str] = []
    videos: List[VideoAttachment] = []
    documents: List[FileAttachment] = []
    catalogues: List[FileAttachment] = []
    sections: Dict[str, SectionState] = {}

    class Config:
        extra = "allow"


# --- Product ---
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=160)
    subcategory: Optional[str] = Field(None, max_length=160)
    status: ProductStatus = "Draft"
    data: ProductData = Field(default_factory=ProductData)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=160)
    subcategory: Optional[str] = Field(None, max_length=160)
    status: Optional[ProductStatus] = None
    data: Optional[ProductData] = None


# --- Visitor submissions ---
class CatalogueRequestCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=160)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=60)
    location: Optional[str] = Field(None, max_length=255)
    product_id: Optional[int] = None
    product_name: Optional[str] = Field(None, max_length=255)


class NewsletterSubscribe(BaseModel):
    email: EmailStr

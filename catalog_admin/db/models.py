from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(160), nullable=False)
    slug = Column(String(160), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="Active")
    catalogue_url = Column(String(1024), nullable=True)

    subcategories = relationship(
        "Subcategory",
        back_populates="category",
        cascade="all, delete-orphan",
    )


class Subcategory(Base, TimestampMixin):
    __tablename__ = "subcategories"
    __table_args__ = (UniqueConstraint("category_id", "slug", name="uq_subcategories_category_slug"),)

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_subcategory_id = Column(
        Integer, ForeignKey("subcategories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name = Column(String(160), nullable=False)
    slug = Column(String(160), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="Active")

    category = relationship("Category", back_populates="subcategories")
    parent = relationship("Subcategory", remote_side=[id], back_populates="children")
    children = relationship("Subcategory", back_populates="parent")


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # Category and subcategory are referenced by slug, not by key.
    category = Column(String(160), nullable=False, index=True)
    subcategory = Column(String(160), nullable=True)
    status = Column(String(16), nullable=False, default="Draft")
    data = Column(JSON, nullable=False, default=dict)


class CatalogueRequest(Base):
    __tablename__ = "catalogue_requests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(160), nullable=False)
    phone = Column(String(60), nullable=True)
    email = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    product_id = Column(Integer, nullable=True)
    product_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class NewsletterEmail(Base):
    __tablename__ = "newsletter_emails"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

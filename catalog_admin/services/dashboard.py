from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog_admin.db.models import Category, Product
from catalog_admin.services.leads import count_leads
from catalog_admin.services.products import count_media_files

QUICK_ACTIONS = [
    {"title": "Add New Product", "url": "/dashboard/products/add", "description": "Create a new product entry"},
    {"title": "Manage Categories", "url": "/dashboard/categories", "description": "Organize product categories"},
    {"title": "View Leads", "url": "/dashboard/leads", "description": "Check catalogue requests"},
    {"title": "View Products", "url": "/dashboard/products", "description": "Browse all products"},
]


def get_dashboard_stats(db: Session) -> Dict[str, Any]:
    total_products = db.scalar(select(func.count(Product.id))) or 0
    total_categories = db.scalar(select(func.count(Category.id))) or 0
    total_leads = count_leads(db)
    total_media = sum(count_media_files(data) for data in db.scalars(select(Product.data)))

    recent = db.execute(
        select(Product.id, Product.name, Product.created_at, Product.status)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(5)
    ).all()

    return {
        "stats": {
            "totalProducts": total_products,
            "totalCategories": total_categories,
            "totalLeads": total_leads,
            "totalMediaFiles": total_media,
        },
        "recentProducts": [
            {"id": row.id, "name": row.name, "created_at": row.created_at, "status": row.status}
            for row in recent
        ],
        "quickActions": QUICK_ACTIONS,
    }

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog_admin.core.config import get_settings


settings = get_settings()

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

database_engine = create_engine(
    settings.database_url,
    echo=False,
    future=True,
    pool_pre_ping=True,
    connect_args=connect_args,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

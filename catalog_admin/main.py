import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_admin.core.config import get_settings
from catalog_admin.core.errors import CatalogError
from catalog_admin.core.logging import configure_logging
from catalog_admin.routers import admin, api, site
from catalog_admin.routers.responses import failure
from catalog_admin.services.storage import PUBLIC_PREFIX, ensure_buckets

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("catalog_admin")


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_buckets()
    yield


app = FastAPI(title=settings.project_name, lifespan=lifespan)

app.mount(
    PUBLIC_PREFIX.rstrip("/"),
    StaticFiles(directory=settings.storage_root, check_dir=False),
    name="storage",
)

app.include_router(admin.router)
app.include_router(api.router)
app.include_router(site.router)


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok"}


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    logger.warning(
        "request_rejected",
        extra={"path": request.url.path, "error": type(exc).__name__, "detail": str(exc)},
    )
    return JSONResponse(failure(str(exc)), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    detail = f"{location}: {message}" if location else message
    return JSONResponse(failure(detail), status_code=400)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(failure(str(exc.detail)), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", extra={"path": request.url.path})
    return JSONResponse(failure("Internal server error"), status_code=500)

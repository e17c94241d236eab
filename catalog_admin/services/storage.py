"""Bucket-namespaced object storage.

Objects live under ``STORAGE_ROOT/<bucket>/<path>`` and are exposed at
``{STORAGE_PUBLIC_URL}/storage/v1/object/public/<bucket>/<path>``. Records keep
only the public URL, so deleting an object means mapping that URL back to a
bucket-relative path.
"""

import logging
import secrets
import time
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import quote, unquote, urlparse

from catalog_admin.core.config import get_settings
from catalog_admin.core.errors import StorageError

logger = logging.getLogger("catalog_admin.storage")

PUBLIC_PREFIX = "/storage/v1/object/public/"

STORAGE_BUCKETS: Dict[str, str] = {
    "PRODUCT_IMAGES": "product-images",
    "PRODUCT_VIDEOS": "product-videos",
    "PRODUCT_DOCUMENTS": "product-documents",
    "PRODUCT_SCHEMATICS": "product-schematics",
    "PRODUCT_DIMENSIONS": "product-dimensions",
    "PRODUCT_CHARTS": "product-charts",
    "PRODUCT_MODELS": "product-models",
    "PRODUCT_CATALOGUES": "product-catalogues",
    "CATEGORY_CATALOGUES": "category-catalogues",
}
BUCKET_NAMES = frozenset(STORAGE_BUCKETS.values())

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "svg"}
VIDEO_EXTENSIONS = {"mp4", "webm", "mov", "avi", "mkv"}


def _storage_root() -> Path:
    return Path(get_settings().storage_root)


def _check_bucket(bucket: str) -> None:
    if bucket not in BUCKET_NAMES:
        raise StorageError(f"Unknown storage bucket: {bucket}")


def _extension(name: str) -> str:
    return PurePosixPath(name).suffix.lower().lstrip(".")


def _object_path(bucket: str, path: str) -> Path:
    bucket_dir = (_storage_root() / bucket).resolve()
    target = (bucket_dir / path).resolve()
    try:
        target.relative_to(bucket_dir)
    except ValueError:
        raise StorageError("Invalid storage path")
    return target


def ensure_buckets() -> List[Path]:
    """Create a directory for every bucket; existing ones are left alone."""
    created = []
    for bucket in sorted(BUCKET_NAMES):
        bucket_dir = _storage_root() / bucket
        if not bucket_dir.exists():
            bucket_dir.mkdir(parents=True, exist_ok=True)
            created.append(bucket_dir)
            logger.info("bucket_created", extra={"bucket": bucket})
    return created


def build_public_url(bucket: str, path: str) -> str:
    base = get_settings().storage_public_url.rstrip("/")
    return f"{base}{PUBLIC_PREFIX}{quote(f'{bucket}/{path}')}"


def object_path_from_url(url: str, bucket: str) -> str:
    """Return the bucket-relative path of the object behind a public URL."""
    path = ""
    parsed = urlparse(url or "")
    index = parsed.path.find(PUBLIC_PREFIX)
    if index != -1:
        path = unquote(parsed.path[index + len(PUBLIC_PREFIX) :])
    elif PUBLIC_PREFIX in (url or ""):
        # Legacy URLs that do not parse cleanly.
        path = unquote(url.split(PUBLIC_PREFIX, 1)[1])

    if not path:
        raise StorageError("Invalid storage URL")
    if path.startswith(f"{bucket}/"):
        path = path[len(bucket) + 1 :]
    return path


def generate_file_name(original_name: str) -> str:
    suffix = _extension(original_name) or "bin"
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.{suffix}"


def upload_file(content: bytes, original_name: str, bucket: str, file_name: Optional[str] = None) -> str:
    """Store ``content`` in ``bucket`` and return its public URL. Never overwrites."""
    _check_bucket(bucket)
    final_name = file_name or generate_file_name(original_name)
    destination = _object_path(bucket, final_name)
    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        with destination.open("xb") as handle:
            handle.write(content)
    except FileExistsError:
        raise StorageError(f"The object {bucket}/{final_name} already exists")
    logger.info("file_uploaded", extra={"bucket": bucket, "path": final_name, "size": len(content)})
    return build_public_url(bucket, final_name)


def upload_files(files: Iterable[Tuple[str, bytes]], bucket: str) -> List[str]:
    return [upload_file(content, name, bucket) for name, content in files]


def delete_file(url: str, bucket: str) -> None:
    _check_bucket(bucket)
    path = object_path_from_url(url, bucket)
    target = _object_path(bucket, path)
    if not target.is_file():
        raise StorageError(f"The object {bucket}/{path} does not exist")
    target.unlink()
    logger.info("file_deleted", extra={"bucket": bucket, "path": path})


def get_file_type(name_or_url: str) -> str:
    file_name = (name_or_url or "").rsplit("/", 1)[-1]
    ext = _extension(file_name)
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in VIDEO_EXTENSIONS:
        return "video"
    return "document"


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    index = 0
    value = float(size)
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"


def validate_file(
    file_name: str,
    size: int,
    allowed_types: Sequence[str] = (),
    max_size_mb: Optional[int] = None,
) -> Tuple[bool, Optional[str]]:
    limit_mb = max_size_mb if max_size_mb is not None else get_settings().storage_max_file_size_mb
    if size > limit_mb * 1024 * 1024:
        return False, f"File size must be less than {limit_mb}MB"

    if allowed_types and _extension(file_name) not in allowed_types:
        return False, f"File type must be one of: {', '.join(allowed_types)}"

    return True, None

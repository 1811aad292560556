from __future__ import annotations

import logging
import shutil
from pathlib import Path
from uuid import uuid4

from campaign_codex.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
IMAGE_ENTITY_TYPES = ("character", "location", "faction", "world_info", "quest", "session", "creature")
CAMPAIGNS_SUBDIR = "campaigns"


def uploads_root() -> Path:
    path = Path(settings.UPLOADS_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path.resolve()


def _safe_suffix(filename: str | None, content_type: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if suffix in {".jpg", ".jpeg", ".png", ".gif", ".webp"}:
        return suffix
    return ALLOWED_IMAGE_TYPES[content_type]


def store_image(
    *,
    campaign_id: int,
    entity_type: str,
    entity_id: int,
    filename: str | None,
    content_type: str,
    contents: bytes,
) -> str:
    """Write an upload under the campaign namespace and return its path relative to the uploads root."""
    relative_dir = Path(CAMPAIGNS_SUBDIR) / str(campaign_id) / entity_type / str(entity_id)
    target_dir = uploads_root() / relative_dir
    target_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"{uuid4().hex}{_safe_suffix(filename, content_type)}"
    (target_dir / stored_name).write_bytes(contents)
    return (relative_dir / stored_name).as_posix()


def resolve_image_path(relative_path: str) -> Path | None:
    """Map a stored relative path to a file inside the uploads root, or None.

    Anything resolving outside ``UPLOADS_DIR`` (``..`` segments, absolute
    paths, symlinks) is refused.
    """
    root = uploads_root()
    try:
        candidate = (root / relative_path).resolve()
        candidate.relative_to(root)
    except (ValueError, OSError):
        logger.warning("Refusing image path outside uploads root: %s", relative_path)
        return None
    if candidate.is_file():
        return candidate
    return None


def delete_image_file(relative_path: str) -> None:
    target = resolve_image_path(relative_path)
    if target is None:
        return
    try:
        target.unlink()
    except OSError as exc:
        logger.warning("Failed to delete image %s: %s", target, exc)


def delete_campaign_files(campaign_id: int) -> None:
    campaign_dir = uploads_root() / CAMPAIGNS_SUBDIR / str(campaign_id)
    if not campaign_dir.is_dir():
        return
    try:
        shutil.rmtree(campaign_dir)
    except OSError as exc:
        logger.warning("Failed to remove uploads for campaign %s: %s", campaign_id, exc)

"""Local storage of residence media uploads.

Files are written under ``settings.upload_dir`` with random names and served
by the application at ``settings.uploads_url_prefix``.
"""

import logging
import uuid
from collections.abc import Iterable
from pathlib import Path

from fastapi import UploadFile
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from ema_api.config import settings
from ema_api.errors import InvalidInput
from ema_api.models.enums import MediaKind

logger = logging.getLogger(__name__)


def upload_root() -> Path:
    return Path(settings.upload_dir)


def media_kind(content_type: str | None) -> MediaKind:
    """Videos are recognised by MIME type; everything else is an image."""
    if content_type and content_type.startswith("video/"):
        return MediaKind.VIDEO
    return MediaKind.IMAGE


def new_media_entry(url: str, kind: MediaKind | str) -> dict:
    return {"id": uuid.uuid4().hex, "url": url, "kind": MediaKind(kind).value}


async def store_uploads(files: list[UploadFile]) -> list[dict]:
    """Persist uploaded files and return their media entries in upload order."""
    files = [f for f in files if f.filename]
    if len(files) > settings.max_upload_files:
        raise InvalidInput(
            "Too many files",
            details=[{"field": "media", "message": f"At most {settings.max_upload_files} files per request"}],
        )

    payloads = []
    for upload in files:
        data = await upload.read()
        if len(data) > settings.max_upload_bytes:
            raise InvalidInput(
                "File too large",
                details=[{"field": "media", "message": f"{upload.filename} exceeds {settings.max_upload_bytes} bytes"}],
            )
        payloads.append((upload, data))

    root = upload_root()
    root.mkdir(parents=True, exist_ok=True)

    entries = []
    for upload, data in payloads:
        suffix = Path(upload.filename or "").suffix.lower()
        name = f"{uuid.uuid4().hex}{suffix}"
        (root / name).write_bytes(data)
        url = f"{settings.uploads_url_prefix}/{name}"
        entries.append(new_media_entry(url, media_kind(upload.content_type)))
        logger.debug("Stored upload %s as %s", upload.filename, url)
    return entries


def _local_path(url: str) -> Path | None:
    prefix = settings.uploads_url_prefix.rstrip("/") + "/"
    if not url.startswith(prefix):
        return None
    name = url[len(prefix) :]
    if not name or "/" in name or name in (".", ".."):
        return None
    return upload_root() / name


def delete_media_files(entries: Iterable[dict]) -> int:
    """Remove stored files for ``entries``. Best effort: failures are only logged.

    Returns the number of files actually removed. Entries pointing outside
    the upload directory (external URLs) are skipped.
    """
    removed = 0
    for entry in entries:
        path = _local_path(str(entry.get("url", "")))
        if path is None:
            continue
        try:
            path.unlink()
            removed += 1
        except FileNotFoundError:
            logger.warning("Media file already missing: %s", path)
        except OSError as exc:
            logger.warning("Could not delete media file %s: %s", path, exc)
    return removed


# ---------------------------------------------------------------------------
# Deletion tied to the unit of work
# ---------------------------------------------------------------------------

_PENDING_DELETES = "ema_api.pending_media_deletes"


def delete_media_files_on_commit(db: AsyncSession, entries: Iterable[dict]) -> None:
    """Queue stored files for removal once ``db`` commits.

    A rollback discards the queue, so a row that survives still points at
    existing files.
    """
    db.info.setdefault(_PENDING_DELETES, []).extend(entries)


@event.listens_for(Session, "after_commit")
def _delete_queued_media(session: Session) -> None:
    entries = session.info.pop(_PENDING_DELETES, None)
    if entries:
        removed = delete_media_files(entries)
        logger.info("Removed %d media files after commit", removed)


@event.listens_for(Session, "after_rollback")
def _discard_queued_media(session: Session) -> None:
    session.info.pop(_PENDING_DELETES, None)

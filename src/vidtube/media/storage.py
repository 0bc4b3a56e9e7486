"""Media storage for avatars, cover images, thumbnails and video files."""
import logging
from dataclasses import dataclass
from pathlib import Path

from fastapi import Request, UploadFile

from vidtube.errors import DependencyError, ValidationError
from vidtube.utils import generate_id

logger = logging.getLogger("media")

IMAGE_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
VIDEO_CONTENT_TYPES = {"video/mp4", "video/webm", "video/ogg", "video/quicktime"}
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg", ".mov")
CHUNK_SIZE = 1024 * 1024  # 1 MB


@dataclass(frozen=True)
class MediaAsset:
    url: str
    public_id: str


def _check_kind(file: UploadFile, kind: str) -> str:
    ct = (file.content_type or "").split(";")[0].strip().lower()
    name = (file.filename or "").lower()
    if kind == "image":
        allowed, extensions = IMAGE_CONTENT_TYPES, IMAGE_EXTENSIONS
    elif kind == "video":
        allowed, extensions = VIDEO_CONTENT_TYPES, VIDEO_EXTENSIONS
    else:
        raise ValueError(f"Unknown media kind {kind!r}")
    if ct not in allowed and not name.endswith(extensions):
        raise ValidationError(f"File must be a {kind} ({', '.join(e.lstrip('.') for e in extensions)})")
    suffix = Path(name).suffix
    if not suffix or len(suffix) > 10:
        suffix = extensions[0]
    return suffix


class LocalMediaStorage:
    """Stores uploads on disk under ``root/<kind>/`` and serves them from ``url_prefix``."""

    def __init__(self, root: str, url_prefix: str):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def upload(self, file: UploadFile, kind: str) -> MediaAsset:
        suffix = _check_kind(file, kind)
        public_id = f"{kind}/{generate_id()}{suffix}"
        path = self.root / public_id
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as f:
                while chunk := file.file.read(CHUNK_SIZE):
                    f.write(chunk)
        except OSError as exc:
            logger.error(f"Upload of {file.filename!r} failed: {exc}")
            raise DependencyError("Error uploading file to media storage") from exc
        logger.info(f"Stored {kind} upload as {public_id}")
        return MediaAsset(url=f"{self.url_prefix}/{public_id}", public_id=public_id)

    def delete(self, public_id: str, kind: str) -> bool:
        if not public_id or not public_id.startswith(f"{kind}/"):
            return False
        path = self.root / public_id
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error(f"Delete of {public_id} failed: {exc}")
            raise DependencyError("Something went wrong while deleting the file from media storage") from exc
        logger.info(f"Deleted {public_id}")
        return True


def get_media_storage(request: Request) -> LocalMediaStorage:
    return request.app.state.media

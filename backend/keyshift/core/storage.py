import uuid
from pathlib import Path
import structlog

log = structlog.get_logger()


class StorageClient:
    """Lokal temporär lagring för uppladdade och renderade filer."""

    def _root(self) -> Path:
        from keyshift.config import settings
        return Path(settings.UPLOAD_DIR)

    def save_upload(self, data: bytes, suffix: str) -> Path:
        root = self._root()
        root.mkdir(parents=True, exist_ok=True)
        path = root / f"{uuid.uuid4().hex}{suffix}"
        path.write_bytes(data)
        log.info("upload_stored", path=str(path), size=len(data))
        return path

    def output_path(self, filename: str) -> Path:
        # unique prefix so two concurrent requests for the same target don't collide
        return self._root() / f"{uuid.uuid4().hex[:8]}_{filename}"

    def cleanup(self, *paths: Path) -> None:
        for path in paths:
            try:
                Path(path).unlink(missing_ok=True)
            except OSError as e:
                log.warning("storage_cleanup_failed", path=str(path), error=str(e))


storage_client = StorageClient()


async def init_storage():
    """Skapa upload-katalogen om den saknas."""
    root = storage_client._root()
    root.mkdir(parents=True, exist_ok=True)
    log.info("upload_dir_ready", path=str(root.resolve()))

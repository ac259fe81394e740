"""Ways of handing an exported file to the user."""
import logging
from pathlib import Path
from typing import Optional

from drivelog.errors import DeliveryError
from drivelog.ports import FileDelivery

logger = logging.getLogger(__name__)


class DirectoryDelivery:
    """Saves the file into a local export directory."""

    def __init__(self, export_dir: Path):
        self.export_dir = Path(export_dir)

    def deliver(self, content: str, filename: str, mime_type: str) -> str:
        dest = self.export_dir / filename
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            dest.write_text(content, encoding="utf-8")
        except OSError as e:
            raise DeliveryError(f"Cannot save {dest}: {e}") from e
        return str(dest)


class BrowserDownload:
    """Holds the file so the web UI can stream it to the browser."""

    def __init__(self):
        self.content: Optional[str] = None
        self.filename: Optional[str] = None
        self.mime_type: Optional[str] = None

    @property
    def ready(self) -> bool:
        return self.content is not None

    def deliver(self, content: str, filename: str, mime_type: str) -> str:
        self.content = content
        self.filename = filename
        self.mime_type = mime_type
        return filename


class FallbackDelivery:
    """Try ``primary`` and fall back to ``fallback`` when it fails or is cancelled."""

    def __init__(self, primary: FileDelivery, fallback: FileDelivery):
        self.primary = primary
        self.fallback = fallback

    def deliver(self, content: str, filename: str, mime_type: str) -> str:
        try:
            return self.primary.deliver(content, filename, mime_type)
        except DeliveryError as e:
            logger.warning("Primary delivery of %s failed, falling back: %s", filename, e)
        return self.fallback.deliver(content, filename, mime_type)

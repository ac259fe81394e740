"""Blob store adapters for the trip log."""
import logging
import os
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from drivelog.config import Settings
from drivelog.database import make_engine, make_session_factory
from drivelog.errors import PersistenceError
from drivelog.models.blob import Blob

logger = logging.getLogger(__name__)


class MemoryBlobStore:
    def __init__(self, text: Optional[str] = None):
        self.text = text

    def load(self) -> Optional[str]:
        return self.text

    def save(self, text: str) -> None:
        self.text = text


class FileBlobStore:
    """Keeps each key in its own JSON file under ``data_dir``."""

    def __init__(self, data_dir: Path, key: str):
        self.path = Path(data_dir) / f"{key}.json"

    def load(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e

    def save(self, text: str) -> None:
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e


class SqlBlobStore:
    """Key/value row in the ``blobs`` table."""

    def __init__(self, session_factory: sessionmaker, key: str):
        self.session_factory = session_factory
        self.key = key

    def load(self) -> Optional[str]:
        try:
            with self.session_factory() as session:
                blob = session.get(Blob, self.key)
                return blob.value if blob else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot read blob {self.key!r}: {e}") from e

    def save(self, text: str) -> None:
        try:
            with self.session_factory() as session:
                blob = session.get(Blob, self.key)
                if blob is None:
                    session.add(Blob(key=self.key, value=text))
                else:
                    blob.value = text
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot write blob {self.key!r}: {e}") from e


def build_blob_store(settings: Settings):
    if settings.storage_backend == "memory":
        return MemoryBlobStore()
    if settings.storage_backend == "file":
        return FileBlobStore(Path(settings.data_dir), settings.storage_key)
    engine = make_engine(settings.database_url)
    logger.info("Using SQL blob store at %s", engine.url.render_as_string(hide_password=True))
    return SqlBlobStore(make_session_factory(engine), settings.storage_key)

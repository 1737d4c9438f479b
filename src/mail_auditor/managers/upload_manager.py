# src/mail_auditor/managers/upload_manager.py
import logging
from pathlib import Path
from typing import BinaryIO, Union

from werkzeug.utils import secure_filename

from ..errors import InputError

logger = logging.getLogger(__name__)


class UploadManager:
    """
    Stores uploaded email files in a single directory and hands them back by filename.
    Filenames are sanitised; lookups never leave the upload directory.
    """

    def __init__(self, upload_dir: Union[str, Path]):
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(self, stream: BinaryIO, filename: str) -> str:
        """
        Writes the stream to the upload directory.

        Returns:
            str: The stored (sanitised) filename, usable with resolve().
        """
        safe_name = secure_filename(filename or "")
        if not safe_name:
            raise InputError(f"Invalid upload filename: {filename!r}")

        target = self.upload_dir / safe_name
        with open(target, "wb") as f:
            while True:
                chunk = stream.read(64 * 1024)
                if not chunk:
                    break
                f.write(chunk)

        logger.info("Stored upload %s (%d bytes)", safe_name, target.stat().st_size)
        return safe_name

    def resolve(self, filename: str) -> Path:
        """Maps a stored filename back to its path."""
        safe_name = secure_filename(filename or "")
        if not safe_name or safe_name != filename:
            raise InputError(f"Unknown file: {filename!r}")

        path = self.upload_dir / safe_name
        if not path.is_file():
            raise InputError(f"Unknown file: {filename!r}")
        return path

    def read(self, filename: str) -> bytes:
        path = self.resolve(filename)
        try:
            return path.read_bytes()
        except OSError as e:
            raise InputError(f"Could not read {filename!r}: {e}") from e

"""
File Blob Store

Stores the document as a UTF-8 text file next to the host process
(typically the user's data directory).

DESIGN DECISION: Writes never touch the live file directly. The new
document goes to a temporary file in the same directory and is then
moved over the old one with os.replace, which is atomic on the same
filesystem. A failed save therefore leaves the previous document as it
was.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mes_comptes.services.storage.interface import (
    BlobStoreInterface,
    StoreUnavailable,
)


class FileBlobStore(BlobStoreInterface):
    """Whole-file text store."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return f"file:{self._path}"

    def _read_text(self) -> Optional[str]:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    async def read(self) -> Optional[str]:
        """Read the data file; None if it does not exist yet."""
        try:
            return await asyncio.to_thread(self._read_text)
        except (OSError, UnicodeDecodeError) as e:
            raise StoreUnavailable(f"Failed to read {self._path}: {e}") from e

    async def write(self, text: str) -> bool:
        """Atomically replace the data file."""
        try:
            await asyncio.to_thread(self._write_text, text)
            return True
        except OSError as e:
            raise StoreUnavailable(f"Failed to write {self._path}: {e}") from e

"""
readable_file.py — Random-Access File Sources
================================================
File descriptors handed to the chunk extractor: an identifier, a byte
length, and a way to open a seekable binary reader over the content.
"""

import io
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class ReadableFile(ABC):
    """A file the extractor can read chunks from."""

    @property
    @abstractmethod
    def file_id(self) -> str:
        """Identifier attached to every chunk of this file."""

    @property
    @abstractmethod
    def size_bytes(self) -> int:
        """Total length of the file in bytes."""

    @abstractmethod
    def open_seekable(self) -> BinaryIO:
        """
        Open a seekable binary reader over the file content.

        The caller owns the returned reader and must close it.

        Raises:
            OSError: If the file cannot be opened.
        """


class LocalReadableFile(ReadableFile):
    """A file on the local filesystem."""

    def __init__(self, path: str, file_id: Optional[str] = None):
        """
        Args:
            path: Filesystem path of the file.
            file_id: Identifier for emitted chunks (defaults to the path).

        Raises:
            FileNotFoundError: If the path does not exist.
        """
        self.path = Path(path)
        self._file_id = file_id if file_id is not None else str(path)
        self._size = os.stat(self.path).st_size

    @property
    def file_id(self) -> str:
        return self._file_id

    @property
    def size_bytes(self) -> int:
        return self._size

    def open_seekable(self) -> BinaryIO:
        logger.debug("Opening %s for random access", self.path)
        return open(self.path, "rb")

    def __repr__(self) -> str:
        return f"LocalReadableFile(path={str(self.path)!r}, size={self._size})"


class InMemoryReadableFile(ReadableFile):
    """File content held in memory."""

    def __init__(self, file_id: str, data: bytes):
        self._file_id = file_id
        self._data = bytes(data)

    @property
    def file_id(self) -> str:
        return self._file_id

    @property
    def size_bytes(self) -> int:
        return len(self._data)

    def open_seekable(self) -> BinaryIO:
        return io.BytesIO(self._data)

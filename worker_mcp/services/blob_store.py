"""Filesystem blob capability.

Objects are stored as files directly under a root directory. Keys must be a
single path segment; anything that could escape the root is rejected.
"""

import asyncio
from pathlib import Path


class FileBlobStore:
    def __init__(self, root: str | Path):
        self._root = Path(root)

    def _path(self, key: str) -> Path:
        if not key or key in (".", "..") or "/" in key or "\\" in key:
            raise ValueError(f"Invalid blob key: {key!r}")
        return self._root / key

    async def get(self, key: str) -> bytes | None:
        path = self._path(key)

        def _read() -> bytes | None:
            if not path.is_file():
                return None
            return path.read_bytes()

        return await asyncio.to_thread(_read)

    async def put(self, key: str, data: bytes) -> None:
        path = self._path(key)

        def _write() -> None:
            self._root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        await asyncio.to_thread(_write)

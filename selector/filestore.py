# selector/filestore.py
import hashlib
import os
from pathlib import Path

# Blobs are written world-writable
FILE_PERM = 0o777
SHA_LENGTH = 8


def file_sha(data: bytes) -> str:
    """Truncated hex SHA-1 of the bytes, used as the blob's name."""
    return hashlib.sha1(data).hexdigest()[:SHA_LENGTH]


class FileStore:
    """Content-addressed blob store: one file per distinct digest under `root`."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path(self, name: str) -> Path:
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(f"invalid blob name: {name!r}")
        return self.root / name

    def store(self, data: bytes) -> str:
        # No existence check: identical content rewrites the same file and a
        # digest collision replaces the older blob.
        sha = file_sha(data)
        path = self.path(sha)
        with open(path, "wb") as f:
            f.write(data)
        os.chmod(path, FILE_PERM)
        return sha

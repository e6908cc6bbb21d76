# selector/kvstore.py
"""
Disk-backed key/value store: one file per key.

A transform maps each key to a list of subdirectories under the base path;
`flat_transform` puts every key directly in the base directory. Writes
replace the whole file and take no locks, so concurrent writers to one key
race and the last write wins.
"""
import os
import tempfile
from pathlib import Path
from typing import Callable, List

Transform = Callable[[str], List[str]]

DEFAULT_FILE_PERM = 0o666


class InvalidKeyError(ValueError):
    pass


class KeyNotFoundError(KeyError):
    pass


def flat_transform(key: str) -> List[str]:
    return []


class DiskStore:
    def __init__(
        self,
        base_path: Path,
        transform: Transform = flat_transform,
        file_perm: int = DEFAULT_FILE_PERM,
        temp_dir: Path = None,
    ):
        self.base_path = Path(base_path)
        self.transform = transform
        self.file_perm = file_perm
        self.temp_dir = Path(temp_dir) if temp_dir else None
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _validate(self, key: str):
        if not key or key in (".", "..") or "/" in key or "\\" in key:
            raise InvalidKeyError(f"invalid key: {key!r}")

    def _path_for(self, key: str) -> Path:
        self._validate(key)
        return self.base_path.joinpath(*self.transform(key), key)

    def read(self, key: str) -> bytes:
        """Return the stored value, or raise KeyNotFoundError if there is none."""
        path = self._path_for(key)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            raise KeyNotFoundError(key)

    def write(self, key: str, value: bytes):
        """Replace the value stored under key."""
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        if self.temp_dir is None:
            with open(path, "wb") as f:
                f.write(value)
            os.chmod(path, self.file_perm)
            return

        # Stage in the temp dir, then rename over the destination
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.temp_dir, prefix=f"{key}-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.chmod(tmp_name, self.file_perm)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

import os
import logging

logger = logging.getLogger(__name__)

METADATA_DIR = ".twig"
DEFAULT_PROTECTED_PATHS = frozenset({"Makefile", ".DS_Store"})

class WorkingTree:
    """File access to the working directory.

    Only regular files directly under the root are part of the working tree.
    Subdirectories, including the metadata directory, are never listed.
    """

    def __init__(self, root:str):
        self.root = root

    def _path(self, filename:str) -> str:
        if not is_valid_filename(filename):
            raise ValueError(f"'{filename}' is not a valid working tree filename.")
        return os.path.join(self.root, filename)

    def exists(self, filename:str) -> bool:
        if not is_valid_filename(filename):
            return False
        return os.path.isfile(os.path.join(self.root, filename))

    def read_bytes(self, filename:str) -> bytes:
        with open(self._path(filename), 'rb') as f:
            return f.read()

    def read_bytes_or_none(self, filename:str) -> bytes | None:
        if not self.exists(filename):
            return None
        return self.read_bytes(filename)

    def write_bytes(self, filename:str, data:bytes):
        with open(self._path(filename), 'wb') as f:
            f.write(data)
        logger.debug(f"Wrote {filename} ({len(data)} bytes)")

    def delete(self, filename:str) -> bool:
        if not self.exists(filename):
            return False
        os.remove(self._path(filename))
        logger.debug(f"Deleted {filename}")
        return True

    def list_entries(self) -> list[str]:
        with os.scandir(self.root) as entries:
            return sorted(entry.name for entry in entries if entry.is_file() and entry.name != METADATA_DIR)

def is_valid_filename(filename:str) -> bool:
    if not isinstance(filename, str) or filename in ("", ".", ".."):
        return False
    if "/" in filename or os.sep in filename or "\x00" in filename:
        return False
    if os.altsep is not None and os.altsep in filename:
        return False
    return True

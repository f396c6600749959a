import os
import logging
from twig.store.index_store import IndexStore

logger = logging.getLogger(__name__)

class FileIndexStore(IndexStore):
    """Keeps the repository index in a single file, '<store_path>/index'.

    Saves go to a temporary file first, which is then renamed over the old index.
    """

    def __init__(self, store_path:str):
        super().__init__()
        self.store_path = store_path
        self.index_path = os.path.join(store_path, 'index')
        os.makedirs(store_path, exist_ok=True)

    def load(self) -> bytes | None:
        if not os.path.exists(self.index_path):
            return None
        with open(self.index_path, 'rb') as f:
            return f.read()

    def save(self, data:bytes) -> None:
        if(data is None):
            raise ValueError("data must not be None.")
        tmp_path = self.index_path + ".tmp"
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.index_path)
        logger.debug(f"Saved index ({len(data)} bytes) to {self.index_path}")

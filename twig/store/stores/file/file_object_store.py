import os
import logging
from functools import lru_cache
from twig.store.object_model import *
from twig.store.object_serialization import *
from twig.store.object_store import ObjectStore

logger = logging.getLogger(__name__)

class FileObjectStore(ObjectStore):
    """Stores every object as its own file under '<store_path>/obj', named by the hex object id."""

    def __init__(self, store_path:str):
        super().__init__()
        self.store_path = store_path
        self.object_path = os.path.join(store_path, 'obj')
        #ensure that the paths exists
        os.makedirs(self.object_path, exist_ok=True)

    def store(self, object:Object) -> ObjectId:
        if(object is None):
            raise ValueError("object must not be None.")
        bytes, object_id, object_path = self._to_bytes_and_path(object)
        #objects are immutable, so an existing file is already the right one
        if os.path.exists(object_path):
            return object_id
        # write next to the final file and rename, so that a crash never leaves a truncated object
        tmp_path = object_path + ".tmp"
        with open(tmp_path, 'wb') as f:
            f.write(bytes)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, object_path)
        #a previous load of this id may have cached a miss
        FileObjectStore.load.cache_clear()
        logger.debug(f"Stored object {object_id.hex()} ({len(bytes)} bytes)")
        return object_id

    def _to_bytes_and_path(self, object:Object):
        bytes = object_to_bytes(object)
        object_id = get_object_id(bytes)
        object_path = self._to_path(object_id)
        return bytes, object_id, object_path

    @lru_cache(maxsize=1024)  # noqa: B019
    def load(self, object_id:ObjectId) -> Object | None:
        if(object_id is None):
            raise ValueError("object_id must not be None.")
        object_path = self._to_path(object_id)
        if not os.path.exists(object_path):
            return None
        with open(object_path, 'rb') as f:
            bytes = f.read()
        return bytes_to_object(bytes)

    def _to_path(self, object_id:ObjectId):
        object_id_str = object_id.hex()
        return os.path.join(self.object_path, object_id_str)

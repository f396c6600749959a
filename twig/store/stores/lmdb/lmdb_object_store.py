import logging
from functools import lru_cache
from twig.store.object_model import *
from twig.store.object_serialization import *
from twig.store.object_store import ObjectStore
from . shared_env import SharedEnvironment, OBJECT_DB

logger = logging.getLogger(__name__)

class LmdbObjectStore(ObjectStore):
    def __init__(self, shared_env:SharedEnvironment):
        super().__init__()
        if(not isinstance(shared_env, SharedEnvironment)):
            raise Exception(f"shared_env must be of type SharedEnvironment, not '{type(shared_env)}'.")
        self._shared_env = shared_env

    def store(self, object:Object) -> ObjectId:
        if(object is None):
            raise ValueError("object must not be None.")
        bytes = object_to_bytes(object)
        object_id = get_object_id(bytes)
        # overwrite=False keeps the first write, objects are immutable
        if self._shared_env.put(OBJECT_DB, object_id, bytes, overwrite=False):
            LmdbObjectStore.load.cache_clear()
            logger.debug(f"Stored object {object_id.hex()} ({len(bytes)} bytes)")
        return object_id

    @lru_cache(maxsize=1024*10)  # noqa: B019
    def load(self, object_id:ObjectId) -> Object | None:
        if(object_id is None):
            raise ValueError("object_id must not be None.")
        if(not is_object_id(object_id)):
            raise TypeError(f"object_id must be of type ObjectId, not '{type(object_id)}'.")
        with self._shared_env.begin_object_txn(write=False) as txn:
            bytes = txn.get(object_id, default=None)
        if bytes is None:
            return None
        return bytes_to_object(bytes)

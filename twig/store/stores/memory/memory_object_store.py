from twig.store.object_model import *
from twig.store.object_serialization import *
from twig.store.object_store import ObjectStore

class MemoryObjectStore(ObjectStore):
    _store:dict[ObjectId, bytes]

    def __init__(self):
        super().__init__()
        self._store = {}

    def store(self, object:Object) -> ObjectId:
        bytes = object_to_bytes(object)
        object_id = get_object_id(bytes)
        self._store.setdefault(object_id, bytes)
        return object_id

    def load(self, object_id:ObjectId) -> Object | None:
        bytes = self._store.get(object_id)
        if bytes is None:
            return None
        return bytes_to_object(bytes)

    def __len__(self) -> int:
        return len(self._store)

from twig.store.index_store import IndexStore

class MemoryIndexStore(IndexStore):
    _data:bytes | None

    def __init__(self):
        super().__init__()
        self._data = None

    def load(self) -> bytes | None:
        return self._data

    def save(self, data:bytes) -> None:
        self._data = bytes(data)

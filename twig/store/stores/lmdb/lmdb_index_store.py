import logging
from twig.store.index_store import IndexStore
from . shared_env import SharedEnvironment, INDEX_DB

logger = logging.getLogger(__name__)

_INDEX_KEY = b'index'

class LmdbIndexStore(IndexStore):
    """Keeps the index under a single key. A write transaction is atomic, readers see the old or the new index."""

    def __init__(self, shared_env:SharedEnvironment):
        super().__init__()
        if(not isinstance(shared_env, SharedEnvironment)):
            raise Exception(f"shared_env must be of type SharedEnvironment, not '{type(shared_env)}'.")
        self._shared_env = shared_env

    def load(self) -> bytes | None:
        with self._shared_env.begin_index_txn(write=False) as txn:
            return txn.get(_INDEX_KEY, default=None)

    def save(self, data:bytes) -> None:
        if(data is None):
            raise ValueError("data must not be None.")
        if not self._shared_env.put(INDEX_DB, _INDEX_KEY, data, overwrite=True):
            raise Exception("Not able to save the index in lmdb 'index' database.")
        logger.debug(f"Saved index ({len(data)} bytes)")

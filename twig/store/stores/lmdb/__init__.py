from . shared_env import SharedEnvironment
from . lmdb_object_store import LmdbObjectStore
from . lmdb_index_store import LmdbIndexStore
__all__ = ['SharedEnvironment', 'LmdbObjectStore', 'LmdbIndexStore']

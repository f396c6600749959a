from . memory_object_store import MemoryObjectStore
from . memory_index_store import MemoryIndexStore
__all__ = ['MemoryObjectStore', 'MemoryIndexStore']

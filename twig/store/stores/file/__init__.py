from . file_object_store import FileObjectStore
from . file_index_store import FileIndexStore
__all__ = ['FileObjectStore', 'FileIndexStore']

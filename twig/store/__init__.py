from . object_model import *
from . object_store import ObjectLoader, ObjectStore
from . index_store import IndexStore
from . object_serialization import (object_to_bytes, bytes_to_object, is_object_id_str, is_object_id_prefix, is_object_id,
                                    to_object_id_str, to_object_id, get_object_id, blob_id, commit_id, is_blob, is_commit)

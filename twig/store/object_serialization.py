import hashlib
import string
from twig.store.object_model import *

# Canonical serialization of Twig objects.
# The object id of every object is the sha256 of these bytes, so the format
# must stay stable: fixed field order, explicit separators, sorted snapshots.

_HEADER_ENCODING = 'ascii'
_STR_ENCODING = 'utf-8'
_ID_LEN = 32
_ID_STR_LEN = 64

def get_object_id(bytes:bytes | bytearray) -> ObjectId:
    return hashlib.sha256(bytes).digest()

def is_object_id_str(object_id_str:str) -> bool:
    return isinstance(object_id_str, str) and len(object_id_str) == _ID_STR_LEN and all(c in string.hexdigits for c in object_id_str)

def is_object_id_prefix(prefix:str) -> bool:
    return isinstance(prefix, str) and 0 < len(prefix) <= _ID_STR_LEN and all(c in string.hexdigits for c in prefix)

def is_object_id(object_id:ObjectId) -> bool:
    return (isinstance(object_id, bytes) or isinstance(object_id, bytearray)) and len(object_id) == _ID_LEN

def to_object_id_str(object_id:ObjectId) -> str:
    return object_id.hex()

def to_object_id(object_id_str:str) -> ObjectId:
    return bytes.fromhex(object_id_str)

def is_blob(object:Object) -> bool:
    return isinstance(object, Blob) or type(object).__name__ == 'Blob'

def is_commit(object:Object) -> bool:
    return isinstance(object, Commit) or type(object).__name__ == 'Commit'

def object_to_bytes(object:Object) -> bytes:
    if is_blob(object):
        return blob_to_bytes(object)
    elif is_commit(object):
        return commit_to_bytes(object)
    else:
        raise TypeError("Unknown object type")

def bytes_to_object(bytes) -> Object:
    object_type, _ = _peek_object_header(bytes)
    if object_type == 'blob':
        return bytes_to_blob(bytes)
    elif object_type == 'commit':
        return bytes_to_commit(bytes)
    else:
        raise TypeError("Unknown object type")

def blob_id(blob:Blob) -> BlobId:
    return get_object_id(blob_to_bytes(blob))

def commit_id(commit:Commit) -> CommitId:
    return get_object_id(commit_to_bytes(commit))

def _object_header_to_bytes(object_type:str, length:int) -> bytearray:
    return bytearray(f"{object_type} {length}\x00".encode(_HEADER_ENCODING))

def _peek_object_header(bytes:bytes) -> tuple[str, int]:
    header = bytes[:bytes.find(b'\x00')]
    header_str = header.decode(_HEADER_ENCODING)
    object_type, length_str = header_str.split(' ')
    return object_type, int(length_str)

def _enforce_and_skip_object_header(bytes:bytes, expected_object_type:str) -> bytes:
    header, body = bytes.split(b'\x00', 1)
    header_str = header.decode(_HEADER_ENCODING)
    object_type, length_str = header_str.split(' ')
    if object_type != expected_object_type:
        raise TypeError(f"Expected {expected_object_type} but got {object_type}")
    length = int(length_str)
    if len(body) != length:
        raise Exception(f"Expected object body of {length} bytes but got {len(body)}")
    return body

def _enforce_object_id(object_id:ObjectId) -> ObjectId:
    if not isinstance(object_id, (bytes, bytearray)):
        raise TypeError(f"Expected object id of type bytes but got {type(object_id)}")
    if len(object_id) != _ID_LEN:
        raise ValueError(f"Expected object id of {_ID_LEN} bytes but got {len(object_id)}")
    return bytes(object_id)

def _split_bytes(bytes:bytes, n:int) -> tuple[bytes, bytes]:
    return bytes[:n], bytes[n:]

def _str_to_bytes(value:str, field:str) -> bytes:
    if '\x00' in value:
        raise ValueError(f"{field} must not contain NUL characters.")
    return value.encode(_STR_ENCODING)

def _read_str(bytes:bytes) -> tuple[str, bytes]:
    value, bytes = bytes.split(b'\x00', 1)
    return value.decode(_STR_ENCODING), bytes

def blob_to_bytes(object:Blob) -> bytes:
    result = bytearray()
    result += _str_to_bytes(object.filename, "Blob filename")
    result += b'\x00'
    result.extend(object.data)
    objec_header = _object_header_to_bytes('blob', len(result))
    return bytes(objec_header + result)

def bytes_to_blob(bytes) -> Blob:
    bytes = _enforce_and_skip_object_header(bytes, 'blob')
    filename, bytes = _read_str(bytes)
    data = bytes #the remaining bytes are the data
    return Blob(filename, data)

def _parents_to_bytes(parents:Parents, result:bytearray) -> bytearray:
    ids = parent_ids(parents)
    result += f"{len(ids)}".encode(_HEADER_ENCODING)
    for parent_id in ids:
        result += _enforce_object_id(parent_id)
    return result

def _read_parents(bytes:bytes) -> tuple[Parents, bytes]:
    count, bytes = _split_bytes(bytes, 1)
    count = int(count.decode(_HEADER_ENCODING))
    if count == 0:
        return Root(), bytes
    parent, bytes = _split_bytes(bytes, _ID_LEN)
    if count == 1:
        return Single(_enforce_object_id(parent)), bytes
    if count == 2:
        parent2, bytes = _split_bytes(bytes, _ID_LEN)
        return Merge(_enforce_object_id(parent), _enforce_object_id(parent2)), bytes
    raise ValueError(f"Expected at most 2 parents but got {count}")

def commit_to_bytes(object:Commit) -> bytes:
    result = bytearray()
    result = _parents_to_bytes(object.parents, result)
    result += f"{int(object.timestamp)}\x00".encode(_HEADER_ENCODING)
    result += _str_to_bytes(object.message, "Commit message")
    result += b'\x00'
    #sorted, so that the same snapshot always serializes to the same bytes
    for filename in sorted(object.snapshot):
        result += _str_to_bytes(filename, "Snapshot filename")
        result += b'\x00'
        result += _enforce_object_id(object.snapshot[filename])
    objec_header = _object_header_to_bytes('commit', len(result))
    return bytes(objec_header + result)

def bytes_to_commit(bytes) -> Commit:
    bytes = _enforce_and_skip_object_header(bytes, 'commit')
    parents, bytes = _read_parents(bytes)
    timestamp, bytes = _read_str(bytes)
    message, bytes = _read_str(bytes)
    snapshot = {}
    while len(bytes) > 0:
        filename, bytes = _read_str(bytes)
        object_id, bytes = _split_bytes(bytes, _ID_LEN)
        snapshot[filename] = _enforce_object_id(object_id)
    return Commit(parents, message, int(timestamp), snapshot)

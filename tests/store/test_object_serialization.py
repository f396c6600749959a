import os
import pytest
from twig.store.object_model import *
from twig.store.object_serialization import *

# random test data
def get_random_object_id() -> ObjectId:
    return get_object_id(os.urandom(32))

def get_random_blob(filename:str="a.txt") -> Blob:
    return Blob(filename, os.urandom(1024))

def get_random_snapshot() -> Snapshot:
    return {f"file{i}.txt": get_random_object_id() for i in range(50)}

# tests
def test_blob():
    test_data = get_random_blob()
    b = blob_to_bytes(test_data)
    test_data_2 = bytes_to_blob(b)
    assert test_data == test_data_2

def test_blob_empty_data():
    test_data = Blob("empty.txt", b"")
    assert bytes_to_blob(blob_to_bytes(test_data)) == test_data

def test_blob_id_covers_filename():
    data = os.urandom(64)
    assert blob_id(Blob("a.txt", data)) != blob_id(Blob("b.txt", data))
    assert blob_id(Blob("a.txt", data)) == blob_id(Blob("a.txt", bytes(data)))

def test_root_commit():
    test_data = Commit(Root(), INITIAL_COMMIT_MESSAGE, INITIAL_COMMIT_TIMESTAMP, {})
    test_data_2 = bytes_to_commit(commit_to_bytes(test_data))
    assert test_data == test_data_2
    assert isinstance(test_data_2.parents, Root)

def test_single_parent_commit():
    test_data = Commit(Single(get_random_object_id()), "a message\nwith two lines", 1700000000, get_random_snapshot())
    test_data_2 = bytes_to_commit(commit_to_bytes(test_data))
    assert test_data == test_data_2
    assert isinstance(test_data_2.parents, Single)

def test_merge_commit():
    test_data = Commit(Merge(get_random_object_id(), get_random_object_id()), "Merged a into b.", 1700000000, get_random_snapshot())
    test_data_2 = bytes_to_commit(commit_to_bytes(test_data))
    assert test_data == test_data_2
    assert isinstance(test_data_2.parents, Merge)
    assert parent_ids(test_data_2.parents) == [test_data.parents.parent, test_data.parents.parent2]

def test_commit_id_is_independent_of_snapshot_order():
    snapshot = get_random_snapshot()
    reversed_snapshot = dict(reversed(list(snapshot.items())))
    parents = Single(get_random_object_id())
    assert commit_id(Commit(parents, "m", 1, snapshot)) == commit_id(Commit(parents, "m", 1, reversed_snapshot))

def test_commit_id_covers_every_field():
    parents = Single(get_random_object_id())
    snapshot = get_random_snapshot()
    base = commit_id(Commit(parents, "m", 1, snapshot))
    assert base != commit_id(Commit(parents, "m2", 1, snapshot))
    assert base != commit_id(Commit(parents, "m", 2, snapshot))
    assert base != commit_id(Commit(Single(get_random_object_id()), "m", 1, snapshot))
    assert base != commit_id(Commit(parents, "m", 1, {}))

def test_object_to_bytes_dispatch():
    blob = get_random_blob()
    commit = Commit(Root(), "m", 0, {})
    assert bytes_to_object(object_to_bytes(blob)) == blob
    assert bytes_to_object(object_to_bytes(commit)) == commit
    with pytest.raises(TypeError):
        object_to_bytes({"not": "an object"})

def test_nul_in_strings_is_rejected():
    with pytest.raises(ValueError):
        blob_to_bytes(Blob("bad\x00name", b"data"))
    with pytest.raises(ValueError):
        commit_to_bytes(Commit(Root(), "bad\x00message", 0, {}))

def test_wrong_type_header_is_rejected():
    b = blob_to_bytes(get_random_blob())
    with pytest.raises(TypeError):
        bytes_to_commit(b)

def test_object_id_strings():
    object_id = get_random_object_id()
    object_id_str = to_object_id_str(object_id)
    assert is_object_id_str(object_id_str)
    assert to_object_id(object_id_str) == object_id
    assert is_object_id(object_id)
    assert is_object_id_prefix(object_id_str[:7])
    assert not is_object_id_prefix("")
    assert not is_object_id_prefix("xyz")
    assert not is_object_id_str(object_id_str[:10])

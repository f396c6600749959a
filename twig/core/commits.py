import logging
from typing import Iterable, Iterator
from twig.store import *
from . errors import (CommitNotFoundError, AmbiguousCommitIdError, EmptyCommitMessageError, NoChangesError,
                      CorruptRepositoryError)

logger = logging.getLogger(__name__)

# Helpers to build, persist, load, and walk commits.

def initial_commit() -> Commit:
    return Commit(Root(), INITIAL_COMMIT_MESSAGE, INITIAL_COMMIT_TIMESTAMP, {})

def build_commit(
        message:str,
        parents:Parents,
        parent_snapshot:Snapshot,
        removal_marks:Iterable[str],
        staged:dict[str, bytes],
        timestamp:int,
        allow_empty:bool=False,
        ) -> tuple[Commit, list[Blob]]:
    """Builds a new commit on top of a parent snapshot.

    Staged files override the parent's entries, removal-marked files are dropped.
    Returns the commit and the blobs that have to be stored before it.
    """
    if message is None or message.strip() == "":
        raise EmptyCommitMessageError()
    removal_marks = set(removal_marks)
    if not allow_empty and len(staged) == 0 and len(removal_marks) == 0:
        raise NoChangesError()
    snapshot = {filename: bid for filename, bid in parent_snapshot.items() if filename not in removal_marks}
    blobs = []
    for filename in sorted(staged):
        blob = Blob(filename, staged[filename])
        snapshot[filename] = blob_id(blob)
        blobs.append(blob)
    return Commit(parents, message, int(timestamp), snapshot), blobs

def persist_commit(store:ObjectStore, commit:Commit, blobs:list[Blob]) -> CommitId:
    # blobs must be durable before the commit that references them
    for blob in blobs:
        store.store(blob)
    new_commit_id = store.store(commit)
    logger.debug(f"Persisted commit {new_commit_id.hex()} with {len(blobs)} new blobs")
    return new_commit_id

def load_commit(loader:ObjectLoader, commit_id:CommitId) -> Commit:
    commit = loader.load(commit_id)
    if commit is None:
        raise CommitNotFoundError()
    if not is_commit(commit):
        raise CorruptRepositoryError(f"Object {commit_id.hex()} is not a commit.")
    return commit

def load_blob(loader:ObjectLoader, blob_id:BlobId) -> Blob:
    blob = loader.load(blob_id)
    if blob is None:
        raise CorruptRepositoryError(f"Blob {blob_id.hex()} is missing from the object store.")
    if not is_blob(blob):
        raise CorruptRepositoryError(f"Object {blob_id.hex()} is not a blob.")
    return blob

def iter_first_parent(loader:ObjectLoader, commit_id:CommitId) -> Iterator[tuple[CommitId, Commit]]:
    """Walks from a commit to the root, following only first parents."""
    while commit_id is not None:
        commit = load_commit(loader, commit_id)
        yield commit_id, commit
        commit_id = first_parent(commit.parents)

def resolve_commit_id(ref:str, all_commit_ids:Iterable[CommitId]) -> CommitId:
    """Resolves a full or abbreviated hex commit id against the known commits."""
    if ref is None:
        raise CommitNotFoundError()
    ref = ref.strip().lower()
    if not is_object_id_prefix(ref):
        raise CommitNotFoundError()
    matches = []
    for commit_id in all_commit_ids:
        commit_id_str = to_object_id_str(commit_id)
        if commit_id_str == ref:
            return commit_id
        if commit_id_str.startswith(ref):
            matches.append(commit_id)
    if len(matches) == 0:
        raise CommitNotFoundError()
    if len(matches) > 1:
        raise AmbiguousCommitIdError(f"More than one commit matches the id '{ref}'.")
    return matches[0]

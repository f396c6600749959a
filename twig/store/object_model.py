from typing import NamedTuple

# Type aliases and structures that define the entire object model for the Twig object store.

ObjectId = bytes #32 bytes, sha256 of the canonical bytes of an object

BlobId = ObjectId
# identity covers the filename as well, so equal bytes under two names are two blobs
Blob = NamedTuple("Blob",
    [('filename', str),
     ('data', bytes)])

CommitId = ObjectId

# Parents of a commit. Only the root commit has no parents, only merge commits have two.
Root = NamedTuple("Root", [])
Single = NamedTuple("Single",
    [('parent', CommitId)])
Merge = NamedTuple("Merge",
    [('parent', CommitId),
     ('parent2', CommitId)])
Parents = Root | Single | Merge

Snapshot = dict[str, BlobId] # every file tracked by a commit, not a diff

Commit = NamedTuple("Commit",
    [('parents', Parents),
     ('message', str),
     ('timestamp', int), #seconds since the epoch
     ('snapshot', Snapshot)])

Object = Blob | Commit

INITIAL_COMMIT_MESSAGE = "initial commit"
INITIAL_COMMIT_TIMESTAMP = 0

def first_parent(parents:Parents) -> CommitId | None:
    if isinstance(parents, (Single, Merge)):
        return parents.parent
    return None

def parent_ids(parents:Parents) -> list[CommitId]:
    if isinstance(parents, Merge):
        return [parents.parent, parents.parent2]
    if isinstance(parents, Single):
        return [parents.parent]
    return []

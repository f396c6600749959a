from __future__ import annotations
import base64
import json
import logging
from dataclasses import dataclass, field
from twig.store import *
from . errors import CorruptIndexError

logger = logging.getLogger(__name__)

# The mutable part of a repository: branches, history, removal marks, and the staging area.
# Both are loaded once when a repository is opened and saved together as a single index record.

INDEX_FORMAT_VERSION = 1

@dataclass
class RepoState:
    branches:dict[str, CommitId]
    current_branch:str
    all_commit_ids:list[CommitId] = field(default_factory=list)
    removal_marks:set[str] = field(default_factory=set)
    removed_log:set[str] = field(default_factory=set)

    @classmethod
    def new(cls, root_commit_id:CommitId, default_branch:str) -> RepoState:
        return cls(
            branches={default_branch: root_commit_id},
            current_branch=default_branch,
            all_commit_ids=[root_commit_id])

    @property
    def head_id(self) -> CommitId:
        return self.branches[self.current_branch]

    def set_head(self, commit_id:CommitId):
        """Moves the head of the current branch."""
        self.branches[self.current_branch] = commit_id

    def add_commit(self, commit_id:CommitId):
        if commit_id not in self.all_commit_ids:
            self.all_commit_ids.append(commit_id)

    def copy(self) -> RepoState:
        return RepoState(
            branches=dict(self.branches),
            current_branch=self.current_branch,
            all_commit_ids=list(self.all_commit_ids),
            removal_marks=set(self.removal_marks),
            removed_log=set(self.removed_log))

    def validate(self):
        if self.current_branch not in self.branches:
            raise CorruptIndexError(f"Current branch '{self.current_branch}' has no head.")
        known = set(self.all_commit_ids)
        for name, commit_id in self.branches.items():
            if commit_id not in known:
                raise CorruptIndexError(f"Branch '{name}' points to unknown commit {commit_id.hex()}.")


class StagingArea:
    """File contents captured by 'add', waiting for the next commit."""
    _staged:dict[str, bytes]

    def __init__(self, staged:dict[str, bytes]|None=None):
        self._staged = dict(staged) if staged else {}

    def stage(self, filename:str, data:bytes):
        self._staged[filename] = bytes(data)

    def unstage(self, filename:str) -> bool:
        return self._staged.pop(filename, None) is not None

    def get(self, filename:str) -> bytes | None:
        return self._staged.get(filename)

    def filenames(self) -> list[str]:
        return sorted(self._staged)

    def items(self) -> dict[str, bytes]:
        return dict(self._staged)

    def clear(self):
        self._staged.clear()

    def is_empty(self) -> bool:
        return len(self._staged) == 0

    def copy(self) -> StagingArea:
        return StagingArea(self._staged)

    def __contains__(self, filename:str) -> bool:
        return filename in self._staged

    def __len__(self) -> int:
        return len(self._staged)

    def __eq__(self, other) -> bool:
        return isinstance(other, StagingArea) and self._staged == other._staged


def index_to_bytes(state:RepoState, staging:StagingArea) -> bytes:
    doc = {
        'version': INDEX_FORMAT_VERSION,
        'current_branch': state.current_branch,
        'branches': {name: to_object_id_str(commit_id) for name, commit_id in sorted(state.branches.items())},
        'commits': [to_object_id_str(commit_id) for commit_id in state.all_commit_ids],
        'removal_marks': sorted(state.removal_marks),
        'removed_log': sorted(state.removed_log),
        'staged': {name: base64.b64encode(data).decode('ascii') for name, data in sorted(staging.items().items())},
    }
    return json.dumps(doc, indent=1).encode('utf-8')

def bytes_to_index(data:bytes) -> tuple[RepoState, StagingArea]:
    try:
        doc = json.loads(data.decode('utf-8'))
    except ValueError as e:
        raise CorruptIndexError(f"Index is not valid json: {e}") from e
    version = doc.get('version')
    if version != INDEX_FORMAT_VERSION:
        raise CorruptIndexError(f"Unsupported index version '{version}', expected {INDEX_FORMAT_VERSION}.")
    try:
        state = RepoState(
            branches={name: to_object_id(commit_id) for name, commit_id in doc['branches'].items()},
            current_branch=doc['current_branch'],
            all_commit_ids=[to_object_id(commit_id) for commit_id in doc['commits']],
            removal_marks=set(doc.get('removal_marks', [])),
            removed_log=set(doc.get('removed_log', [])))
        staging = StagingArea({name: base64.b64decode(content) for name, content in doc.get('staged', {}).items()})
    except (KeyError, ValueError, TypeError) as e:
        raise CorruptIndexError(f"Index is malformed: {e}") from e
    state.validate()
    return state, staging

import os
import logging
from enum import Enum
from typing import Callable, NamedTuple
from twig.store import *
from . commits import build_commit, persist_commit, load_commit, load_blob
from . errors import UncommittedChangesError, NoSuchBranchError, CannotMergeSelfError, CorruptRepositoryError
from . outcomes import Outcome, OutcomeKind
from . reconciler import WorkingTreeReconciler
from . repo_state import RepoState, StagingArea

logger = logging.getLogger(__name__)

# Three-way merge of two branches.
#
# The merge base ("split point") is found by walking first parents only. Second parents
# of earlier merge commits are not explored, so after several criss-crossing merges the
# split point can be an older ancestor than the true lowest common ancestor.

CONFLICT_START = b"<<<<<<< HEAD"
CONFLICT_SEPARATOR = b"======="
CONFLICT_END = b">>>>>>>"

class MergeAction(Enum):
    KEEP = "keep"
    TAKE_GIVEN = "take_given"
    ADD = "add"
    DELETE = "delete"
    CONFLICT = "conflict"

class FileMerge(NamedTuple):
    filename:str
    action:MergeAction
    current:BlobId | None
    given:BlobId | None

def find_split_point(loader:ObjectLoader, current_id:CommitId, given_id:CommitId) -> CommitId:
    current_ancestors = set()
    commit_id = current_id
    while commit_id is not None:
        current_ancestors.add(commit_id)
        commit_id = first_parent(load_commit(loader, commit_id).parents)
    commit_id = given_id
    while commit_id is not None:
        if commit_id in current_ancestors:
            return commit_id
        commit_id = first_parent(load_commit(loader, commit_id).parents)
    # every commit descends from the same root commit
    raise CorruptRepositoryError(f"Commits {current_id.hex()} and {given_id.hex()} have no common ancestor.")

def classify_file(split:BlobId|None, current:BlobId|None, given:BlobId|None) -> MergeAction:
    changed_in_current = current != split
    changed_in_given = given != split
    if not changed_in_given:
        return MergeAction.KEEP
    if not changed_in_current:
        if given is None:
            return MergeAction.DELETE
        if split is None:
            return MergeAction.ADD
        return MergeAction.TAKE_GIVEN
    if current == given:
        return MergeAction.KEEP
    return MergeAction.CONFLICT

def plan_merge(split_snapshot:Snapshot, current_snapshot:Snapshot, given_snapshot:Snapshot) -> list[FileMerge]:
    filenames = set(split_snapshot) | set(current_snapshot) | set(given_snapshot)
    plan = []
    for filename in sorted(filenames):
        current = current_snapshot.get(filename)
        given = given_snapshot.get(filename)
        action = classify_file(split_snapshot.get(filename), current, given)
        plan.append(FileMerge(filename, action, current, given))
    return plan

def render_conflict(current_data:bytes|None, given_data:bytes|None, line_separator:str=os.linesep) -> bytes:
    """Renders both sides of a conflicted file between conflict markers.

    A missing side renders as nothing. A side that does not end in a newline gets a
    separator appended, so that every marker starts on its own line.
    """
    sep = line_separator.encode('ascii')
    result = bytearray()
    result += CONFLICT_START + sep
    result += _with_trailing_newline(current_data, sep)
    result += CONFLICT_SEPARATOR + sep
    result += _with_trailing_newline(given_data, sep)
    result += CONFLICT_END + sep
    return bytes(result)

def _with_trailing_newline(data:bytes|None, sep:bytes) -> bytes:
    if not data:
        return b""
    if data.endswith(b"\n") or data.endswith(b"\r"):
        return data
    return data + sep

def merge_commit_message(given_branch:str, current_branch:str) -> str:
    return f"Merged {given_branch} into {current_branch}."


class MergeEngine:
    """Merges another branch into the current branch of a repository state."""

    def __init__(self, store:ObjectStore, reconciler:WorkingTreeReconciler, line_separator:str=os.linesep):
        self._store = store
        self._reconciler = reconciler
        self._line_separator = line_separator

    def merge(self, state:RepoState, staging:StagingArea, given_branch:str, clock:Callable[[], int]) -> Outcome:
        if not staging.is_empty() or len(state.removal_marks) > 0:
            raise UncommittedChangesError()
        if given_branch not in state.branches:
            raise NoSuchBranchError("A branch with that name does not exist.")
        if given_branch == state.current_branch:
            raise CannotMergeSelfError()

        current_id = state.head_id
        given_id = state.branches[given_branch]
        split_id = find_split_point(self._store, current_id, given_id)
        logger.debug(f"Merging {given_branch} ({given_id.hex()}) into {state.current_branch} ({current_id.hex()}), split point {split_id.hex()}")

        current = load_commit(self._store, current_id)
        given = load_commit(self._store, given_id)
        if split_id == given_id:
            return Outcome(OutcomeKind.GIVEN_IS_ANCESTOR, "Given branch is an ancestor of the current branch.")
        if split_id == current_id:
            self._reconciler.apply_snapshot(current.snapshot, given.snapshot)
            state.set_head(given_id)
            return Outcome(OutcomeKind.FAST_FORWARDED, "Current branch fast-forwarded.", given_id)

        split = load_commit(self._store, split_id)
        plan = plan_merge(split.snapshot, current.snapshot, given.snapshot)

        # work out every write first, so that nothing is touched if an untracked file is in the way
        writes:dict[str, bytes] = {}
        deletes:list[str] = []
        conflicts:list[str] = []
        for file_merge in plan:
            if file_merge.action in (MergeAction.TAKE_GIVEN, MergeAction.ADD):
                writes[file_merge.filename] = self._blob_data(file_merge.given)
            elif file_merge.action == MergeAction.CONFLICT:
                writes[file_merge.filename] = render_conflict(
                    self._blob_data(file_merge.current),
                    self._blob_data(file_merge.given),
                    self._line_separator)
                conflicts.append(file_merge.filename)
            elif file_merge.action == MergeAction.DELETE:
                deletes.append(file_merge.filename)
        self._reconciler.check_untracked_writes(current.snapshot, writes)

        for filename, data in writes.items():
            self._reconciler.write_file(filename, data)
            staging.stage(filename, data)
        for filename in deletes:
            self._reconciler.delete_file(filename)
            staging.unstage(filename)
            state.removal_marks.add(filename)
        if len(conflicts) > 0:
            logger.debug(f"Merge conflicts in: {', '.join(conflicts)}")

        commit, blobs = build_commit(
            merge_commit_message(given_branch, state.current_branch),
            Merge(current_id, given_id),
            current.snapshot,
            state.removal_marks,
            staging.items(),
            clock(),
            allow_empty=True)
        new_commit_id = persist_commit(self._store, commit, blobs)
        state.set_head(new_commit_id)
        state.add_commit(new_commit_id)
        staging.clear()
        state.removal_marks.clear()
        message = "Encountered a merge conflict." if len(conflicts) > 0 else None
        return Outcome(OutcomeKind.OK, message, new_commit_id, tuple(conflicts))

    def _blob_data(self, blob_id:BlobId|None) -> bytes | None:
        if blob_id is None:
            return None
        return load_blob(self._store, blob_id).data

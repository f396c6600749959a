from __future__ import annotations
import logging
import time
from typing import Callable, Iterable
from twig.store import *
from . commits import (initial_commit, build_commit, persist_commit, load_commit, load_blob, iter_first_parent,
                       resolve_commit_id)
from . errors import *
from . merge import MergeEngine
from . outcomes import Outcome, ok
from . reconciler import WorkingTreeReconciler
from . repo_state import RepoState, StagingArea, index_to_bytes, bytes_to_index
from . status import StatusReport, compute_status
from . worktree import WorkingTree, DEFAULT_PROTECTED_PATHS

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "master"

def _now() -> int:
    return int(time.time())

class Repository:
    """A Twig repository: object store, index, and working tree.

    The index is loaded once when the repository is opened. Every public operation is a
    transaction over it: a repository error rolls the in-memory state back and is returned
    as an Outcome, a successful mutating operation saves the index once.
    """
    _state:RepoState
    _staging:StagingArea

    def __init__(
            self,
            store:ObjectStore,
            index_store:IndexStore,
            worktree:WorkingTree,
            protected_paths:Iterable[str]=DEFAULT_PROTECTED_PATHS,
            clock:Callable[[], int]|None=None,
            ):
        self._store = store
        self._index_store = index_store
        self._worktree = worktree
        self._clock = clock or _now
        self._reconciler = WorkingTreeReconciler(store, worktree, protected_paths)
        self._merge_engine = MergeEngine(store, self._reconciler)
        data = index_store.load()
        if data is None:
            raise NotInitializedError()
        self._state, self._staging = bytes_to_index(data)

    @classmethod
    def initialize(cls, store:ObjectStore, index_store:IndexStore, default_branch:str=DEFAULT_BRANCH) -> CommitId:
        """Creates the root commit and the default branch. Fails if the index already exists."""
        if index_store.exists():
            raise AlreadyInitializedError()
        root_id = store.store(initial_commit())
        state = RepoState.new(root_id, default_branch)
        index_store.save(index_to_bytes(state, StagingArea()))
        logger.debug(f"Initialized repository, root commit {root_id.hex()} on '{default_branch}'")
        return root_id

    #===========================================================
    # Transactions
    #===========================================================
    def _run(self, operation:Callable[..., Outcome|None], *args, mutates:bool=True) -> Outcome:
        state_before = self._state.copy()
        staging_before = self._staging.copy()
        try:
            outcome = operation(*args)
        except TwigError as e:
            self._state = state_before
            self._staging = staging_before
            logger.debug(f"{operation.__name__} failed: {e.kind.value}: {e}")
            return Outcome(e.kind, e.message)
        if outcome is None:
            outcome = ok()
        if mutates:
            self._save_index()
        return outcome

    def _save_index(self):
        self._index_store.save(index_to_bytes(self._state, self._staging))

    #===========================================================
    # Operations
    #===========================================================
    def add(self, filename:str) -> Outcome:
        return self._run(self._add, filename)

    def _add(self, filename:str):
        if not self._worktree.exists(filename):
            raise WorkingFileNotFoundError()
        data = self._worktree.read_bytes(filename)
        tracked_id = self.head_commit.snapshot.get(filename)
        self._state.removal_marks.discard(filename)
        if tracked_id is not None and tracked_id == blob_id(Blob(filename, data)):
            # same as the head, so there is nothing to stage
            self._staging.unstage(filename)
            logger.debug(f"'{filename}' matches the head, unstaged")
        else:
            self._staging.stage(filename, data)
            logger.debug(f"Staged '{filename}' ({len(data)} bytes)")

    def remove(self, filename:str) -> Outcome:
        return self._run(self._remove, filename)

    def _remove(self, filename:str):
        tracked = filename in self.head_commit.snapshot
        if not tracked and filename not in self._staging:
            raise NothingToRemoveError()
        self._staging.unstage(filename)
        if tracked:
            self._state.removal_marks.add(filename)
            if self._worktree.exists(filename) and self._reconciler.delete_file(filename):
                self._state.removed_log.add(filename)
            logger.debug(f"Marked '{filename}' for removal")

    def commit(self, message:str) -> Outcome:
        return self._run(self._commit, message)

    def _commit(self, message:str) -> Outcome:
        commit, blobs = build_commit(
            message,
            Single(self._state.head_id),
            self.head_commit.snapshot,
            self._state.removal_marks,
            self._staging.items(),
            self._clock())
        new_commit_id = persist_commit(self._store, commit, blobs)
        self._state.set_head(new_commit_id)
        self._state.add_commit(new_commit_id)
        self._staging.clear()
        self._state.removal_marks.clear()
        self._state.removed_log.clear()
        logger.debug(f"Committed {new_commit_id.hex()} on '{self._state.current_branch}'")
        return ok(commit_id=new_commit_id)

    def branch(self, name:str) -> Outcome:
        return self._run(self._branch, name)

    def _branch(self, name:str):
        if name in self._state.branches:
            raise BranchExistsError()
        self._state.branches[name] = self._state.head_id

    def remove_branch(self, name:str) -> Outcome:
        return self._run(self._remove_branch, name)

    def _remove_branch(self, name:str):
        if name not in self._state.branches:
            raise BranchNotFoundError()
        if name == self._state.current_branch:
            raise CannotRemoveCurrentBranchError()
        del self._state.branches[name]

    def checkout_branch(self, name:str) -> Outcome:
        return self._run(self._checkout_branch, name)

    def _checkout_branch(self, name:str):
        if name not in self._state.branches:
            raise NoSuchBranchError()
        if name == self._state.current_branch:
            raise AlreadyOnBranchError()
        target = load_commit(self._store, self._state.branches[name])
        # a branch switch clears out untracked files as well, reset does not
        self._reconciler.apply_snapshot(self.head_commit.snapshot, target.snapshot, delete_untracked=True)
        self._state.current_branch = name
        self._staging.clear()
        self._state.removal_marks.clear()
        logger.debug(f"Switched to branch '{name}'")

    def checkout_file(self, filename:str) -> Outcome:
        return self._run(self._checkout_file, self._state.head_id, filename, mutates=False)

    def checkout_file_from(self, commit_ref:str, filename:str) -> Outcome:
        return self._run(self._checkout_file_from, commit_ref, filename, mutates=False)

    def _checkout_file_from(self, commit_ref:str, filename:str):
        self._checkout_file(self.resolve(commit_ref), filename)

    def _checkout_file(self, commit_id:CommitId, filename:str):
        commit = load_commit(self._store, commit_id)
        self._reconciler.checkout_file(commit.snapshot, filename)

    def reset(self, commit_ref:str) -> Outcome:
        return self._run(self._reset, commit_ref)

    def _reset(self, commit_ref:str) -> Outcome:
        target_id = self.resolve(commit_ref)
        target = load_commit(self._store, target_id)
        self._reconciler.apply_snapshot(self.head_commit.snapshot, target.snapshot)
        self._state.set_head(target_id)
        self._staging.clear()
        self._state.removal_marks.clear()
        logger.debug(f"Reset '{self._state.current_branch}' to {target_id.hex()}")
        return ok(commit_id=target_id)

    def merge(self, branch_name:str) -> Outcome:
        return self._run(self._merge, branch_name)

    def _merge(self, branch_name:str) -> Outcome:
        return self._merge_engine.merge(self._state, self._staging, branch_name, self._clock)

    #===========================================================
    # Read accessors
    #===========================================================
    @property
    def worktree(self) -> WorkingTree:
        return self._worktree

    @property
    def head_id(self) -> CommitId:
        return self._state.head_id

    @property
    def head_commit(self) -> Commit:
        return load_commit(self._store, self._state.head_id)

    @property
    def current_branch(self) -> str:
        return self._state.current_branch

    @property
    def branches(self) -> dict[str, CommitId]:
        return dict(self._state.branches)

    @property
    def commit_ids(self) -> list[CommitId]:
        return list(self._state.all_commit_ids)

    @property
    def staged_filenames(self) -> list[str]:
        return self._staging.filenames()

    def staged_content(self, filename:str) -> bytes | None:
        return self._staging.get(filename)

    @property
    def removal_marks(self) -> list[str]:
        return sorted(self._state.removal_marks)

    @property
    def removed_files(self) -> list[str]:
        return sorted(self._state.removed_log)

    def get_commit(self, commit_id:CommitId) -> Commit:
        return load_commit(self._store, commit_id)

    def get_file(self, commit_id:CommitId, filename:str) -> bytes | None:
        file_id = load_commit(self._store, commit_id).snapshot.get(filename)
        if file_id is None:
            return None
        return load_blob(self._store, file_id).data

    def resolve(self, commit_ref:str) -> CommitId:
        """Resolves a full or abbreviated commit id.

        Unlike the operations, this raises: CommitNotFoundError, or AmbiguousCommitIdError
        when the prefix matches several commits.
        """
        return resolve_commit_id(commit_ref, self._state.all_commit_ids)

    def log(self) -> list[tuple[CommitId, Commit]]:
        """The first-parent history of the current head, newest first."""
        return list(iter_first_parent(self._store, self._state.head_id))

    def global_log(self) -> list[tuple[CommitId, Commit]]:
        """Every commit ever made, in the order they were made."""
        return [(commit_id, load_commit(self._store, commit_id)) for commit_id in self._state.all_commit_ids]

    def find(self, message:str) -> list[CommitId]:
        return [commit_id for commit_id, commit in self.global_log() if commit.message == message]

    def status(self) -> StatusReport:
        return compute_status(self._state, self._staging, self.head_commit.snapshot, self._worktree)

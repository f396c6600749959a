import logging
from typing import Iterable
from twig.store import *
from . commits import load_blob
from . errors import UntrackedFileBlockingError, FileNotInCommitError
from . worktree import WorkingTree, DEFAULT_PROTECTED_PATHS

logger = logging.getLogger(__name__)

class WorkingTreeReconciler:
    """Applies commit snapshots to the working tree.

    This is the only place that writes or deletes working files. Protected paths
    are never deleted, no matter what a snapshot says.
    """

    def __init__(self, loader:ObjectLoader, worktree:WorkingTree, protected_paths:Iterable[str]=DEFAULT_PROTECTED_PATHS):
        self._loader = loader
        self._worktree = worktree
        self.protected_paths = frozenset(protected_paths)

    @property
    def worktree(self) -> WorkingTree:
        return self._worktree

    def is_protected(self, filename:str) -> bool:
        return filename in self.protected_paths

    def check_untracked(self, current_snapshot:Snapshot, target_snapshot:Snapshot):
        """Fails if applying the target would overwrite a working file the current head does not track.

        Protected paths never block.
        """
        for filename in self._worktree.list_entries():
            if filename in current_snapshot or filename not in target_snapshot or self.is_protected(filename):
                continue
            working_id = blob_id(Blob(filename, self._worktree.read_bytes(filename)))
            if working_id != target_snapshot[filename]:
                logger.debug(f"Untracked file '{filename}' would be overwritten")
                raise UntrackedFileBlockingError(filename)

    def check_untracked_writes(self, current_snapshot:Snapshot, writes:dict[str, bytes]):
        """Like check_untracked, but for an explicit set of files and the bytes that would be written."""
        for filename, data in sorted(writes.items()):
            if filename in current_snapshot or self.is_protected(filename) or not self._worktree.exists(filename):
                continue
            if self._worktree.read_bytes(filename) != data:
                logger.debug(f"Untracked file '{filename}' would be overwritten")
                raise UntrackedFileBlockingError(filename)

    def apply_snapshot(self, current_snapshot:Snapshot, target_snapshot:Snapshot, delete_untracked:bool=False):
        """Replaces the tracked content of the working tree with the target snapshot.

        Files tracked by the current snapshot but not by the target are deleted. With
        'delete_untracked', every other working file missing from the target goes too.
        """
        self.check_untracked(current_snapshot, target_snapshot)
        for filename in sorted(target_snapshot):
            blob = load_blob(self._loader, target_snapshot[filename])
            self.write_file(filename, blob.data)
        if delete_untracked:
            stale = [filename for filename in self._worktree.list_entries() if filename not in target_snapshot]
        else:
            stale = [filename for filename in sorted(current_snapshot) if filename not in target_snapshot]
        for filename in stale:
            self.delete_file(filename)

    def checkout_file(self, snapshot:Snapshot, filename:str):
        if filename not in snapshot:
            raise FileNotInCommitError()
        blob = load_blob(self._loader, snapshot[filename])
        self.write_file(filename, blob.data)

    def write_file(self, filename:str, data:bytes):
        self._worktree.write_bytes(filename, data)

    def delete_file(self, filename:str) -> bool:
        """Deletes a working file. Returns False if it is protected or does not exist."""
        if self.is_protected(filename):
            logger.debug(f"Not deleting protected path '{filename}'")
            return False
        return self._worktree.delete(filename)

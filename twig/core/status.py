from typing import NamedTuple
from twig.store import *
from . repo_state import RepoState, StagingArea
from . worktree import WorkingTree

class StatusReport(NamedTuple):
    current_branch:str
    branches:list[str]
    staged:list[str]
    removed:list[str]
    modified:list[tuple[str, str]] # (filename, 'modified' | 'deleted')
    untracked:list[str]

def compute_status(state:RepoState, staging:StagingArea, head_snapshot:Snapshot, worktree:WorkingTree) -> StatusReport:
    """Classifies the working tree against the head commit and the staging area."""
    working_files = set(worktree.list_entries())
    modified:dict[str, str] = {}

    for filename in working_files:
        data = worktree.read_bytes(filename)
        staged_data = staging.get(filename)
        if staged_data is not None:
            if staged_data != data:
                modified[filename] = "modified"
        elif filename in head_snapshot and filename not in state.removal_marks:
            if blob_id(Blob(filename, data)) != head_snapshot[filename]:
                modified[filename] = "modified"

    for filename in staging.filenames():
        if filename not in working_files:
            modified[filename] = "deleted"
    for filename in head_snapshot:
        if filename not in working_files and filename not in state.removal_marks and filename not in staging:
            modified[filename] = "deleted"

    untracked = [
        filename for filename in working_files
        if filename not in staging and (filename not in head_snapshot or filename in state.removal_marks)]

    return StatusReport(
        current_branch=state.current_branch,
        branches=sorted(state.branches),
        staged=staging.filenames(),
        removed=sorted(state.removal_marks),
        modified=sorted(modified.items()),
        untracked=sorted(untracked))

from enum import Enum
from typing import NamedTuple
from twig.store import CommitId

class OutcomeKind(Enum):
    OK = "ok"
    # early-success outcomes of a merge
    FAST_FORWARDED = "fast_forwarded"
    GIVEN_IS_ANCESTOR = "given_is_ancestor"
    # recoverable errors
    NOT_INITIALIZED = "not_initialized"
    ALREADY_INITIALIZED = "already_initialized"
    FILE_NOT_FOUND = "file_not_found"
    NOTHING_TO_REMOVE = "nothing_to_remove"
    EMPTY_COMMIT_MESSAGE = "empty_commit_message"
    NO_CHANGES = "no_changes"
    BRANCH_EXISTS = "branch_exists"
    BRANCH_NOT_FOUND = "branch_not_found"
    CANNOT_REMOVE_CURRENT_BRANCH = "cannot_remove_current_branch"
    NO_SUCH_BRANCH = "no_such_branch"
    ALREADY_ON_BRANCH = "already_on_branch"
    COMMIT_NOT_FOUND = "commit_not_found"
    FILE_NOT_IN_COMMIT = "file_not_in_commit"
    UNTRACKED_FILE_BLOCKING = "untracked_file_blocking"
    UNCOMMITTED_CHANGES = "uncommitted_changes"
    CANNOT_MERGE_SELF = "cannot_merge_self"

_SUCCESS_KINDS = frozenset({OutcomeKind.OK, OutcomeKind.FAST_FORWARDED, OutcomeKind.GIVEN_IS_ANCESTOR})

class Outcome(NamedTuple):
    """Result of a single repository operation.

    Operations never raise for recoverable conditions, they report them here instead.
    'conflicts' lists the conflicted filenames of a merge, sorted.
    """
    kind:OutcomeKind
    message:str | None = None
    commit_id:CommitId | None = None
    conflicts:tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.kind in _SUCCESS_KINDS

    @property
    def has_conflicts(self) -> bool:
        return len(self.conflicts) > 0

def ok(message:str|None=None, commit_id:CommitId|None=None, conflicts:tuple[str, ...]=()) -> Outcome:
    return Outcome(OutcomeKind.OK, message, commit_id, conflicts)

from . outcomes import OutcomeKind

class TwigError(Exception):
    """A recoverable repository error.

    Raised inside an operation and turned into an Outcome at the operation boundary.
    """
    kind:OutcomeKind
    default_message:str = "Repository error."

    def __init__(self, message:str|None=None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

class NotInitializedError(TwigError):
    kind = OutcomeKind.NOT_INITIALIZED
    default_message = "Not in an initialized Twig directory."

class AlreadyInitializedError(TwigError):
    kind = OutcomeKind.ALREADY_INITIALIZED
    default_message = "A Twig version-control system already exists in the current directory."

class WorkingFileNotFoundError(TwigError):
    kind = OutcomeKind.FILE_NOT_FOUND
    default_message = "File does not exist."

class NothingToRemoveError(TwigError):
    kind = OutcomeKind.NOTHING_TO_REMOVE
    default_message = "No reason to remove the file."

class EmptyCommitMessageError(TwigError):
    kind = OutcomeKind.EMPTY_COMMIT_MESSAGE
    default_message = "Please enter a commit message."

class NoChangesError(TwigError):
    kind = OutcomeKind.NO_CHANGES
    default_message = "No changes added to the commit."

class BranchExistsError(TwigError):
    kind = OutcomeKind.BRANCH_EXISTS
    default_message = "A branch with that name already exists."

class BranchNotFoundError(TwigError):
    kind = OutcomeKind.BRANCH_NOT_FOUND
    default_message = "A branch with that name does not exist."

class CannotRemoveCurrentBranchError(TwigError):
    kind = OutcomeKind.CANNOT_REMOVE_CURRENT_BRANCH
    default_message = "Cannot remove the current branch."

class NoSuchBranchError(TwigError):
    kind = OutcomeKind.NO_SUCH_BRANCH
    default_message = "No such branch exists."

class AlreadyOnBranchError(TwigError):
    kind = OutcomeKind.ALREADY_ON_BRANCH
    default_message = "No need to checkout the current branch."

class CommitNotFoundError(TwigError):
    kind = OutcomeKind.COMMIT_NOT_FOUND
    default_message = "No commit with that id exists."

class AmbiguousCommitIdError(CommitNotFoundError):
    default_message = "More than one commit matches that id."

class FileNotInCommitError(TwigError):
    kind = OutcomeKind.FILE_NOT_IN_COMMIT
    default_message = "File does not exist in that commit."

class UntrackedFileBlockingError(TwigError):
    kind = OutcomeKind.UNTRACKED_FILE_BLOCKING
    default_message = "There is an untracked file in the way; delete it, or add and commit it first."

    def __init__(self, filename:str|None=None):
        super().__init__()
        self.filename = filename

class UncommittedChangesError(TwigError):
    kind = OutcomeKind.UNCOMMITTED_CHANGES
    default_message = "You have uncommitted changes."

class CannotMergeSelfError(TwigError):
    kind = OutcomeKind.CANNOT_MERGE_SELF
    default_message = "Cannot merge a branch with itself."

# Fatal errors. These are not turned into outcomes and abort the whole command.

class CorruptRepositoryError(Exception):
    pass

class CorruptIndexError(Exception):
    pass

class RepositoryLockedError(Exception):
    pass

from . outcomes import Outcome, OutcomeKind
from . errors import *
from . repo_state import RepoState, StagingArea, index_to_bytes, bytes_to_index
from . worktree import WorkingTree, METADATA_DIR, DEFAULT_PROTECTED_PATHS
from . reconciler import WorkingTreeReconciler
from . merge import MergeEngine, MergeAction, find_split_point, render_conflict
from . status import StatusReport, compute_status
from . lock import RepositoryLock
from . repository import Repository, DEFAULT_BRANCH

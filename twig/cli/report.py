from datetime import datetime
from twig.store import *
from twig.core.outcomes import Outcome
from twig.core.status import StatusReport

# Text rendering of repository reads for the command line.

DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"
NO_COMMIT_FOUND = "Found no commit with that message."

def format_date(timestamp:int) -> str:
    return datetime.fromtimestamp(timestamp).astimezone().strftime(DATE_FORMAT)

def format_log_entry(commit_id:CommitId, commit:Commit) -> str:
    lines = ["===", f"commit {commit_id.hex()}"]
    if isinstance(commit.parents, Merge):
        lines.append(f"Merge: {commit.parents.parent.hex()[:7]} {commit.parents.parent2.hex()[:7]}")
    lines.append(f"Date: {format_date(commit.timestamp)}")
    lines.append(commit.message)
    lines.append("")
    return "\n".join(lines)

def format_log(entries:list[tuple[CommitId, Commit]]) -> str:
    return "\n".join(format_log_entry(commit_id, commit) for commit_id, commit in entries)

def format_find(commit_ids:list[CommitId]) -> str:
    if len(commit_ids) == 0:
        return NO_COMMIT_FOUND
    return "\n".join(commit_id.hex() for commit_id in commit_ids)

def format_status(report:StatusReport) -> str:
    def section(title:str, lines:list[str]) -> str:
        return "\n".join([f"=== {title} ===", *lines, ""])
    branches = [("*" + name) if name == report.current_branch else name for name in report.branches]
    modified = [f"{name} ({kind})" for name, kind in report.modified]
    return "\n".join([
        section("Branches", branches),
        section("Staged Files", report.staged),
        section("Removed Files", report.removed),
        section("Modifications Not Staged For Commit", modified),
        section("Untracked Files", report.untracked),
        ])

def format_outcome(outcome:Outcome) -> str | None:
    #successful operations are silent, unless they have something to say
    return outcome.message

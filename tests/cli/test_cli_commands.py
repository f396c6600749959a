import os
from click.testing import CliRunner
from twig.cli.cli import cli
from helpers_cli import run, commit_ids_in

def write(work_dir, filename:str, content:str):
    with open(os.path.join(str(work_dir), filename), 'w') as f:
        f.write(content)

def read(work_dir, filename:str) -> str | None:
    path = os.path.join(str(work_dir), filename)
    if not os.path.exists(path):
        return None
    with open(path, 'r') as f:
        return f.read()

EMPTY_STATUS = """=== Branches ===
*master

=== Staged Files ===

=== Removed Files ===

=== Modifications Not Staged For Commit ===

=== Untracked Files ===

"""

def test_init(tmp_path):
    result = run(tmp_path, "init")
    assert result.output == ""
    assert os.path.exists(os.path.join(str(tmp_path), ".twig", "config.toml"))
    assert os.path.exists(os.path.join(str(tmp_path), ".twig", "index"))
    assert run(tmp_path, "status").output == EMPTY_STATUS

def test_init_twice(tmp_path):
    run(tmp_path, "init")
    result = run(tmp_path, "init")
    assert result.output.strip() == "A Twig version-control system already exists in the current directory."

def test_not_initialized(tmp_path):
    result = run(tmp_path, "status")
    assert result.output.strip() == "Not in an initialized Twig directory."

def test_missing_work_dir(tmp_path):
    result = CliRunner().invoke(cli, ["-d", str(tmp_path / "missing"), "status"])
    assert result.exit_code != 0

def test_add_commit_log(tmp_path):
    run(tmp_path, "init")
    write(tmp_path, "wug.txt", "This is a wug.\n")
    assert run(tmp_path, "add", "wug.txt").output == ""
    assert run(tmp_path, "commit", "added wug").output == ""

    output = run(tmp_path, "log").output
    entries = output.split("===\n")[1:]
    assert len(entries) == 2
    assert "added wug\n" in entries[0]
    assert "initial commit\n" in entries[1]
    assert "Date: " in entries[0]
    assert len(commit_ids_in(output)) == 2

def test_error_messages(tmp_path):
    run(tmp_path, "init")
    assert run(tmp_path, "add", "missing.txt").output.strip() == "File does not exist."
    assert run(tmp_path, "commit", "nothing").output.strip() == "No changes added to the commit."
    assert run(tmp_path, "commit").output.strip() == "Please enter a commit message."
    assert run(tmp_path, "rm", "missing.txt").output.strip() == "No reason to remove the file."
    assert run(tmp_path, "checkout", "nope").output.strip() == "No such branch exists."
    assert run(tmp_path, "rm-branch", "nope").output.strip() == "A branch with that name does not exist."
    assert run(tmp_path, "reset", "abcdef").output.strip() == "No commit with that id exists."
    assert run(tmp_path, "find", "nope").output.strip() == "Found no commit with that message."

def test_status(tmp_path):
    run(tmp_path, "init")
    write(tmp_path, "a.txt", "a")
    write(tmp_path, "b.txt", "b")
    run(tmp_path, "add", "a.txt")
    run(tmp_path, "add", "b.txt")
    run(tmp_path, "commit", "two files")
    run(tmp_path, "branch", "other")
    run(tmp_path, "rm", "a.txt")
    write(tmp_path, "b.txt", "b2")
    write(tmp_path, "c.txt", "c")
    write(tmp_path, "d.txt", "d")
    run(tmp_path, "add", "d.txt")

    assert run(tmp_path, "status").output == """=== Branches ===
*master
other

=== Staged Files ===
d.txt

=== Removed Files ===
a.txt

=== Modifications Not Staged For Commit ===
b.txt (modified)

=== Untracked Files ===
c.txt

"""

def test_checkout_forms(tmp_path):
    run(tmp_path, "init")
    write(tmp_path, "a.txt", "v1")
    run(tmp_path, "add", "a.txt")
    run(tmp_path, "commit", "v1")
    write(tmp_path, "a.txt", "v2")
    run(tmp_path, "add", "a.txt")
    run(tmp_path, "commit", "v2")
    first_id = commit_ids_in(run(tmp_path, "log").output)[1]

    write(tmp_path, "a.txt", "scratch")
    assert run(tmp_path, "checkout", "--", "a.txt").output == ""
    assert read(tmp_path, "a.txt") == "v2"

    assert run(tmp_path, "checkout", first_id[:8], "--", "a.txt").output == ""
    assert read(tmp_path, "a.txt") == "v1"

    assert run(tmp_path, "checkout", first_id[:8], "++", "a.txt").output.strip() == "Incorrect operands."

    run(tmp_path, "branch", "other")
    assert run(tmp_path, "checkout", "other").output == ""
    assert run(tmp_path, "checkout", "other").output.strip() == "No need to checkout the current branch."

def test_find_and_global_log(tmp_path):
    run(tmp_path, "init")
    write(tmp_path, "a.txt", "a")
    run(tmp_path, "add", "a.txt")
    run(tmp_path, "commit", "the message")
    found = run(tmp_path, "find", "the message").output.split()
    global_ids = commit_ids_in(run(tmp_path, "global-log").output)
    assert len(global_ids) == 2
    assert found == [global_ids[1]]

def test_merge_conflict(tmp_path):
    run(tmp_path, "init")
    write(tmp_path, "f.txt", "base\n")
    run(tmp_path, "add", "f.txt")
    run(tmp_path, "commit", "base")
    run(tmp_path, "branch", "other")
    write(tmp_path, "f.txt", "master\n")
    run(tmp_path, "add", "f.txt")
    run(tmp_path, "commit", "master change")
    run(tmp_path, "checkout", "other")
    write(tmp_path, "f.txt", "other\n")
    run(tmp_path, "add", "f.txt")
    run(tmp_path, "commit", "other change")
    run(tmp_path, "checkout", "master")

    assert run(tmp_path, "merge", "other").output.strip() == "Encountered a merge conflict."
    assert read(tmp_path, "f.txt").splitlines() == ["<<<<<<< HEAD", "master", "=======", "other", ">>>>>>>"]
    log = run(tmp_path, "log").output
    assert "Merged other into master." in log
    assert "Merge: " in log

def test_merge_fast_forward(tmp_path):
    run(tmp_path, "init")
    run(tmp_path, "branch", "other")
    run(tmp_path, "checkout", "other")
    write(tmp_path, "f.txt", "f")
    run(tmp_path, "add", "f.txt")
    run(tmp_path, "commit", "on other")
    run(tmp_path, "checkout", "master")
    assert read(tmp_path, "f.txt") is None
    assert run(tmp_path, "merge", "other").output.strip() == "Current branch fast-forwarded."
    assert read(tmp_path, "f.txt") == "f"

def test_lmdb_store(tmp_path):
    run(tmp_path, "init", "--store-type", "lmdb", "--default-branch", "main")
    assert os.path.exists(os.path.join(str(tmp_path), ".twig", "data.mdb"))
    write(tmp_path, "a.txt", "a")
    run(tmp_path, "add", "a.txt")
    run(tmp_path, "commit", "in lmdb")
    status = run(tmp_path, "status").output
    assert status.startswith("=== Branches ===\n*main\n")
    assert "in lmdb" in run(tmp_path, "log").output

from twig.core import OutcomeKind
from helpers_core import create_repository, write_file, read_file, commit_files

def test_reset(tmp_path):
    repo = create_repository(tmp_path)
    first_id = commit_files(repo, tmp_path, "first", {"a.txt": "a", "b.txt": "b"})
    second_id = commit_files(repo, tmp_path, "second", {"a.txt": "a2", "c.txt": "c"})
    write_file(tmp_path, "d.txt", "d")
    repo.add("d.txt")

    outcome = repo.reset(first_id.hex())
    assert outcome.ok
    assert repo.head_id == first_id
    assert repo.branches["master"] == first_id
    assert read_file(tmp_path, "a.txt") == b"a"
    assert read_file(tmp_path, "b.txt") == b"b"
    assert read_file(tmp_path, "c.txt") is None
    assert repo.staged_filenames == []
    #later commits are still known
    assert second_id in repo.commit_ids
    assert [commit_id for commit_id, _ in repo.log()][0] == first_id

def test_reset_forward_again(tmp_path):
    repo = create_repository(tmp_path)
    first_id = commit_files(repo, tmp_path, "first", {"a.txt": "a"})
    second_id = commit_files(repo, tmp_path, "second", {"a.txt": "a2"})
    assert repo.reset(first_id.hex()[:10]).ok
    assert repo.reset(second_id.hex()[:10]).ok
    assert repo.head_id == second_id
    assert read_file(tmp_path, "a.txt") == b"a2"

def test_reset_unknown_commit(tmp_path):
    repo = create_repository(tmp_path)
    head_id = repo.head_id
    outcome = repo.reset("abcdef0123")
    assert outcome.kind == OutcomeKind.COMMIT_NOT_FOUND
    assert repo.head_id == head_id

def test_reset_blocked_by_untracked_file(tmp_path):
    repo = create_repository(tmp_path)
    first_id = commit_files(repo, tmp_path, "first", {"a.txt": "a"})
    repo.remove("a.txt")
    second_id = commit_files(repo, tmp_path, "second", {"b.txt": "b"})
    write_file(tmp_path, "a.txt", "untracked")
    outcome = repo.reset(first_id.hex())
    assert outcome.kind == OutcomeKind.UNTRACKED_FILE_BLOCKING
    assert repo.head_id == second_id
    assert read_file(tmp_path, "a.txt") == b"untracked"
    assert read_file(tmp_path, "b.txt") == b"b"

def test_reset_keeps_untracked_files(tmp_path):
    repo = create_repository(tmp_path)
    first_id = commit_files(repo, tmp_path, "first", {"a.txt": "a"})
    commit_files(repo, tmp_path, "second", {"b.txt": "b"})
    write_file(tmp_path, "junk.txt", "junk")
    assert repo.reset(first_id.hex()).ok
    assert read_file(tmp_path, "b.txt") is None
    assert read_file(tmp_path, "junk.txt") == b"junk"

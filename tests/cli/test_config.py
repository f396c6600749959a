import pytest
from twig.config import TwigConfig, load_config, loads_config, dumps_config, write_config

def test_defaults(tmp_path):
    config = load_config(str(tmp_path / "missing.toml"))
    assert config == TwigConfig()
    assert config.default_branch == "master"
    assert config.store_type == "file"
    assert config.protected == [".DS_Store", "Makefile"]

def test_loads():
    config = loads_config("""
[repository]
default_branch = "main"
store_type = "lmdb"

[worktree]
protected = ["Makefile", "build.sh"]
""")
    assert config.default_branch == "main"
    assert config.store_type == "lmdb"
    assert config.protected == ["Makefile", "build.sh"]

def test_partial_config():
    config = loads_config("""
[repository]
store_type = "lmdb"
""")
    assert config.default_branch == "master"
    assert config.protected == [".DS_Store", "Makefile"]

def test_invalid_values():
    with pytest.raises(ValueError):
        loads_config('[repository]\nstore_type = "memory"\n')
    with pytest.raises(ValueError):
        loads_config('[repository]\ndefault_branch = ""\n')
    with pytest.raises(ValueError):
        loads_config('[worktree]\nprotected = "Makefile"\n')

def test_write_and_load(tmp_path):
    config = TwigConfig(default_branch="trunk", store_type="lmdb", protected=["Makefile"])
    path = str(tmp_path / "config.toml")
    write_config(path, config)
    assert load_config(path) == config
    assert "[repository]" in dumps_config(config)

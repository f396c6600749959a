import os
from dataclasses import dataclass, field
import tomlkit
from tomlkit import TOMLDocument, table
from twig.core.worktree import DEFAULT_PROTECTED_PATHS
from twig.core.repository import DEFAULT_BRANCH

# Functions to work with the '.twig/config.toml' file.
# Utilizes https://github.com/sdispater/tomlkit to work with TOML data.
#
# The expected toml format is:
# --------------------------
# [repository]
# default_branch = "master"
# store_type = "file" #file or lmdb
#
# [worktree]
# protected = ["Makefile", ".DS_Store"] #never deleted by checkout, reset or merge
# --------------------------

CONFIG_FILE = "config.toml"
STORE_TYPES = ("file", "lmdb")

@dataclass
class TwigConfig:
    default_branch:str = DEFAULT_BRANCH
    store_type:str = "file"
    protected:list[str] = field(default_factory=lambda: sorted(DEFAULT_PROTECTED_PATHS))

    def validate(self):
        if self.store_type not in STORE_TYPES:
            raise ValueError(f"Unknown store type '{self.store_type}', must be one of: {', '.join(STORE_TYPES)}.")
        if not isinstance(self.default_branch, str) or self.default_branch.strip() == "":
            raise ValueError("default_branch must be a non-empty string.")
        if not isinstance(self.protected, list) or not all(isinstance(p, str) for p in self.protected):
            raise ValueError("worktree.protected must be a list of filenames.")

def load_config(toml_file_path:str) -> TwigConfig:
    if not os.path.exists(toml_file_path):
        return TwigConfig()
    doc = _read_toml_file(toml_file_path)
    return loads_config(doc)

def loads_config(toml:str|TOMLDocument) -> TwigConfig:
    if(isinstance(toml, str)):
        doc = _read_toml_string(toml)
    else:
        doc = toml
    config = TwigConfig()
    repository = doc.get("repository", None)
    if repository is not None:
        config.default_branch = str(repository.get("default_branch", config.default_branch))
        config.store_type = str(repository.get("store_type", config.store_type))
    worktree = doc.get("worktree", None)
    if worktree is not None:
        protected = worktree.get("protected", None)
        if protected is not None:
            if not isinstance(protected, list):
                raise ValueError("worktree.protected must be a list of filenames.")
            config.protected = [str(p) for p in protected]
    config.validate()
    return config

def dumps_config(config:TwigConfig) -> str:
    config.validate()
    doc = tomlkit.document()
    repository = table()
    repository.add("default_branch", config.default_branch)
    repository.add("store_type", config.store_type)
    doc.add("repository", repository)
    worktree = table()
    worktree.add("protected", list(config.protected))
    doc.add("worktree", worktree)
    return doc.as_string()

def write_config(toml_file_path:str, config:TwigConfig):
    with open(toml_file_path, 'w') as f:
        f.write(dumps_config(config))

def _read_toml_file(file_path) -> TOMLDocument:
    with open(file_path, 'r') as f:
        return _read_toml_string(f.read())

def _read_toml_string(toml_string) -> TOMLDocument:
    return tomlkit.loads(toml_string)

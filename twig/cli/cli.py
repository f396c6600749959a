import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator
import click
from twig.store import *
from twig.store.stores.file import FileObjectStore, FileIndexStore
from twig.store.stores.lmdb import SharedEnvironment, LmdbObjectStore, LmdbIndexStore
from twig.core import (Repository, RepositoryLock, WorkingTree, Outcome, METADATA_DIR, DEFAULT_BRANCH,
                       NotInitializedError, AlreadyInitializedError, RepositoryLockedError, CorruptIndexError,
                       CorruptRepositoryError)
from twig.config import TwigConfig, CONFIG_FILE, STORE_TYPES, load_config, write_config
from . import report

# Main CLI to work with a Twig repository.
# It utilizes the 'click' library.

@dataclass
class TwigContext:
    verbose:bool
    work_dir:str
    twig_dir:str
    config_file_path:str
    _lmdb_env:SharedEnvironment|None = field(default=None, init=False, repr=False)

    def is_initialized(self) -> bool:
        return os.path.exists(self.config_file_path)

    def load_config(self) -> TwigConfig:
        try:
            return load_config(self.config_file_path)
        except ValueError as e:
            raise click.ClickException(f"Invalid config file '{self.config_file_path}': {e}") from e

    def init_stores(self, store_type:str) -> tuple[ObjectStore, IndexStore]:
        if(store_type == "lmdb"):
            #check if .twig has been initialized with 'file' store
            if os.path.exists(os.path.join(self.twig_dir, "obj")) or os.path.exists(os.path.join(self.twig_dir, "index")):
                raise click.ClickException(f"twig directory '{self.twig_dir}' has already been initialized with a 'file' store. Cannot use 'lmdb' store.")
            self._lmdb_env = SharedEnvironment(self.twig_dir)
            return LmdbObjectStore(self._lmdb_env), LmdbIndexStore(self._lmdb_env)
        elif(store_type == "file"):
            #check if .twig has been initialized with 'lmdb' store
            if os.path.exists(os.path.join(self.twig_dir, "data.mdb")) or os.path.exists(os.path.join(self.twig_dir, "lock.mdb")):
                raise click.ClickException(f"twig directory '{self.twig_dir}' has already been initialized with a 'lmdb' store. Cannot use 'file' store.")
            return FileObjectStore(self.twig_dir), FileIndexStore(self.twig_dir)
        else:
            raise click.ClickException(f"Unknown store type '{store_type}'.")

    def close_stores(self):
        if self._lmdb_env is not None:
            self._lmdb_env.close()
            self._lmdb_env = None

    @contextmanager
    def open_repository(self) -> Iterator[Repository]:
        """Opens the repository under the lock, for the duration of a single command."""
        if not self.is_initialized():
            print(NotInitializedError().message)
            raise click.exceptions.Exit(0)
        config = self.load_config()
        try:
            with RepositoryLock(self.twig_dir):
                store, index_store = self.init_stores(config.store_type)
                try:
                    try:
                        repo = Repository(store, index_store, WorkingTree(self.work_dir), config.protected)
                    except NotInitializedError as e:
                        print(e.message)
                        raise click.exceptions.Exit(0) from e
                    yield repo
                finally:
                    self.close_stores()
        except (RepositoryLockedError, CorruptIndexError, CorruptRepositoryError) as e:
            raise click.ClickException(str(e)) from e

@click.group()
@click.pass_context
@click.option("--work-dir", "-d", help="Work directory. By default, uses the current directory.")
@click.option("--verbose", "-v", is_flag=True, help="Will print verbose messages.")
def cli(ctx:click.Context, verbose:bool, work_dir:str|None):
    #print logs to console
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    if(work_dir is None):
        work_dir = os.getcwd()
    twig_dir = os.path.join(work_dir, METADATA_DIR)
    config_file_path = os.path.join(twig_dir, CONFIG_FILE)

    if(verbose):
        print(" work dir: " + work_dir)
        print(" twig dir: " + twig_dir)

    if(not os.path.exists(work_dir)):
        raise click.ClickException(f"Work directory '{work_dir}' (absolute: '{os.path.abspath(work_dir)}') does not exist.")
    ctx.obj = TwigContext(
        verbose=verbose,
        work_dir=work_dir,
        twig_dir=twig_dir,
        config_file_path=config_file_path)

def _print_outcome(outcome:Outcome):
    message = report.format_outcome(outcome)
    if message is not None:
        print(message)

#===========================================================
# 'init' command
#===========================================================
@cli.command()
@click.pass_context
@click.option("--store-type", default="file", show_default=True, type=click.Choice(STORE_TYPES, case_sensitive=False), help="What type of object store to use.")
@click.option("--default-branch", default=DEFAULT_BRANCH, show_default=True, help="Name of the first branch.")
def init(ctx:click.Context, store_type:str, default_branch:str):
    twig_ctx:TwigContext = ctx.obj
    if twig_ctx.is_initialized():
        print(AlreadyInitializedError().message)
        return
    os.makedirs(twig_ctx.twig_dir, exist_ok=True)
    config = TwigConfig(default_branch=default_branch, store_type=store_type.lower())
    try:
        config.validate()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    with RepositoryLock(twig_ctx.twig_dir):
        store, index_store = twig_ctx.init_stores(config.store_type)
        try:
            root_id = Repository.initialize(store, index_store, config.default_branch)
        except AlreadyInitializedError as e:
            print(e.message)
            return
        finally:
            twig_ctx.close_stores()
        write_config(twig_ctx.config_file_path, config)
    if(twig_ctx.verbose):
        print(f"Initialized {config.store_type} repository at {twig_ctx.twig_dir}, root commit {root_id.hex()}")

#===========================================================
# Staging commands
#===========================================================
@cli.command()
@click.pass_context
@click.argument("filename")
def add(ctx:click.Context, filename:str):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        _print_outcome(repo.add(filename))

@cli.command()
@click.pass_context
@click.argument("filename")
def rm(ctx:click.Context, filename:str):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        _print_outcome(repo.remove(filename))

@cli.command()
@click.pass_context
@click.argument("message", required=False, default="")
def commit(ctx:click.Context, message:str):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        outcome = repo.commit(message)
        _print_outcome(outcome)
        if(outcome.ok and twig_ctx.verbose):
            print(f"-> Committed {outcome.commit_id.hex()}")

#===========================================================
# History commands
#===========================================================
@cli.command()
@click.pass_context
def log(ctx:click.Context):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        print(report.format_log(repo.log()))

@cli.command(name="global-log")
@click.pass_context
def global_log(ctx:click.Context):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        print(report.format_log(repo.global_log()))

@cli.command()
@click.pass_context
@click.argument("message")
def find(ctx:click.Context, message:str):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        print(report.format_find(repo.find(message)))

@cli.command()
@click.pass_context
def status(ctx:click.Context):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        print(report.format_status(repo.status()))

#===========================================================
# 'checkout' command
#===========================================================
class CheckoutCommand(click.Command):
    """Remembers where the '--' separator was, since click drops it while parsing."""

    def parse_args(self, ctx:click.Context, args:list[str]) -> list[str]:
        ctx.meta['separator_index'] = args.index("--") if "--" in args else None
        return super().parse_args(ctx, args)

@cli.command(cls=CheckoutCommand)
@click.pass_context
@click.argument("operands", nargs=-1)
def checkout(ctx:click.Context, operands:tuple[str, ...]):
    """Usage: 'checkout BRANCH', 'checkout -- FILE', or 'checkout COMMIT -- FILE'."""
    twig_ctx:TwigContext = ctx.obj
    separator_index = ctx.meta['separator_index']
    with twig_ctx.open_repository() as repo:
        if separator_index is None and len(operands) == 1:
            _print_outcome(repo.checkout_branch(operands[0]))
        elif separator_index == 0 and len(operands) == 1:
            _print_outcome(repo.checkout_file(operands[0]))
        elif separator_index == 1 and len(operands) == 2:
            _print_outcome(repo.checkout_file_from(operands[0], operands[1]))
        else:
            print("Incorrect operands.")

#===========================================================
# Branch commands
#===========================================================
@cli.command()
@click.pass_context
@click.argument("name")
def branch(ctx:click.Context, name:str):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        _print_outcome(repo.branch(name))

@cli.command(name="rm-branch")
@click.pass_context
@click.argument("name")
def rm_branch(ctx:click.Context, name:str):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        _print_outcome(repo.remove_branch(name))

@cli.command()
@click.pass_context
@click.argument("commit_id")
def reset(ctx:click.Context, commit_id:str):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        _print_outcome(repo.reset(commit_id))

@cli.command()
@click.pass_context
@click.argument("branch_name")
def merge(ctx:click.Context, branch_name:str):
    twig_ctx:TwigContext = ctx.obj
    with twig_ctx.open_repository() as repo:
        outcome = repo.merge(branch_name)
        _print_outcome(outcome)
        if(outcome.has_conflicts and twig_ctx.verbose):
            print("-> Conflicts in: " + ", ".join(outcome.conflicts))

if __name__ == '__main__':
    cli(None)

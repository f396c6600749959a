import fcntl
import logging
import os
from . errors import RepositoryLockedError

logger = logging.getLogger(__name__)

LOCK_FILE = "twig.lock"

class RepositoryLock:
    """Advisory, process-level lock on a repository directory.

    Only one process may hold it. A second process fails right away instead of waiting.
    """

    def __init__(self, twig_dir:str):
        self.lock_path = os.path.join(twig_dir, LOCK_FILE)
        self._file = None

    def acquire(self):
        if self._file is not None:
            return
        lock_file = open(self.lock_path, 'a+')
        try:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            lock_file.close()
            raise RepositoryLockedError(f"Another process is using the repository ({self.lock_path}).") from e
        self._file = lock_file
        logger.debug(f"Acquired repository lock {self.lock_path}")

    def release(self):
        if self._file is None:
            return
        fcntl.flock(self._file.fileno(), fcntl.LOCK_UN)
        self._file.close()
        self._file = None
        logger.debug(f"Released repository lock {self.lock_path}")

    @property
    def is_locked(self) -> bool:
        return self._file is not None

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()

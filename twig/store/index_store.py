from abc import ABC, abstractmethod

class IndexStore(ABC):
    """Interface for saving and loading the mutable repository index.

    The index is a single record that is overwritten on every transaction.
    Implementations must never leave a partially written record behind.
    """
    @abstractmethod
    def load(self) -> bytes | None:
        pass

    @abstractmethod
    def save(self, data:bytes) -> None:
        pass

    def exists(self) -> bool:
        return self.load() is not None

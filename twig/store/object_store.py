from abc import ABC, abstractmethod
from twig.store.object_model import *

class ObjectLoader(ABC):
    """Interface for loading objects from the Twig object store."""
    @abstractmethod
    def load(self, object_id:ObjectId) -> Object | None:
        pass

class ObjectStore(ObjectLoader, ABC):
    """Interface for persisting objects in the Twig object store.

    Objects are immutable and keyed by their id. Storing an object that is
    already present is a no-op, nothing is ever deleted.
    """
    @abstractmethod
    def store(self, object:Object) -> ObjectId:
        pass

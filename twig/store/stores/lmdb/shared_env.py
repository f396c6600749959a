import logging
import os
import lmdb

logger = logging.getLogger(__name__)

OBJECT_DB = 'obj'
INDEX_DB = 'index'
INITIAL_MAP_SIZE = 1024*1024*10 # 10 MB, ignored if the db is bigger already

def next_map_size(current_size:int) -> int:
    """Grows fast while the map is small, slower once it gets big."""
    if current_size > 1024*1024*1024*10: # 10 GB
        multiplier = 1.2
    elif current_size > 1024*1024*1024: # 1 GB
        multiplier = 1.5
    else:
        multiplier = 3.0
    # lmdb rejects fractional map sizes
    return round(current_size * multiplier)

class SharedEnvironment:
    """One LMDB environment shared by the object store and the index store.

    Both named databases are opened once, up front. Writes go through 'put', which
    grows the map and retries when it is full.
    """
    def __init__(self, store_path:str, writemap:bool=False):
        self.store_path = store_path
        os.makedirs(self.store_path, exist_ok=True)
        self.env = lmdb.Environment(
            store_path,
            max_dbs=2,
            # faster, but the file can grow to the full map size on some file systems
            # See: https://lmdb.readthedocs.io/en/release/#writemap-mode
            writemap=writemap,
            map_size=INITIAL_MAP_SIZE,
            )
        self._dbs = {name: self.env.open_db(name.encode('utf-8')) for name in (OBJECT_DB, INDEX_DB)}

    def get_object_db(self) -> lmdb._Database:
        return self._dbs[OBJECT_DB]

    def get_index_db(self) -> lmdb._Database:
        return self._dbs[INDEX_DB]

    def begin_object_txn(self, write=True, buffers=False) -> lmdb.Transaction:
        return self.env.begin(db=self.get_object_db(), write=write, buffers=buffers)

    def begin_index_txn(self, write=True, buffers=False) -> lmdb.Transaction:
        return self.env.begin(db=self.get_index_db(), write=write, buffers=buffers)

    def put(self, db_name:str, key:bytes, value:bytes, overwrite:bool=True) -> bool:
        """Writes a single key in its own transaction. Returns False if the key existed and overwrite is off."""
        try:
            return self._put(db_name, key, value, overwrite)
        except lmdb.MapFullError:
            logger.warning(f"===> LMDB map is full, writing {len(value)} bytes to '{db_name}' <===")
            self.resize()
            #try again, once
            return self._put(db_name, key, value, overwrite)

    def _put(self, db_name:str, key:bytes, value:bytes, overwrite:bool) -> bool:
        with self.env.begin(db=self._dbs[db_name], write=True) as txn:
            return txn.put(key, value, overwrite=overwrite)

    def resize(self) -> int:
        current_size = self.env.info()['map_size']
        new_size = next_map_size(current_size)
        logger.info(f"Resizing LMDB map from {current_size/1024/1024} MB to {new_size/1024/1024} MB")
        self.env.set_mapsize(new_size)
        return new_size

    def close(self):
        self.env.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

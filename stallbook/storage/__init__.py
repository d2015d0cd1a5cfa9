"""
Storage Module
"""
from .kv import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    create_kv_store,
)
from .records import Err, LoadResult, Ok, RecordStore, create_record_store

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    "create_kv_store",
    "Err",
    "LoadResult",
    "Ok",
    "RecordStore",
    "create_record_store",
]

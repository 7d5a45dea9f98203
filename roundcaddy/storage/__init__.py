from .kv import KeyValueStore, atomic_write_text

__all__ = ["KeyValueStore", "atomic_write_text"]

from __future__ import annotations

import json

from roundcaddy.storage import KeyValueStore, atomic_write_text


def test_atomic_write_creates_parent_dirs(tmp_path):
    target = tmp_path / "nested" / "file.json"
    atomic_write_text(target, '{"ok": true}')
    assert json.loads(target.read_text()) == {"ok": True}
    assert [p.name for p in target.parent.iterdir()] == ["file.json"]


def test_key_value_store_persists(tmp_path):
    path = tmp_path / "prefs.json"
    store = KeyValueStore(path)
    store.set("b", 2)
    store.set("a", {"nested": [1, 2]})

    reopened = KeyValueStore(path)
    assert reopened.get("a") == {"nested": [1, 2]}
    assert reopened.keys() == ["a", "b"]

    reopened.delete("a")
    reopened.delete("never-set")
    assert KeyValueStore(path).keys() == ["b"]


def test_unreadable_store_starts_empty(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("not json")
    store = KeyValueStore(path)
    assert store.get("anything", "default") == "default"

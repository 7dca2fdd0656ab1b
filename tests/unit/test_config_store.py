import pytest
from svcat.REGISTRY.config_store import FileConfigStore
from svcat.errors import ConfigStoreError


def test_save_load_list_delete(tmp_path):
    store = FileConfigStore(str(tmp_path / "config"))
    store.save("db", '{"name": "db"}')
    store.save("api", '{"name": "api"}')

    assert (tmp_path / "config" / "db.json").is_file()
    assert store.load("db") == '{"name": "db"}'
    assert store.list() == ["api", "db"]

    store.delete("db")
    assert store.list() == ["api"]
    store.delete("db")


def test_existing_yaml_file_is_reused(tmp_path):
    (tmp_path / "queue.yaml").write_text("name: queue\n")
    store = FileConfigStore(str(tmp_path))
    assert store.load("queue") == "name: queue\n"
    store.save("queue", "name: queue\nversion: 1.0.0\n")
    assert store.path_for("queue").name == "queue.yaml"
    assert not (tmp_path / "queue.json").exists()


def test_unrelated_files_are_not_listed(tmp_path):
    (tmp_path / "notes.txt").write_text("hello")
    (tmp_path / "web.yml").write_text("name: web\n")
    (tmp_path / "nested.json").mkdir()
    assert FileConfigStore(str(tmp_path)).list() == ["web"]


def test_load_missing(tmp_path):
    with pytest.raises(ConfigStoreError):
        FileConfigStore(str(tmp_path)).load("nope")


def test_unsupported_default_extension(tmp_path):
    with pytest.raises(ValueError):
        FileConfigStore(str(tmp_path), default_extension=".toml")

import json
import os
import pytest
from svcat.MANAGERS.service_registry import ServiceRegistry
from svcat.PARSERS.service_parser import ServiceConfigParser
from svcat.REGISTRY.config_store import FileConfigStore
from svcat.errors import ConfigParseError, ConfigStoreError


@pytest.mark.parametrize("name", [
    "../escape",
    "..",
    "a/../../b",
    "nested/service",
    "/etc/passwd",
    "..\\windows",
    ".hidden",
    "",
])
def test_path_traversal_names_rejected(tmp_path, name):
    """
    Service names become file names, so anything that could leave the
    config directory must be refused before touching the filesystem.
    """
    store = FileConfigStore(str(tmp_path / "catalog"))
    with pytest.raises(ConfigStoreError):
        store.save(name, "{}")
    with pytest.raises(ConfigStoreError):
        store.load(name)
    with pytest.raises(ConfigStoreError):
        store.delete(name)
    assert not (tmp_path / "escape.json").exists()


def test_registry_does_not_register_unstorable_name(tmp_path):
    registry = ServiceRegistry(store=FileConfigStore(str(tmp_path / "catalog")))
    with pytest.raises(ConfigStoreError):
        registry.register_service("../escape", json.dumps({"name": "escape"}))
    assert registry.list_services() == []
    assert not os.path.exists(tmp_path / "escape.json")


def test_yaml_object_tags_are_not_constructed(tmp_path):
    """
    Configuration is loaded with the safe loader: python object tags must fail
    to parse instead of running code.
    """
    marker = tmp_path / "pwned"
    content = f"!!python/object/apply:os.system ['touch {marker}']\n"
    with pytest.raises(ConfigParseError):
        ServiceConfigParser().parse_from_string("evil", content)
    assert not marker.exists()

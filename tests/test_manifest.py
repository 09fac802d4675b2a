"""Tests for manifest library."""

from pathlib import Path

import yaml

from cloud_provider_config.manifest import ConfigMap, File, ObjectMeta, write_file


def test_config_map_dict() -> None:
    """Test the document shape of a config map."""
    config_map = ConfigMap(
        metadata=ObjectMeta(name="example", namespace="default"),
        data={"b": "2", "a": "1"},
    )
    assert config_map.to_dict() == {
        "metadata": {"name": "example", "namespace": "default"},
        "data": {"b": "2", "a": "1"},
        "apiVersion": "v1",
        "kind": "ConfigMap",
    }


def test_config_map_yaml_sorted() -> None:
    """Test rendering with a stable key order."""
    config_map = ConfigMap(
        metadata=ObjectMeta(name="example"),
        data={"b": "2", "a": "line1\nline2\n"},
    )
    assert config_map.yaml() == (
        "apiVersion: v1\n"
        "data:\n"
        "  a: |\n"
        "    line1\n"
        "    line2\n"
        "  b: '2'\n"
        "kind: ConfigMap\n"
        "metadata:\n"
        "  name: example\n"
    )
    assert yaml.safe_load(config_map.yaml())["data"]["a"] == "line1\nline2\n"


async def test_write_file(tmp_path: Path) -> None:
    """Test writing a file below a new directory."""
    await write_file(tmp_path, File(filename="manifests/example.yaml", data=b"a: b\n"))
    assert (tmp_path / "manifests" / "example.yaml").read_bytes() == b"a: b\n"

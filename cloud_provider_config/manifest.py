"""Representation of the manifests written for a cluster.

Manifests are kubernetes objects rendered to YAML under the manifests
directory of the install dir.
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path, PurePosixPath
from typing import Any

import aiofiles
import aiofiles.os
import yaml
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

from .exceptions import SerializationException

__all__ = [
    "ConfigMap",
    "ObjectMeta",
    "File",
    "write_file",
]

_LOGGER = logging.getLogger(__name__)


MANIFEST_DIR = "manifests"
CONFIG_MAP_KIND = "ConfigMap"
CONFIG_MAP_API_VERSION = "v1"


class _Dumper(yaml.SafeDumper):
    """Dumper that renders multi-line strings as literal blocks."""


def _str_presenter(dumper: yaml.SafeDumper, data: str) -> Any:
    """Represent multi-line yaml strings as you'd expect.

    See https://github.com/yaml/pyyaml/issues/240
    """
    return dumper.represent_scalar(
        "tag:yaml.org,2002:str", data, style="|" if data.count("\n") > 0 else None
    )


_Dumper.add_representer(str, _str_presenter)


@dataclass
class BaseManifest(DataClassDictMixin):
    """Base class for all manifest objects."""

    def yaml(self) -> str:
        """Return a YAML document with keys in a stable order."""
        try:
            return yaml.dump(self.to_dict(), Dumper=_Dumper, sort_keys=True)
        except yaml.YAMLError as err:
            raise SerializationException(
                f"Unable to encode {self.__class__.__name__}: {err}"
            ) from err

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class ObjectMeta(BaseManifest):
    """Metadata common to all kubernetes objects."""

    name: str
    """The name of the object."""

    namespace: str | None = None
    """The namespace of the object."""


@dataclass
class ConfigMap(BaseManifest):
    """A ConfigMap is an API object used to store data in key-value pairs."""

    metadata: ObjectMeta
    """The name and namespace of the ConfigMap."""

    data: dict[str, str] = field(default_factory=dict)
    """The data in the ConfigMap."""

    api_version: str = field(
        metadata=field_options(alias="apiVersion"), default=CONFIG_MAP_API_VERSION
    )
    kind: str = CONFIG_MAP_KIND


@dataclass(frozen=True)
class File:
    """A file generated for the cluster."""

    filename: str
    """Path relative to the install dir."""

    data: bytes
    """Contents of the file."""


def manifest_path(name: str) -> str:
    """Return the path of a manifest file relative to the install dir."""
    return str(PurePosixPath(MANIFEST_DIR) / name)


async def write_file(install_dir: Path, file: File) -> None:
    """Write the generated file below the install dir."""
    path = install_dir / file.filename
    await aiofiles.os.makedirs(str(path.parent), exist_ok=True)
    _LOGGER.debug("Writing %s", path)
    async with aiofiles.open(str(path), mode="wb") as out_file:
        await out_file.write(file.data)

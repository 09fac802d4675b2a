"""Representation of the resolved install configuration for a cluster.

The install config is read from an `install-config.yaml` document. Only the
fields that affect the cloud provider config are modeled here, and any other
keys in the document are ignored. Values are checked against the types of
the modeled fields so that the config map only ever holds strings.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
import logging
import random
import string
from typing import Any, get_origin
from pathlib import Path

import aiofiles
import yaml
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig
from mashumaro.exceptions import MissingField, InvalidFieldValue
from slugify import slugify

from .exceptions import InputException

__all__ = [
    "PlatformType",
    "InstallConfig",
    "Platform",
    "AWSPlatform",
    "AzurePlatform",
    "AzureCloudName",
    "GCPPlatform",
    "IBMCloudPlatform",
    "KubevirtPlatform",
    "OpenStackPlatform",
    "VSpherePlatform",
    "ClusterID",
    "generate_infra_id",
    "read_install_config",
]

_LOGGER = logging.getLogger(__name__)


class PlatformType(str, Enum):
    """The infrastructure providers a cluster may be installed on."""

    AWS = "aws"
    AZURE = "azure"
    BAREMETAL = "baremetal"
    GCP = "gcp"
    IBMCLOUD = "ibmcloud"
    KUBEVIRT = "kubevirt"
    LIBVIRT = "libvirt"
    NONE = "none"
    OPENSTACK = "openstack"
    OVIRT = "ovirt"
    VSPHERE = "vsphere"


# Regions of the AWS Commercial Cloud Services partition. Clusters installed
# here need the additional trust bundle to reach the AWS APIs.
C2S_REGIONS = frozenset(
    {
        "us-iso-east-1",
        "us-iso-west-1",
        "us-isob-east-1",
    }
)


class AzureCloudName(str, Enum):
    """Azure cloud environments."""

    PUBLIC = "AzurePublicCloud"
    US_GOVERNMENT = "AzureUSGovernmentCloud"
    CHINA = "AzureChinaCloud"
    GERMAN = "AzureGermanCloud"
    STACK = "AzureStackCloud"


@dataclass
class BasePlatform(DataClassDictMixin):
    """Base class for the platform specific settings."""

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True

    @classmethod
    def __pre_deserialize__(cls, d: dict[Any, Any]) -> dict[Any, Any]:
        for settings_field in fields(cls):
            key = settings_field.metadata.get("alias") or settings_field.name
            if (value := d.get(key)) is None:
                continue
            if settings_field.type is str and not isinstance(value, str):
                raise InputException(f"{key} must be a string: {value!r}")
            if get_origin(settings_field.type) is list and not (
                isinstance(value, list) and all(isinstance(v, str) for v in value)
            ):
                raise InputException(f"{key} must be a list of strings: {value!r}")
        return d


@dataclass
class AWSPlatform(BasePlatform):
    """Settings for clusters on AWS."""

    region: str
    """The region where the cluster is created."""

    @property
    def is_c2s(self) -> bool:
        """Return True if the region belongs to the Commercial Cloud Services partition."""
        return self.region in C2S_REGIONS


@dataclass
class AzurePlatform(BasePlatform):
    """Settings for clusters on Azure."""

    region: str
    """The Azure location where the cluster is created."""

    cloud_name: AzureCloudName = field(
        metadata=field_options(alias="cloudName"), default=AzureCloudName.PUBLIC
    )
    """The Azure cloud environment."""

    resource_group_name: str = field(
        metadata=field_options(alias="resourceGroupName"), default=""
    )
    """An existing resource group to install the cluster into."""

    network_resource_group_name: str = field(
        metadata=field_options(alias="networkResourceGroupName"), default=""
    )
    """Resource group of an existing virtual network."""

    virtual_network: str = field(
        metadata=field_options(alias="virtualNetwork"), default=""
    )
    """Name of an existing virtual network."""

    compute_subnet: str = field(
        metadata=field_options(alias="computeSubnet"), default=""
    )
    """Name of an existing subnet for compute machines."""

    arm_endpoint: str = field(metadata=field_options(alias="armEndpoint"), default="")
    """Resource manager endpoint, only used by Azure Stack Hub."""

    def cluster_resource_group_name(self, infra_id: str) -> str:
        """Return the name of the resource group holding the cluster resources."""
        if self.resource_group_name:
            return self.resource_group_name
        return f"{infra_id}-rg"


@dataclass
class GCPPlatform(BasePlatform):
    """Settings for clusters on GCP."""

    project_id: str = field(metadata=field_options(alias="projectID"))
    """The project where the cluster is created."""

    region: str
    """The region where the cluster is created."""

    compute_subnet: str = field(
        metadata=field_options(alias="computeSubnet"), default=""
    )
    """Name of an existing subnet for compute machines."""


@dataclass
class IBMCloudPlatform(BasePlatform):
    """Settings for clusters on IBM Cloud."""

    region: str
    """The region where the cluster is created."""

    resource_group_name: str = field(
        metadata=field_options(alias="resourceGroupName"), default=""
    )
    """An existing resource group to install the cluster into."""

    vpc_name: str = field(metadata=field_options(alias="vpcName"), default="")
    """Name of an existing VPC."""

    compute_subnets: list[str] = field(
        metadata=field_options(alias="computeSubnets"), default_factory=list
    )
    """Names of existing subnets for compute machines."""


@dataclass
class KubevirtPlatform(BasePlatform):
    """Settings for clusters on KubeVirt."""

    namespace: str
    """The namespace in the infra cluster holding the tenant cluster VMs."""


@dataclass
class OpenStackPlatform(BasePlatform):
    """Settings for clusters on OpenStack."""

    cloud: str
    """Name of the cloud entry in clouds.yaml, which also supplies the region."""


@dataclass
class VSpherePlatform(BasePlatform):
    """Settings for clusters on vSphere."""

    vcenter: str = field(metadata=field_options(alias="vCenter"))
    """Domain name or IP address of the vCenter."""

    datacenter: str
    """The datacenter where VMs are created."""

    default_datastore: str = field(metadata=field_options(alias="defaultDatastore"))
    """The default datastore used for provisioning volumes."""

    folder: str = ""
    """Absolute path of an existing folder for the VMs."""


@dataclass
class NoopPlatform(BasePlatform):
    """Settings for platforms with no cloud provider config."""


_PLATFORM_SETTINGS: dict[PlatformType, type[BasePlatform]] = {
    PlatformType.AWS: AWSPlatform,
    PlatformType.AZURE: AzurePlatform,
    PlatformType.BAREMETAL: NoopPlatform,
    PlatformType.GCP: GCPPlatform,
    PlatformType.IBMCLOUD: IBMCloudPlatform,
    PlatformType.KUBEVIRT: KubevirtPlatform,
    PlatformType.LIBVIRT: NoopPlatform,
    PlatformType.NONE: NoopPlatform,
    PlatformType.OPENSTACK: OpenStackPlatform,
    PlatformType.OVIRT: NoopPlatform,
    PlatformType.VSPHERE: VSpherePlatform,
}


@dataclass
class Platform:
    """The platform a cluster is installed on, with its settings.

    At most one of the fields is set. When none is set the platform name is
    empty and no cloud provider config can be derived.
    """

    aws: AWSPlatform | None = None
    azure: AzurePlatform | None = None
    baremetal: NoopPlatform | None = None
    gcp: GCPPlatform | None = None
    ibmcloud: IBMCloudPlatform | None = None
    kubevirt: KubevirtPlatform | None = None
    libvirt: NoopPlatform | None = None
    none: NoopPlatform | None = None
    openstack: OpenStackPlatform | None = None
    ovirt: NoopPlatform | None = None
    vsphere: VSpherePlatform | None = None

    @property
    def name(self) -> str:
        """Return the name of the active platform, or an empty string."""
        for platform_field in fields(self):
            if getattr(self, platform_field.name) is not None:
                return platform_field.name
        return ""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "Platform":
        """Parse the `platform` section of an install config."""
        settings: dict[str, BasePlatform] = {}
        for key, subdoc in doc.items():
            try:
                platform_type = PlatformType(key)
            except ValueError:
                _LOGGER.debug("Ignoring unrecognized platform '%s'", key)
                continue
            if subdoc is not None and not isinstance(subdoc, dict):
                raise InputException(f"Invalid install config platform.{key}: {subdoc}")
            settings_cls = _PLATFORM_SETTINGS[platform_type]
            try:
                settings[platform_type.value] = settings_cls.from_dict(subdoc or {})
            except (MissingField, InvalidFieldValue, InputException) as err:
                raise InputException(
                    f"Invalid install config platform.{key}: {err}"
                ) from err
        if len(settings) > 1:
            raise InputException(
                f"Invalid install config, multiple platforms set: {sorted(settings)}"
            )
        return cls(**settings)  # type: ignore[arg-type]


@dataclass
class InstallConfig:
    """The resolved install configuration of a cluster."""

    cluster_name: str
    """The name of the cluster from metadata.name."""

    platform: Platform
    """The platform the cluster is installed on."""

    additional_trust_bundle: str = ""
    """PEM-encoded certificates to add to the cluster trust store."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "InstallConfig":
        """Parse an InstallConfig from an install-config.yaml document."""
        if not isinstance(doc, dict):
            raise InputException(f"Invalid install config document: {doc}")
        if not (metadata := doc.get("metadata")):
            raise InputException("Invalid install config missing metadata")
        if not isinstance(metadata, dict):
            raise InputException(f"Invalid install config metadata: {metadata!r}")
        if not (name := metadata.get("name")):
            raise InputException("Invalid install config missing metadata.name")
        if not isinstance(name, str):
            raise InputException(f"Invalid install config metadata.name: {name!r}")
        if not isinstance(platform := doc.get("platform"), dict):
            raise InputException("Invalid install config missing platform")
        trust_bundle = doc.get("additionalTrustBundle") or ""
        if not isinstance(trust_bundle, str):
            raise InputException(
                f"Invalid install config additionalTrustBundle: {trust_bundle!r}"
            )
        return cls(
            cluster_name=name,
            platform=Platform.parse_doc(platform),
            additional_trust_bundle=trust_bundle,
        )


# Maximum length of the cluster name portion of the infra id.
_INFRA_ID_BASE_LEN = 27
_INFRA_ID_RANDOM_LEN = 5


@dataclass(frozen=True)
class ClusterID:
    """Identifiers for the cluster and its infrastructure resources."""

    infra_id: str
    """Short identifier used as a prefix for infrastructure resource names."""

    def __post_init__(self) -> None:
        if not self.infra_id:
            raise InputException("Cluster infra id must not be empty")


def generate_infra_id(cluster_name: str) -> str:
    """Return an infra id derived from the cluster name and a random suffix."""
    base = slugify(cluster_name, max_length=_INFRA_ID_BASE_LEN, word_boundary=False)
    if not base:
        raise InputException(f"Cannot derive infra id from cluster name '{cluster_name}'")
    suffix = "".join(
        random.choices(string.ascii_lowercase + string.digits, k=_INFRA_ID_RANDOM_LEN)
    )
    return f"{base}-{suffix}"


async def read_install_config(install_config_path: Path) -> InstallConfig:
    """Return the contents of an install-config.yaml file."""
    async with aiofiles.open(str(install_config_path)) as install_config_file:
        content = await install_config_file.read()
    try:
        doc = yaml.safe_load(content)
    except yaml.YAMLError as err:
        raise InputException(
            f"Unable to parse install config {install_config_path}: {err}"
        ) from err
    return InstallConfig.parse_doc(doc)

"""Assets generated while preparing the install dir of a cluster.

An asset declares the assets it depends on and is generated from their
resolved values. The `AssetStore` resolves dependencies depth first and
caches every generated asset for the duration of a run.
"""

from abc import ABC, abstractmethod
import logging
from typing import ClassVar, TypeVar

from .config import GeneratorConfig
from .context import trace_context
from .exceptions import (
    DependencyNotFoundError,
    LookupException,
    SerializationException,
)
from .install_config import ClusterID, InstallConfig, generate_infra_id
from .manifest import ConfigMap, File, ObjectMeta, manifest_path
from .rules import RuleContext, derive_data
from .session import (
    AzureSessionProvider,
    EnvIBMCloudAccountLookup,
    FileAzureSessionProvider,
    IBMCloudAccountLookup,
)

__all__ = [
    "Asset",
    "WritableAsset",
    "FileFetcher",
    "Parents",
    "AssetStore",
    "InstallConfigAsset",
    "ClusterIDAsset",
    "PlatformCredsCheckAsset",
    "CloudProviderConfig",
]

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T", bound="Asset")

CLOUD_PROVIDER_CONFIG_FILENAME = manifest_path("cloud-provider-config.yaml")
CLOUD_PROVIDER_CONFIG_NAMESPACE = "openshift-config"
CLOUD_PROVIDER_CONFIG_NAME = "cloud-provider-config"


class Parents:
    """Resolved dependency values of an asset, keyed by asset type."""

    def __init__(self) -> None:
        """Initialize Parents."""
        self._assets: dict[type["Asset"], "Asset"] = {}

    def add(self, *assets: "Asset") -> None:
        """Add resolved assets."""
        for asset in assets:
            self._assets[type(asset)] = asset

    def get(self, cls: type[T]) -> T:
        """Return the resolved asset of the given type."""
        if (asset := self._assets.get(cls)) is None:
            raise DependencyNotFoundError(f"Dependency {cls.__name__} was not resolved")
        return asset  # type: ignore[return-value]


class Asset(ABC):
    """A unit of generated state for the cluster."""

    name: ClassVar[str]
    """Human friendly name of the asset."""

    @abstractmethod
    def dependencies(self) -> list[type["Asset"]]:
        """Return the asset types directly needed to generate this asset."""

    @abstractmethod
    def generate(self, parents: Parents) -> None:
        """Generate the asset from the resolved dependencies."""


class FileFetcher(ABC):
    """Reads previously written files from the install dir."""

    @abstractmethod
    def fetch_by_name(self, name: str) -> File | None:
        """Return the file with the given name, or None if it does not exist."""


class WritableAsset(Asset):
    """An asset that is persisted as files in the install dir."""

    @abstractmethod
    def files(self) -> list[File]:
        """Return the files generated by the asset."""

    @abstractmethod
    def load(self, fetcher: FileFetcher) -> bool:
        """Load the asset from disk, returning True if it was found."""


class AssetStore:
    """Generates assets after resolving their dependencies.

    Assets passed in as seeds are treated as already resolved, which is how
    callers supply values such as the install config.
    """

    def __init__(self, *seeds: Asset) -> None:
        """Initialize AssetStore."""
        self._resolved: dict[type[Asset], Asset] = {type(seed): seed for seed in seeds}

    def fetch(self, asset: T) -> T:
        """Generate the asset and any dependencies that are not resolved yet."""
        self._resolve(asset, set())
        return asset

    def _resolve(self, asset: Asset, visiting: set[type[Asset]]) -> None:
        if type(asset) in visiting:
            raise DependencyNotFoundError(
                f"Dependency cycle detected resolving {asset.name}"
            )
        visiting = visiting | {type(asset)}
        parents = Parents()
        for dep_cls in asset.dependencies():
            if (dep := self._resolved.get(dep_cls)) is None:
                dep = dep_cls()
                self._resolve(dep, visiting)
            parents.add(dep)
        with trace_context(asset.name):
            asset.generate(parents)
        self._resolved[type(asset)] = asset


def _install_config(parents: Parents) -> InstallConfig:
    if (install_config := parents.get(InstallConfigAsset).config) is None:
        raise DependencyNotFoundError("An install config must be provided")
    return install_config


class InstallConfigAsset(Asset):
    """The install config supplied by the user."""

    name = "Install Config"

    def __init__(self, config: InstallConfig | None = None) -> None:
        """Initialize InstallConfigAsset."""
        self.config = config

    def dependencies(self) -> list[type[Asset]]:
        return []

    def generate(self, parents: Parents) -> None:
        if self.config is None:
            raise DependencyNotFoundError("An install config must be provided")


class ClusterIDAsset(Asset):
    """Identifiers of the cluster, derived from the cluster name."""

    name = "Cluster ID"

    def __init__(self, cluster_id: ClusterID | None = None) -> None:
        """Initialize ClusterIDAsset."""
        self.cluster_id = cluster_id

    def dependencies(self) -> list[type[Asset]]:
        return [InstallConfigAsset]

    def generate(self, parents: Parents) -> None:
        if self.cluster_id is not None:
            return
        install_config = _install_config(parents)
        self.cluster_id = ClusterID(
            infra_id=generate_infra_id(install_config.cluster_name)
        )
        _LOGGER.info("Generated infra id %s", self.cluster_id.infra_id)


class PlatformCredsCheckAsset(Asset):
    """Checks that credentials for the platform are available.

    The check has no value of its own; depending on it ensures credentials are
    verified before assets that need them are generated.
    """

    name = "Platform Credentials Check"

    def __init__(
        self,
        azure_sessions: AzureSessionProvider | None = None,
        ibmcloud_accounts: IBMCloudAccountLookup | None = None,
    ) -> None:
        """Initialize PlatformCredsCheckAsset."""
        self.azure_sessions = azure_sessions
        self.ibmcloud_accounts = ibmcloud_accounts

    def dependencies(self) -> list[type[Asset]]:
        return [InstallConfigAsset]

    def generate(self, parents: Parents) -> None:
        install_config = _install_config(parents)
        platform = install_config.platform
        try:
            if platform.azure is not None:
                sessions = self.azure_sessions or FileAzureSessionProvider(
                    platform.azure.cloud_name
                )
                sessions.session()
            elif platform.ibmcloud is not None:
                (self.ibmcloud_accounts or EnvIBMCloudAccountLookup()).account_id()
        except LookupException as err:
            raise LookupException(
                f"{platform.name} credentials check failed: {err}"
            ) from err


class CloudProviderConfig(WritableAsset):
    """Generates the cloud-provider-config.yaml manifest.

    The manifest is a config map in the openshift-config namespace holding the
    config of the cloud provider for the platform. Some platforms have no
    cloud provider config, in which case no file is generated.
    """

    name = "Cloud Provider Config"

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        azure_sessions: AzureSessionProvider | None = None,
        ibmcloud_accounts: IBMCloudAccountLookup | None = None,
    ) -> None:
        """Initialize CloudProviderConfig."""
        self.config = config or GeneratorConfig()
        self.azure_sessions = azure_sessions
        self.ibmcloud_accounts = ibmcloud_accounts
        self.config_map: ConfigMap | None = None
        self.file: File | None = None

    def dependencies(self) -> list[type[Asset]]:
        # The credentials check is not read here, it only has to run first.
        return [InstallConfigAsset, ClusterIDAsset, PlatformCredsCheckAsset]

    def generate(self, parents: Parents) -> None:
        """Generate the config map, replacing any previous result."""
        install_config = _install_config(parents)
        if (cluster_id := parents.get(ClusterIDAsset).cluster_id) is None:
            raise DependencyNotFoundError(f"{self.name} requires a cluster id")

        data = derive_data(
            RuleContext(
                install_config=install_config,
                cluster_id=cluster_id,
                config=self.config,
                azure_sessions=self.azure_sessions,
                ibmcloud_accounts=self.ibmcloud_accounts,
            )
        )
        if data is None:
            self.config_map = None
            self.file = None
            return

        config_map = ConfigMap(
            metadata=ObjectMeta(
                name=CLOUD_PROVIDER_CONFIG_NAME,
                namespace=CLOUD_PROVIDER_CONFIG_NAMESPACE,
            ),
            data=dict(sorted(data.items())),
        )
        try:
            content = config_map.yaml()
        except SerializationException as err:
            raise SerializationException(
                f"failed to create {self.name} manifest: {err}"
            ) from err
        self.config_map = config_map
        self.file = File(
            filename=CLOUD_PROVIDER_CONFIG_FILENAME, data=content.encode("utf-8")
        )

    def files(self) -> list[File]:
        if self.file is not None:
            return [self.file]
        return []

    def load(self, fetcher: FileFetcher) -> bool:
        """The config is always regenerated, never loaded from disk."""
        return False

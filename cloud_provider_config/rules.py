"""Rules deriving the cloud provider config data of each platform.

Each rule returns the data entries of the config map, or None when the
platform has no cloud provider config. Failures are raised as exceptions
carrying the step that failed.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
import logging
from typing import Any

from .config import GeneratorConfig
from .context import trace_context, trace_label
from .exceptions import (
    GenerateException,
    InputException,
    LookupException,
    ProviderConfigException,
    UnsupportedPlatformError,
)
from .install_config import (
    AWSPlatform,
    AzureCloudName,
    AzurePlatform,
    ClusterID,
    GCPPlatform,
    IBMCloudPlatform,
    InstallConfig,
    KubevirtPlatform,
    PlatformType,
    VSpherePlatform,
)
from .platform import azure, gcp, ibmcloud, kubevirt, openstack, vsphere
from .session import (
    AzureSessionProvider,
    EnvIBMCloudAccountLookup,
    FileAzureSessionProvider,
    IBMCloudAccountLookup,
)

__all__ = [
    "CONFIG_DATA_KEY",
    "CA_BUNDLE_DATA_KEY",
    "ENDPOINTS_DATA_KEY",
    "RuleContext",
    "RULES",
    "default_name",
    "select_platform",
    "derive_data",
]

_LOGGER = logging.getLogger(__name__)

CONFIG_DATA_KEY = "config"
CA_BUNDLE_DATA_KEY = "ca-bundle.pem"
ENDPOINTS_DATA_KEY = "endpoints"

CREATE_ERROR = "could not create cloud provider config"


@dataclass
class RuleContext:
    """Inputs available to a rule."""

    install_config: InstallConfig
    cluster_id: ClusterID
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    azure_sessions: AzureSessionProvider | None = None
    ibmcloud_accounts: IBMCloudAccountLookup | None = None

    @property
    def infra_id(self) -> str:
        return self.cluster_id.infra_id


Data = dict[str, str]
Rule = Callable[[RuleContext], Data | None]


def default_name(override: str, derive: Callable[[], str]) -> str:
    """Return the override when set, otherwise the derived name."""
    if override:
        return override
    return derive()


def _suffixed(infra_id: str, suffix: str) -> Callable[[], str]:
    return lambda: f"{infra_id}-{suffix}"


def _settings(ctx: RuleContext, platform: PlatformType) -> Any:
    if (settings := getattr(ctx.install_config.platform, platform.value)) is None:
        raise InputException(f"Install config has no {platform.value} settings")
    return settings


def _skip(ctx: RuleContext) -> Data | None:
    _LOGGER.debug(
        "%s: platform '%s' has no cloud provider config",
        trace_label(),
        ctx.install_config.platform.name,
    )
    return None


def _aws(ctx: RuleContext) -> Data | None:
    """Store the additional trust bundle when installing into a C2S region."""
    trust_bundle = ctx.install_config.additional_trust_bundle
    platform: AWSPlatform = _settings(ctx, PlatformType.AWS)
    if not trust_bundle or not platform.is_c2s:
        return _skip(ctx)
    return {CA_BUNDLE_DATA_KEY: trust_bundle}


def _openstack(ctx: RuleContext) -> Data | None:
    try:
        config, ca_bundle = openstack.generate_cloud_provider_config(
            ctx.install_config
        )
    except ProviderConfigException as err:
        raise GenerateException(
            f"failed to generate OpenStack provider config: {err}"
        ) from err
    data = {CONFIG_DATA_KEY: config}
    if ca_bundle:
        data[CA_BUNDLE_DATA_KEY] = ca_bundle
    return data


def _azure(ctx: RuleContext) -> Data | None:
    platform: AzurePlatform = _settings(ctx, PlatformType.AZURE)
    sessions = ctx.azure_sessions or FileAzureSessionProvider(platform.cloud_name)
    try:
        session = sessions.session()
    except LookupException as err:
        raise LookupException(f"could not get azure session: {err}") from err

    infra_id = ctx.infra_id
    resource_group = platform.cluster_resource_group_name(infra_id)
    nsg = f"{infra_id}-nsg"
    nrg = default_name(platform.network_resource_group_name, lambda: resource_group)
    vnet = default_name(platform.virtual_network, _suffixed(infra_id, "vnet"))
    subnet = default_name(platform.compute_subnet, _suffixed(infra_id, "worker-subnet"))
    _LOGGER.debug(
        "Azure names resource group=%s nsg=%s network rg=%s vnet=%s subnet=%s",
        resource_group,
        nsg,
        nrg,
        vnet,
        subnet,
    )
    provider_config = azure.CloudProviderConfig(
        cloud_name=platform.cloud_name,
        resource_group_name=resource_group,
        group_location=platform.region,
        resource_prefix=infra_id,
        subscription_id=session.credentials.subscription_id,
        tenant_id=session.credentials.tenant_id,
        aad_client_id=session.credentials.client_id,
        aad_client_secret=session.credentials.client_secret,
        network_resource_group_name=nrg,
        network_security_group_name=nsg,
        virtual_network_name=vnet,
        subnet_name=subnet,
        resource_manager_endpoint=platform.arm_endpoint,
        aro=ctx.config.aro,
    )
    try:
        data = {CONFIG_DATA_KEY: provider_config.json()}
    except ProviderConfigException as err:
        raise GenerateException(f"{CREATE_ERROR}: {err}") from err

    if session.cloud_name == AzureCloudName.STACK:
        try:
            data[ENDPOINTS_DATA_KEY] = azure.endpoints_json(session.environment)
        except ProviderConfigException as err:
            raise GenerateException(
                f"could not serialize Azure Stack endpoints: {err}"
            ) from err
    return data


def _gcp(ctx: RuleContext) -> Data | None:
    platform: GCPPlatform = _settings(ctx, PlatformType.GCP)
    subnet = default_name(
        platform.compute_subnet, _suffixed(ctx.infra_id, "worker-subnet")
    )
    try:
        config = gcp.cloud_provider_config(ctx.infra_id, platform.project_id, subnet)
    except ProviderConfigException as err:
        raise GenerateException(f"{CREATE_ERROR}: {err}") from err
    return {CONFIG_DATA_KEY: config}


def _ibmcloud(ctx: RuleContext) -> Data | None:
    platform: IBMCloudPlatform = _settings(ctx, PlatformType.IBMCLOUD)
    accounts = ctx.ibmcloud_accounts or EnvIBMCloudAccountLookup()
    try:
        account_id = accounts.account_id()
    except LookupException as err:
        raise LookupException(f"could not get IBM Cloud account id: {err}") from err
    try:
        config = ibmcloud.cloud_provider_config(ctx.infra_id, account_id, platform)
    except ProviderConfigException as err:
        raise GenerateException(f"{CREATE_ERROR}: {err}") from err
    return {CONFIG_DATA_KEY: config}


def _vsphere(ctx: RuleContext) -> Data | None:
    platform: VSpherePlatform = _settings(ctx, PlatformType.VSPHERE)
    folder = default_name(
        platform.folder, lambda: f"/{platform.datacenter}/vm/{ctx.infra_id}"
    )
    try:
        config = vsphere.cloud_provider_config(folder, platform)
    except ProviderConfigException as err:
        raise GenerateException(f"{CREATE_ERROR}: {err}") from err
    return {CONFIG_DATA_KEY: config}


def _kubevirt(ctx: RuleContext) -> Data | None:
    platform: KubevirtPlatform = _settings(ctx, PlatformType.KUBEVIRT)
    try:
        config = kubevirt.CloudProviderConfig(
            namespace=platform.namespace, infra_id=ctx.infra_id
        ).yaml()
    except ProviderConfigException as err:
        raise GenerateException(f"{CREATE_ERROR}: {err}") from err
    return {CONFIG_DATA_KEY: config}


RULES: dict[PlatformType, Rule] = {
    PlatformType.AWS: _aws,
    PlatformType.AZURE: _azure,
    PlatformType.BAREMETAL: _skip,
    PlatformType.GCP: _gcp,
    PlatformType.IBMCLOUD: _ibmcloud,
    PlatformType.KUBEVIRT: _kubevirt,
    PlatformType.LIBVIRT: _skip,
    PlatformType.NONE: _skip,
    PlatformType.OPENSTACK: _openstack,
    PlatformType.OVIRT: _skip,
    PlatformType.VSPHERE: _vsphere,
}


def select_platform(install_config: InstallConfig) -> PlatformType:
    """Return the platform of the install config.

    An unset platform, or one without a rule, raises UnsupportedPlatformError.
    """
    name = install_config.platform.name
    try:
        platform = PlatformType(name)
    except ValueError as err:
        raise UnsupportedPlatformError(name) from err
    if platform not in RULES:
        raise UnsupportedPlatformError(name)
    return platform


def derive_data(ctx: RuleContext) -> Data | None:
    """Run the rule for the platform of the install config."""
    platform = select_platform(ctx.install_config)
    with trace_context(f"Rule {platform.value}"):
        return RULES[platform](ctx)

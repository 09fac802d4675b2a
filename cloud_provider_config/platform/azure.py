"""Cloud provider config for Azure."""

from dataclasses import dataclass, field
import json
import logging

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

from cloud_provider_config.exceptions import SerializationException
from cloud_provider_config.install_config import AzureCloudName

_LOGGER = logging.getLogger(__name__)


@dataclass
class _AzureConfig(DataClassDictMixin):
    """Document read by the Azure cloud provider."""

    cloud: str
    tenant_id: str = field(metadata=field_options(alias="tenantId"))
    aad_client_id: str = field(metadata=field_options(alias="aadClientId"))
    aad_client_secret: str = field(metadata=field_options(alias="aadClientSecret"))
    use_managed_identity_extension: bool = field(
        metadata=field_options(alias="useManagedIdentityExtension")
    )
    user_assigned_identity_id: str = field(
        metadata=field_options(alias="userAssignedIdentityID")
    )
    subscription_id: str = field(metadata=field_options(alias="subscriptionId"))
    resource_group: str = field(metadata=field_options(alias="resourceGroup"))
    location: str
    vnet_name: str = field(metadata=field_options(alias="vnetName"))
    vnet_resource_group: str = field(metadata=field_options(alias="vnetResourceGroup"))
    subnet_name: str = field(metadata=field_options(alias="subnetName"))
    security_group_name: str = field(metadata=field_options(alias="securityGroupName"))
    route_table_name: str = field(metadata=field_options(alias="routeTableName"))
    vm_type: str = field(metadata=field_options(alias="vmType"), default="standard")
    cloud_provider_backoff: bool = field(
        metadata=field_options(alias="cloudProviderBackoff"), default=True
    )
    cloud_provider_backoff_duration: int = field(
        metadata=field_options(alias="cloudProviderBackoffDuration"), default=6
    )
    use_instance_metadata: bool = field(
        metadata=field_options(alias="useInstanceMetadata"), default=True
    )
    load_balancer_sku: str = field(
        metadata=field_options(alias="loadBalancerSku"), default="standard"
    )
    exclude_master_from_standard_lb: bool = field(
        metadata=field_options(alias="excludeMasterFromStandardLB"), default=False
    )
    resource_manager_endpoint: str | None = field(
        metadata=field_options(alias="resourceManagerEndpoint"), default=None
    )

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class CloudProviderConfig:
    """Parameters of the Azure cloud provider config."""

    cloud_name: AzureCloudName
    resource_group_name: str
    group_location: str
    resource_prefix: str
    subscription_id: str
    tenant_id: str
    aad_client_id: str
    aad_client_secret: str
    network_resource_group_name: str
    network_security_group_name: str
    virtual_network_name: str
    subnet_name: str
    resource_manager_endpoint: str = ""
    aro: bool = False
    """Azure Red Hat OpenShift authenticates with the service principal
    instead of the managed identity of the VMs."""

    def json(self) -> str:
        """Return the config as tab indented JSON."""
        config = _AzureConfig(
            cloud=self.cloud_name.value,
            tenant_id=self.tenant_id,
            aad_client_id=self.aad_client_id if self.aro else "",
            aad_client_secret=self.aad_client_secret if self.aro else "",
            # The VM managed identity is used when the client id is empty
            use_managed_identity_extension=not self.aro,
            user_assigned_identity_id="",
            subscription_id=self.subscription_id,
            resource_group=self.resource_group_name,
            location=self.group_location,
            vnet_name=self.virtual_network_name,
            vnet_resource_group=self.network_resource_group_name,
            subnet_name=self.subnet_name,
            security_group_name=self.network_security_group_name,
            route_table_name=f"{self.resource_prefix}-node-routetable",
            resource_manager_endpoint=self.resource_manager_endpoint or None,
        )
        try:
            return json.dumps(config.to_dict(), indent="\t") + "\n"
        except (TypeError, ValueError) as err:
            raise SerializationException(f"Unable to encode Azure config: {err}") from err


def endpoints_json(environment: dict[str, str]) -> str:
    """Return the endpoint table of an Azure environment as JSON."""
    try:
        return json.dumps(environment, sort_keys=True)
    except (TypeError, ValueError) as err:
        raise SerializationException(
            f"Unable to encode Azure endpoints: {err}"
        ) from err

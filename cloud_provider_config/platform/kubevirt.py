"""Cloud provider config for KubeVirt."""

from dataclasses import dataclass, field

import yaml
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

from cloud_provider_config.exceptions import SerializationException

KUBECONFIG_PATH = "/etc/kubernetes/kubeconfig/kubeconfig"
TENANT_ID_LABEL = "tenantcluster.kubevirt.io/tenant-id"


@dataclass
class _Enabled(DataClassDictMixin):
    enabled: bool = True


@dataclass
class _KubevirtConfig(DataClassDictMixin):
    """Document read by the KubeVirt cloud provider."""

    namespace: str
    infra_labels: dict[str, str] = field(metadata=field_options(alias="infraLabels"))
    kubeconfig: str = KUBECONFIG_PATH
    load_balancer: _Enabled = field(
        metadata=field_options(alias="loadBalancer"), default_factory=_Enabled
    )
    instances_v2: _Enabled = field(
        metadata=field_options(alias="instancesV2"), default_factory=_Enabled
    )

    class Config(BaseConfig):
        serialize_by_alias = True


@dataclass
class CloudProviderConfig:
    """Parameters of the KubeVirt cloud provider config."""

    namespace: str
    infra_id: str

    def yaml(self) -> str:
        """Return the config as a YAML document."""
        config = _KubevirtConfig(
            namespace=self.namespace,
            infra_labels={TENANT_ID_LABEL: self.infra_id},
        )
        try:
            return yaml.dump(config.to_dict(), sort_keys=False)
        except yaml.YAMLError as err:
            raise SerializationException(
                f"Unable to encode KubeVirt config: {err}"
            ) from err

"""Cloud provider config for vSphere."""

from cloud_provider_config.exceptions import InputException
from cloud_provider_config.install_config import VSpherePlatform

_CONFIG_TEMPLATE = """\
[Global]
secret-name = "vsphere-creds"
secret-namespace = "kube-system"
insecure-flag = "1"

[Workspace]
server = "{vcenter}"
datacenter = "{datacenter}"
default-datastore = "{default_datastore}"
folder = "{folder}"

[VirtualCenter "{vcenter}"]
datacenters = "{datacenter}"
"""


def _quoted(name: str, value: str) -> str:
    if '"' in value or "\n" in value:
        raise InputException(f"Invalid vSphere {name} '{value}' for cloud provider config")
    return value


def cloud_provider_config(folder: str, platform: VSpherePlatform) -> str:
    """Return the vsphere.conf contents for VMs placed in the folder."""
    return _CONFIG_TEMPLATE.format(
        vcenter=_quoted("vCenter", platform.vcenter),
        datacenter=_quoted("datacenter", platform.datacenter),
        default_datastore=_quoted("defaultDatastore", platform.default_datastore),
        folder=_quoted("folder", folder),
    )

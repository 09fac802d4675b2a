"""Cloud provider config for GCP."""

from cloud_provider_config.exceptions import InputException

_CONFIG_TEMPLATE = """\
[global]
project-id      = {project_id}
regional        = true
multizone       = true
node-tags       = {infra_id}-master
node-tags       = {infra_id}-worker
node-instance-prefix = {infra_id}
external-instance-groups-prefix = {infra_id}
subnetwork-name = {subnet}
"""


def cloud_provider_config(infra_id: str, project_id: str, subnet: str) -> str:
    """Return the gce.conf contents for the cluster.

    The format allows repeated keys, so it is rendered from a template rather
    than with configparser.
    """
    if not project_id:
        raise InputException("GCP project id must not be empty")
    return _CONFIG_TEMPLATE.format(
        infra_id=infra_id, project_id=project_id, subnet=subnet
    )

"""Cloud provider config for OpenStack.

The cloud provider reads the credentials from a secret, so the config only
names the secret, the region and the CA bundle of the cloud. Those come from
the entry for the cloud in the local clouds.yaml.
"""

import configparser
import io
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from cloud_provider_config.exceptions import InputException
from cloud_provider_config.install_config import InstallConfig

_LOGGER = logging.getLogger(__name__)

CLOUDS_FILE_ENV = "OS_CLIENT_CONFIG_FILE"
CLOUDS_SEARCH_PATH = [
    Path("clouds.yaml"),
    Path("~/.config/openstack/clouds.yaml"),
    Path("/etc/openstack/clouds.yaml"),
]
# Location of the ca-bundle.pem key of the config map once mounted.
CA_FILE_PATH = "/etc/kubernetes/static-pod-resources/configmaps/cloud-config/ca-bundle.pem"


def _find_clouds_file() -> Path:
    if env_path := os.environ.get(CLOUDS_FILE_ENV):
        return Path(env_path)
    for path in CLOUDS_SEARCH_PATH:
        if (candidate := path.expanduser()).exists():
            return candidate
    raise InputException(
        f"Unable to find clouds.yaml in {[str(p) for p in CLOUDS_SEARCH_PATH]}"
    )


def load_cloud(cloud: str, clouds_file: Path | None = None) -> dict[str, Any]:
    """Return the clouds.yaml entry for the named cloud."""
    path = clouds_file or _find_clouds_file()
    _LOGGER.debug("Loading OpenStack cloud '%s' from %s", cloud, path)
    try:
        doc = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as err:
        raise InputException(f"Unable to read {path}: {err}") from err
    clouds = doc.get("clouds") if isinstance(doc, dict) else None
    if not isinstance(clouds, dict):
        raise InputException(f"Invalid clouds.yaml {path}: expected a clouds mapping")
    if not isinstance(entry := clouds.get(cloud), dict):
        raise InputException(f"Cloud '{cloud}' was not found in {path}")
    return entry


def generate_cloud_provider_config(
    install_config: InstallConfig, clouds_file: Path | None = None
) -> tuple[str, str]:
    """Return the cloud provider config and the CA bundle of the cloud.

    The CA bundle is empty when the cloud entry has no `cacert`.
    """
    if (platform := install_config.platform.openstack) is None:
        raise InputException("Install config has no OpenStack platform")
    cloud = load_cloud(platform.cloud, clouds_file)

    ca_bundle = ""
    if cacert := cloud.get("cacert"):
        try:
            ca_bundle = Path(cacert).expanduser().read_text()
        except OSError as err:
            raise InputException(f"Unable to read cacert {cacert}: {err}") from err

    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    section = {
        "secret-name": "openstack-credentials",
        "secret-namespace": "kube-system",
    }
    if region := cloud.get("region_name"):
        section["region"] = str(region)
    if ca_bundle:
        section["ca-file"] = CA_FILE_PATH
    parser["Global"] = section
    parser["LoadBalancer"] = {"use-octavia": "True"}
    buf = io.StringIO()
    parser.write(buf)
    return buf.getvalue(), ca_bundle

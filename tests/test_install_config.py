"""Tests for the install config library."""

from pathlib import Path

import pytest

from cloud_provider_config.exceptions import InputException
from cloud_provider_config.install_config import (
    AzureCloudName,
    ClusterID,
    InstallConfig,
    PlatformType,
    generate_infra_id,
    read_install_config,
)

INSTALL_CONFIG = """\
apiVersion: v1
baseDomain: example.com
metadata:
  name: my-cluster
additionalTrustBundle: |
  -----BEGIN CERTIFICATE-----
  MIIB
  -----END CERTIFICATE-----
platform:
  azure:
    region: centralus
    cloudName: AzureUSGovernmentCloud
    networkResourceGroupName: network-rg
pullSecret: '{"auths": {}}'
"""


async def test_read_install_config(tmp_path: Path) -> None:
    """Test reading an install-config.yaml file."""
    path = tmp_path / "install-config.yaml"
    path.write_text(INSTALL_CONFIG)
    install_config = await read_install_config(path)
    assert install_config.cluster_name == "my-cluster"
    assert install_config.additional_trust_bundle.startswith("-----BEGIN")
    assert install_config.platform.name == PlatformType.AZURE
    azure = install_config.platform.azure
    assert azure is not None
    assert azure.region == "centralus"
    assert azure.cloud_name == AzureCloudName.US_GOVERNMENT
    assert azure.network_resource_group_name == "network-rg"
    assert azure.virtual_network == ""


async def test_read_invalid_yaml(tmp_path: Path) -> None:
    """Test reading a file that is not yaml."""
    path = tmp_path / "install-config.yaml"
    path.write_text("platform: [unclosed\n")
    with pytest.raises(InputException, match="Unable to parse install config"):
        await read_install_config(path)


@pytest.mark.parametrize(
    ("doc", "match"),
    [
        ({"platform": {"none": {}}}, "missing metadata"),
        ({"metadata": {}, "platform": {"none": {}}}, "missing metadata"),
        ({"metadata": {"labels": {}}, "platform": {}}, "missing metadata.name"),
        ({"metadata": {"name": "c"}}, "missing platform"),
        (
            {"metadata": {"name": "c"}, "platform": {"none": {}, "baremetal": {}}},
            "multiple platforms",
        ),
        (
            {"metadata": {"name": "c"}, "platform": {"gcp": {"region": "r"}}},
            "platform.gcp",
        ),
        (
            {"metadata": {"name": "c"}, "platform": {"aws": "us-east-1"}},
            "platform.aws",
        ),
        ({"metadata": "c", "platform": {"none": {}}}, "metadata: 'c'"),
        ({"metadata": {"name": 5}, "platform": {"none": {}}}, "metadata.name"),
        (
            {
                "metadata": {"name": "c"},
                "additionalTrustBundle": 12345,
                "platform": {"aws": {"region": "us-iso-east-1"}},
            },
            "additionalTrustBundle",
        ),
        (
            {"metadata": {"name": "c"}, "platform": {"aws": {"region": 5}}},
            "platform.aws: region must be a string",
        ),
        (
            {
                "metadata": {"name": "c"},
                "platform": {"ibmcloud": {"region": "r", "computeSubnets": "abc"}},
            },
            "platform.ibmcloud: computeSubnets must be a list of strings",
        ),
        (
            {
                "metadata": {"name": "c"},
                "platform": {"ibmcloud": {"region": "r", "computeSubnets": [1]}},
            },
            "computeSubnets must be a list of strings",
        ),
    ],
)
def test_parse_invalid(doc: dict, match: str) -> None:
    """Test install configs that are rejected."""
    with pytest.raises(InputException, match=match):
        InstallConfig.parse_doc(doc)


def test_parse_list_setting() -> None:
    """List settings keep their string items."""
    install_config = InstallConfig.parse_doc(
        {
            "metadata": {"name": "c"},
            "platform": {"ibmcloud": {"region": "r", "computeSubnets": ["s1", "s2"]}},
        }
    )
    ibmcloud = install_config.platform.ibmcloud
    assert ibmcloud is not None
    assert ibmcloud.compute_subnets == ["s1", "s2"]


def test_platform_name_unset() -> None:
    """An unrecognized platform leaves the platform unset."""
    install_config = InstallConfig.parse_doc(
        {"metadata": {"name": "c"}, "platform": {"mystery": {}}}
    )
    assert install_config.platform.name == ""


def test_cluster_resource_group_name() -> None:
    """The cluster resource group may be overridden."""
    install_config = InstallConfig.parse_doc(
        {"metadata": {"name": "c"}, "platform": {"azure": {"region": "eastus"}}}
    )
    azure = install_config.platform.azure
    assert azure is not None
    assert azure.cluster_resource_group_name("abcde") == "abcde-rg"
    azure.resource_group_name = "existing"
    assert azure.cluster_resource_group_name("abcde") == "existing"


def test_generate_infra_id() -> None:
    """Infra ids are the sanitized cluster name with a random suffix."""
    infra_id = generate_infra_id("My_Cluster.Example")
    base, suffix = infra_id.rsplit("-", 1)
    assert base == "my-cluster-example"
    assert len(suffix) == 5
    assert suffix.isalnum()


def test_generate_infra_id_truncates() -> None:
    """Long cluster names are truncated."""
    infra_id = generate_infra_id("a" * 60)
    assert infra_id.startswith("a" * 27 + "-")
    assert len(infra_id) == 33


def test_cluster_id_requires_infra_id() -> None:
    """An empty infra id is rejected."""
    with pytest.raises(InputException):
        ClusterID(infra_id="")

"""Flags and helpers shared by the cloud-provider-config actions."""

from argparse import ArgumentParser, BooleanOptionalAction
import logging
import pathlib

from cloud_provider_config.asset import (
    Asset,
    AssetStore,
    CloudProviderConfig,
    ClusterIDAsset,
    InstallConfigAsset,
)
from cloud_provider_config.config import GeneratorConfig
from cloud_provider_config.install_config import ClusterID, read_install_config

_LOGGER = logging.getLogger(__name__)


def add_common_flags(args: ArgumentParser) -> None:
    """Add flags that select the install config and cluster identity."""
    args.add_argument(
        "--install-config",
        type=pathlib.Path,
        required=True,
        help="Path to the install-config.yaml of the cluster",
    )
    args.add_argument(
        "--infra-id",
        type=str,
        default=None,
        help="Infrastructure id of the cluster. A new id is generated from "
        "the cluster name when not set.",
    )
    args.add_argument(
        "--aro",
        type=bool,
        default=False,
        action=BooleanOptionalAction,
        help="Generate the Azure Red Hat OpenShift flavor of the Azure config",
    )


async def generate_cloud_provider_config(
    install_config: pathlib.Path, infra_id: str | None, aro: bool
) -> CloudProviderConfig:
    """Read the install config and generate the cloud provider config asset."""
    config = await read_install_config(install_config)
    seeds: list[Asset] = [InstallConfigAsset(config)]
    if infra_id:
        seeds.append(ClusterIDAsset(ClusterID(infra_id=infra_id)))
    store = AssetStore(*seeds)
    return store.fetch(CloudProviderConfig(config=GeneratorConfig(aro=aro)))

"""Cloud provider config for IBM Cloud."""

import configparser
import io

from cloud_provider_config.exceptions import InputException
from cloud_provider_config.install_config import IBMCloudPlatform

# Key file mounted into the cloud controller manager.
CREDENTIALS_FILE = "/etc/vpc/ibmcloud_api_key"


def cloud_provider_config(
    infra_id: str, account_id: str, platform: IBMCloudPlatform
) -> str:
    """Return the VPC cloud controller manager config for the cluster."""
    if not account_id:
        raise InputException("IBM Cloud account id must not be empty")
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    parser["global"] = {"version": "1.1.0"}
    parser["kubernetes"] = {"config-file": '""'}
    subnets = platform.compute_subnets or [f"{infra_id}-subnet-compute-{platform.region}-1"]
    parser["provider"] = {
        "accountID": account_id,
        "clusterID": infra_id,
        "cluster-default-provider": "g2",
        "region": platform.region,
        "g2Credentials": CREDENTIALS_FILE,
        "g2ResourceGroupName": platform.resource_group_name or infra_id,
        "g2VpcName": platform.vpc_name or f"{infra_id}-vpc",
        "g2workerServiceAccountID": account_id,
        "g2VpcSubnetNames": ",".join(subnets),
    }
    buf = io.StringIO()
    parser.write(buf)
    return buf.getvalue()

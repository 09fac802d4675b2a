"""Capabilities for resolving cloud sessions and account details.

Rules that need information only available from the cloud provider take one
of these capabilities as an argument, so they can be exercised with a fake
implementation in tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path

from mashumaro import DataClassDictMixin, field_options
from mashumaro.exceptions import MissingField, InvalidFieldValue

from .exceptions import LookupException
from .install_config import AzureCloudName

__all__ = [
    "AzureCredentials",
    "AzureSession",
    "AzureSessionProvider",
    "FileAzureSessionProvider",
    "IBMCloudAccountLookup",
    "EnvIBMCloudAccountLookup",
]

_LOGGER = logging.getLogger(__name__)

AZURE_AUTH_LOCATION_ENV = "AZURE_AUTH_LOCATION"
AZURE_ENVIRONMENT_FILEPATH_ENV = "AZURE_ENVIRONMENT_FILEPATH"
DEFAULT_AZURE_AUTH_FILE = Path("~/.azure/osServicePrincipal.json")
IBMCLOUD_ACCOUNT_ID_ENV = "IC_ACCOUNT_ID"


# Well known endpoints of the Azure clouds. Azure Stack Hub endpoints are
# specific to each installation and must be supplied in a file.
AZURE_ENVIRONMENTS: dict[AzureCloudName, dict[str, str]] = {
    AzureCloudName.PUBLIC: {
        "name": "AzurePublicCloud",
        "managementPortalURL": "https://manage.windowsazure.com/",
        "resourceManagerEndpoint": "https://management.azure.com/",
        "activeDirectoryEndpoint": "https://login.microsoftonline.com/",
        "storageEndpointSuffix": "core.windows.net",
    },
    AzureCloudName.US_GOVERNMENT: {
        "name": "AzureUSGovernmentCloud",
        "managementPortalURL": "https://manage.windowsazure.us/",
        "resourceManagerEndpoint": "https://management.usgovcloudapi.net/",
        "activeDirectoryEndpoint": "https://login.microsoftonline.us/",
        "storageEndpointSuffix": "core.usgovcloudapi.net",
    },
    AzureCloudName.CHINA: {
        "name": "AzureChinaCloud",
        "managementPortalURL": "https://manage.chinacloudapi.com/",
        "resourceManagerEndpoint": "https://management.chinacloudapi.cn/",
        "activeDirectoryEndpoint": "https://login.chinacloudapi.cn/",
        "storageEndpointSuffix": "core.chinacloudapi.cn",
    },
    AzureCloudName.GERMAN: {
        "name": "AzureGermanCloud",
        "managementPortalURL": "http://portal.microsoftazure.de/",
        "resourceManagerEndpoint": "https://management.microsoftazure.de/",
        "activeDirectoryEndpoint": "https://login.microsoftonline.de/",
        "storageEndpointSuffix": "core.cloudapi.de",
    },
}


@dataclass(frozen=True)
class AzureCredentials(DataClassDictMixin):
    """Service principal credentials for Azure."""

    subscription_id: str = field(metadata=field_options(alias="subscriptionId"))
    tenant_id: str = field(metadata=field_options(alias="tenantId"))
    client_id: str = field(metadata=field_options(alias="clientId"))
    client_secret: str = field(metadata=field_options(alias="clientSecret"))


@dataclass(frozen=True)
class AzureSession:
    """An authenticated Azure session."""

    credentials: AzureCredentials
    """The credentials used by the session."""

    cloud_name: AzureCloudName = AzureCloudName.PUBLIC
    """The cloud environment the session talks to."""

    environment: dict[str, str] = field(default_factory=dict)
    """Endpoint table of the cloud environment."""


class AzureSessionProvider(ABC):
    """Capability to acquire an Azure session."""

    @abstractmethod
    def session(self) -> AzureSession:
        """Return an Azure session or raise LookupException."""


class IBMCloudAccountLookup(ABC):
    """Capability to look up the IBM Cloud account of the current credentials."""

    @abstractmethod
    def account_id(self) -> str:
        """Return the account id or raise LookupException."""


def _read_json(path: Path) -> dict[str, str]:
    try:
        content = json.loads(path.expanduser().read_text())
    except (OSError, ValueError) as err:
        raise LookupException(f"Unable to read {path}: {err}") from err
    if not isinstance(content, dict):
        raise LookupException(f"Expected a JSON object in {path}")
    return content


class FileAzureSessionProvider(AzureSessionProvider):
    """Reads Azure service principal credentials from a local file.

    The file location defaults to `~/.azure/osServicePrincipal.json` and may be
    overridden with the `AZURE_AUTH_LOCATION` environment variable. Azure Stack
    Hub endpoints are read from the file named by `AZURE_ENVIRONMENT_FILEPATH`.
    """

    def __init__(
        self,
        cloud_name: AzureCloudName = AzureCloudName.PUBLIC,
        auth_file: Path | None = None,
        environment_file: Path | None = None,
    ) -> None:
        """Initialize FileAzureSessionProvider."""
        self._cloud_name = cloud_name
        self._auth_file = auth_file or Path(
            os.environ.get(AZURE_AUTH_LOCATION_ENV, DEFAULT_AZURE_AUTH_FILE)
        )
        self._environment_file = environment_file
        if self._environment_file is None and (
            env_path := os.environ.get(AZURE_ENVIRONMENT_FILEPATH_ENV)
        ):
            self._environment_file = Path(env_path)

    def _environment(self) -> dict[str, str]:
        if self._cloud_name != AzureCloudName.STACK:
            return dict(AZURE_ENVIRONMENTS[self._cloud_name])
        if self._environment_file is None:
            raise LookupException(
                f"{AZURE_ENVIRONMENT_FILEPATH_ENV} must be set for {self._cloud_name.value}"
            )
        return _read_json(self._environment_file)

    def session(self) -> AzureSession:
        """Load the credentials and endpoints for the configured cloud."""
        _LOGGER.debug("Loading Azure credentials from %s", self._auth_file)
        content = _read_json(self._auth_file)
        try:
            credentials = AzureCredentials.from_dict(content)
        except (MissingField, InvalidFieldValue) as err:
            raise LookupException(
                f"Invalid credentials in {self._auth_file}: {err}"
            ) from err
        return AzureSession(
            credentials=credentials,
            cloud_name=self._cloud_name,
            environment=self._environment(),
        )


class EnvIBMCloudAccountLookup(IBMCloudAccountLookup):
    """Reads the IBM Cloud account id from the environment."""

    def account_id(self) -> str:
        """Return the account id from `IC_ACCOUNT_ID`."""
        if not (account_id := os.environ.get(IBMCLOUD_ACCOUNT_ID_ENV)):
            raise LookupException(
                f"{IBMCLOUD_ACCOUNT_ID_ENV} must be set to look up the IBM Cloud account"
            )
        return account_id

"""Tests for the session capabilities."""

import json
from pathlib import Path

import pytest

from cloud_provider_config.exceptions import LookupException
from cloud_provider_config.install_config import AzureCloudName
from cloud_provider_config.session import (
    EnvIBMCloudAccountLookup,
    FileAzureSessionProvider,
)

from .fakes import STACK_ENVIRONMENT

CREDENTIALS = {
    "subscriptionId": "sub-id",
    "tenantId": "tenant-id",
    "clientId": "client-id",
    "clientSecret": "client-secret",
}


@pytest.fixture(name="auth_file")
def mock_auth_file(tmp_path: Path) -> Path:
    """Write a service principal file."""
    path = tmp_path / "osServicePrincipal.json"
    path.write_text(json.dumps(CREDENTIALS))
    return path


def test_file_session(auth_file: Path) -> None:
    """Test loading a session for the public cloud."""
    session = FileAzureSessionProvider(auth_file=auth_file).session()
    assert session.credentials.subscription_id == "sub-id"
    assert session.credentials.client_secret == "client-secret"
    assert session.cloud_name == AzureCloudName.PUBLIC
    assert session.environment["name"] == "AzurePublicCloud"


def test_auth_location_env(auth_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the credentials file location from the environment."""
    monkeypatch.setenv("AZURE_AUTH_LOCATION", str(auth_file))
    session = FileAzureSessionProvider().session()
    assert session.credentials.tenant_id == "tenant-id"


def test_stack_session(auth_file: Path, tmp_path: Path) -> None:
    """Test loading the Azure Stack Hub endpoints."""
    environment_file = tmp_path / "environment.json"
    environment_file.write_text(json.dumps(STACK_ENVIRONMENT))
    session = FileAzureSessionProvider(
        AzureCloudName.STACK, auth_file=auth_file, environment_file=environment_file
    ).session()
    assert session.cloud_name == AzureCloudName.STACK
    assert session.environment == STACK_ENVIRONMENT


def test_stack_session_requires_environment(
    auth_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test Azure Stack Hub without an endpoints file."""
    monkeypatch.delenv("AZURE_ENVIRONMENT_FILEPATH", raising=False)
    provider = FileAzureSessionProvider(AzureCloudName.STACK, auth_file=auth_file)
    with pytest.raises(LookupException, match="AZURE_ENVIRONMENT_FILEPATH"):
        provider.session()


def test_missing_auth_file(tmp_path: Path) -> None:
    """Test a missing credentials file."""
    provider = FileAzureSessionProvider(auth_file=tmp_path / "missing.json")
    with pytest.raises(LookupException, match="Unable to read"):
        provider.session()


def test_incomplete_credentials(tmp_path: Path) -> None:
    """Test a credentials file missing a key."""
    path = tmp_path / "osServicePrincipal.json"
    path.write_text(json.dumps({"subscriptionId": "sub-id"}))
    with pytest.raises(LookupException, match="Invalid credentials"):
        FileAzureSessionProvider(auth_file=path).session()


def test_ibmcloud_account(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the account id from the environment."""
    monkeypatch.setenv("IC_ACCOUNT_ID", "acct")
    assert EnvIBMCloudAccountLookup().account_id() == "acct"


def test_ibmcloud_account_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the account id missing from the environment."""
    monkeypatch.delenv("IC_ACCOUNT_ID", raising=False)
    with pytest.raises(LookupException, match="IC_ACCOUNT_ID"):
        EnvIBMCloudAccountLookup().account_id()

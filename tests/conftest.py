"""Fixtures for cloud-provider-config tests."""

import pytest

from cloud_provider_config.install_config import ClusterID

from .fakes import INFRA_ID, FakeAccounts, FakeAzureSessions


@pytest.fixture(name="cluster_id")
def mock_cluster_id() -> ClusterID:
    """Cluster id with a fixed infra id."""
    return ClusterID(infra_id=INFRA_ID)


@pytest.fixture(name="azure_sessions")
def mock_azure_sessions() -> FakeAzureSessions:
    """Azure session provider for the public cloud."""
    return FakeAzureSessions()


@pytest.fixture(name="ibmcloud_accounts")
def mock_ibmcloud_accounts() -> FakeAccounts:
    """IBM Cloud account lookup."""
    return FakeAccounts()

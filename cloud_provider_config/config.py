"""Configuration objects for cloud-provider-config."""

from dataclasses import dataclass


@dataclass
class GeneratorConfig:
    """Configuration for the CloudProviderConfig asset."""

    aro: bool = False
    """Generate the Azure Red Hat OpenShift flavor of the Azure config."""

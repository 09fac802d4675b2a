"""
Generates the cloud provider config manifest of a cluster.

The cloud provider config is a config map holding the settings the cloud
provider of the cluster platform needs, derived from the install config and
the infrastructure id of the cluster.
"""

__all__ = [
    "asset",
    "install_config",
    "manifest",
    "rules",
    "session",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]

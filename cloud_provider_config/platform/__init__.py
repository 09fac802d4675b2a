"""Platform specific cloud provider config renderers.

Each module renders the `config` payload consumed by the cloud provider of
one platform. The renderers are pure functions of their arguments, except for
OpenStack which reads the local clouds.yaml.
"""

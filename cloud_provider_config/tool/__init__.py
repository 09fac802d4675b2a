"""Command line tool for generating cloud provider config manifests."""

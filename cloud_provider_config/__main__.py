"""Entry point for `python -m cloud_provider_config`."""

from cloud_provider_config.tool.cli import main

if __name__ == "__main__":
    main()

"""Command line tool for generating the cloud provider config of a cluster."""

import argparse
import asyncio
import logging
import sys
import traceback

from cloud_provider_config.exceptions import ProviderConfigException
from . import generate, show

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for generating cloud provider config manifests.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    generate.GenerateAction.register(subparsers)
    show.ShowAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Cloud-provider-config command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except ProviderConfigException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("cloud-provider-config error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

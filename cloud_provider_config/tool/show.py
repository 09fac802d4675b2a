"""Cloud-provider-config show action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import cast

import aiofiles

from .common import add_common_flags, generate_cloud_provider_config

_LOGGER = logging.getLogger(__name__)


class ShowAction:
    """Cloud-provider-config show action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "show",
                help="Print the cloud provider config manifest",
            ),
        )
        args.add_argument(
            "--output-file",
            type=str,
            default="/dev/stdout",
            help="Output file for the results of the command",
        )
        add_common_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        install_config: pathlib.Path,
        infra_id: str | None,
        aro: bool,
        output_file: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        asset = await generate_cloud_provider_config(install_config, infra_id, aro)
        content = "".join(file.data.decode("utf-8") for file in asset.files())
        async with aiofiles.open(output_file, mode="w") as out:
            await out.write(content)

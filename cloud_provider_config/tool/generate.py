"""Cloud-provider-config generate action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import cast

from cloud_provider_config.manifest import write_file

from .common import add_common_flags, generate_cloud_provider_config

_LOGGER = logging.getLogger(__name__)


class GenerateAction:
    """Cloud-provider-config generate action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "generate",
                help="Write the cloud provider config manifest to an install dir",
                description="""Generates manifests/cloud-provider-config.yaml
                    below the install dir. Nothing is written for platforms
                    without a cloud provider config.""",
            ),
        )
        args.add_argument(
            "--output-dir",
            type=pathlib.Path,
            required=True,
            help="Install dir to write the manifests into",
        )
        add_common_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        install_config: pathlib.Path,
        infra_id: str | None,
        aro: bool,
        output_dir: pathlib.Path,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        asset = await generate_cloud_provider_config(install_config, infra_id, aro)
        if not (files := asset.files()):
            _LOGGER.info("No cloud provider config for this platform")
            return
        for file in files:
            await write_file(output_dir, file)
            print(output_dir / file.filename)

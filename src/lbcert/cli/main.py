"""Entry point for the lbcert command line."""

from __future__ import annotations

import click

from lbcert import __version__
from lbcert.cli.commands.update_lbs import update_lbs


@click.group()
@click.version_option(__version__, prog_name="lbcert")
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory containing state.json (default: current directory)",
)
@click.option(
    "--endpoint-override",
    type=str,
    default=None,
    help="Send every AWS API call to this endpoint URL",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file to use instead of ~/.lbcert/config.yml",
)
@click.pass_context
def main(
    ctx: click.Context,
    state_dir: str | None,
    endpoint_override: str | None,
    config_path: str | None,
) -> None:
    """Manage the TLS certificate of a BOSH deployment's AWS load balancers."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "state_dir": state_dir,
            "endpoint_override": endpoint_override,
            "config_path": config_path,
        }
    )


main.add_command(update_lbs)


if __name__ == "__main__":  # pragma: no cover
    main()

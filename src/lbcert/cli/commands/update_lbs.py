"""CLI command for rotating the load balancer certificate.

Implements 'lbcert update-lbs', which uploads a new certificate, attaches it
to the deployment's load balancers and records it in the state file.
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import click

from lbcert.aws.clients import BotoClientProvider
from lbcert.aws.cloudformation import CloudFormationInfrastructureManager
from lbcert.aws.ec2 import EC2AvailabilityZoneRetriever
from lbcert.aws.iam import IAMCertificateManager
from lbcert.aws.templates import LBType
from lbcert.config.loader import ConfigLoader
from lbcert.deploy.state import get_state_path, load_state, save_state
from lbcert.deploy.update_lbs import UpdateLBs
from lbcert.lib.errors import ConfigError, DeploymentError, FileNotFoundError
from lbcert.lib.logging_config import get_logger, setup_logging
from lbcert.models.config import GlobalConfig

logger = get_logger(__name__)


@contextmanager
def handle_deployment_errors() -> Generator[None, None, None]:
    """Context manager for consistent error handling in deployment commands.

    Exit codes:
        2: Configuration error
        3: Deployment/execution error
    """
    try:
        yield
    except (ConfigError, FileNotFoundError) as e:
        logger.error(f"Configuration error: {e}")
        click.secho("Error: Configuration error", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(2)
    except DeploymentError as e:
        logger.error(f"Deployment error: {e}")
        click.secho(f"Error: {e.operation} failed", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(3)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(3)


def create_update_lbs(settings: GlobalConfig) -> UpdateLBs:
    """Wire the update-lbs workflow to the AWS adapters."""
    return UpdateLBs(
        certificate_manager=IAMCertificateManager(),
        client_provider=BotoClientProvider(),
        availability_zone_retriever=EC2AvailabilityZoneRetriever(),
        infrastructure_manager=CloudFormationInfrastructureManager(
            wait=settings.wait_for_stack,
            wait_delay=settings.stack_wait_delay,
            wait_max_attempts=settings.stack_wait_max_attempts,
        ),
    )


@click.command(name="update-lbs")
@click.option(
    "--cert",
    "certificate_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Path to the PEM encoded certificate",
)
@click.option(
    "--key",
    "key_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Path to the PEM encoded private key",
)
@click.option(
    "--no-wait",
    is_flag=True,
    help="Return as soon as the stack update is submitted",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose debug logging",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only print the new certificate name",
)
@click.pass_context
def update_lbs(
    ctx: click.Context,
    certificate_path: str,
    key_path: str,
    no_wait: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Replace the certificate on the deployment's load balancers.

    Uploads the certificate and key, updates the load balancer stack to use
    it, deletes the previously recorded certificate and saves the new
    certificate name to the state file.

    Example:

        lbcert update-lbs --cert lb.crt --key lb.key

        lbcert --state-dir ./env update-lbs --cert lb.crt --key lb.key --no-wait
    """
    if not quiet:
        setup_logging(verbose=verbose, quiet=quiet)

    options: dict[str, Any] = ctx.obj or {}

    with handle_deployment_errors():
        settings = ConfigLoader().resolve(
            config_path=options.get("config_path"),
            state_dir=options.get("state_dir"),
            cli_overrides={
                "state_dir": options.get("state_dir"),
                "endpoint_override": options.get("endpoint_override"),
                "wait_for_stack": False if no_wait else None,
            },
        )

        state_path = get_state_path(settings.state_dir or ".")
        state = load_state(state_path)
        if not state.stack.name:
            raise ConfigError(
                field="stack",
                message=(
                    f"No stack recorded in {state_path}. "
                    "Create the environment before updating its load balancers."
                ),
            )
        try:
            LBType(state.stack.lb_type or LBType.NONE.value)
        except ValueError as e:
            supported = ", ".join(lb_type.value for lb_type in LBType)
            raise ConfigError(
                field="stack.lbType",
                message=(
                    f"Unsupported load balancer type '{state.stack.lb_type}' in "
                    f"{state_path}. Supported types: {supported}."
                ),
            ) from e

        if not quiet:
            click.echo()
            click.secho("Update Configuration:", bold=True)
            click.echo(f"  Stack:       {state.stack.name}")
            click.echo(f"  LB type:     {state.stack.lb_type or 'none'}")
            click.echo(f"  Region:      {state.aws.region}")
            click.echo(f"  Certificate: {certificate_path}")
            click.echo()

        command = create_update_lbs(settings)
        new_state = command.execute(
            certificate_path=certificate_path,
            key_path=key_path,
            state=state,
            endpoint_override=settings.endpoint_override,
        )
        save_state(state_path, new_state)

        if quiet:
            click.echo(new_state.certificate_name)
            return

        click.secho("Load Balancers Updated!", fg="green", bold=True)
        click.echo(f"  Certificate: {new_state.certificate_name}")
        if state.certificate_name:
            click.echo(f"  Replaced:    {state.certificate_name}")
        click.echo(f"  State:       {state_path}")
        click.echo()

"""CloudFormation stack updates for load balancer certificates."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from botocore.exceptions import WaiterError

from lbcert.aws.common import AWS_ERRORS, aws_error_code, aws_error_message
from lbcert.aws.templates import KEY_PAIR_PARAMETER, build_template
from lbcert.lib.errors import InfrastructureUpdateError
from lbcert.lib.logging_config import get_logger

logger = get_logger(__name__)

NO_UPDATES_MESSAGE = "No updates are to be performed"


class InfrastructureManager(ABC):
    """Abstract manager of the infrastructure template."""

    @abstractmethod
    def update(
        self,
        client: Any,
        *,
        stack_name: str,
        lb_type: str,
        zone_count: int,
        certificate_arn: str,
        key_pair_name: str,
    ) -> None:
        """Apply a template update to an existing stack.

        Args:
            client: Template service client
            stack_name: Name of the stack to update
            lb_type: Load balancer layout to materialize
            zone_count: Number of availability zones to span
            certificate_arn: Certificate reference for TLS listeners
            key_pair_name: Key pair wired into the stack

        Raises:
            InfrastructureUpdateError: If the update is rejected or fails.
        """


class CloudFormationInfrastructureManager(InfrastructureManager):
    """Update the load balancer stack with CloudFormation."""

    def __init__(
        self,
        wait: bool = True,
        wait_delay: int = 15,
        wait_max_attempts: int = 120,
    ) -> None:
        """Initialize the manager.

        Args:
            wait: Block until the stack reaches UPDATE_COMPLETE
            wait_delay: Seconds between stack status polls
            wait_max_attempts: Maximum number of stack status polls
        """
        self._wait = wait
        self._wait_delay = wait_delay
        self._wait_max_attempts = wait_max_attempts

    def update(
        self,
        client: Any,
        *,
        stack_name: str,
        lb_type: str,
        zone_count: int,
        certificate_arn: str,
        key_pair_name: str,
    ) -> None:
        """Render the template and submit it with ``UpdateStack``."""
        template = build_template(lb_type, zone_count, certificate_arn)

        logger.debug(
            f"Updating stack {stack_name} ({lb_type or 'none'}, {zone_count} zones)"
        )
        try:
            client.update_stack(
                StackName=stack_name,
                TemplateBody=json.dumps(template, sort_keys=True),
                Parameters=[
                    {
                        "ParameterKey": KEY_PAIR_PARAMETER,
                        "ParameterValue": key_pair_name,
                    }
                ],
            )
        except AWS_ERRORS as exc:
            message = aws_error_message(exc)
            code = aws_error_code(exc)
            if code == "ValidationError" and NO_UPDATES_MESSAGE in message:
                logger.info(f"Stack {stack_name} is already up to date")
                return
            raise InfrastructureUpdateError(message) from exc

        if self._wait:
            self._wait_for_update(client, stack_name)

    def _wait_for_update(self, client: Any, stack_name: str) -> None:
        logger.info(f"Waiting for stack {stack_name} to finish updating")
        waiter = client.get_waiter("stack_update_complete")
        try:
            waiter.wait(
                StackName=stack_name,
                WaiterConfig={
                    "Delay": self._wait_delay,
                    "MaxAttempts": self._wait_max_attempts,
                },
            )
        except WaiterError as exc:
            raise InfrastructureUpdateError(
                f"Stack {stack_name} did not finish updating: {exc}"
            ) from exc
        except AWS_ERRORS as exc:
            raise InfrastructureUpdateError(aws_error_message(exc)) from exc

"""AWS client construction.

A ``ClientProvider`` turns an ``AWSConfig`` into the three service clients
the load balancer workflow needs. Nothing is sent to AWS at this point.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError

from lbcert.lib.errors import ClientConstructionError
from lbcert.lib.logging_config import get_logger
from lbcert.models.aws import AWSConfig

logger = get_logger(__name__)

IAM_SERVICE = "iam"
EC2_SERVICE = "ec2"
CLOUDFORMATION_SERVICE = "cloudformation"


@dataclass(frozen=True)
class ProviderClients:
    """Service clients scoped to a single workflow run.

    Attributes:
        iam: Client for IAM server certificates
        ec2: Client for availability zone discovery
        cloudformation: Client for stack updates
    """

    iam: Any
    ec2: Any
    cloudformation: Any


class ClientProvider(ABC):
    """Abstract factory for AWS service clients."""

    @abstractmethod
    def iam_client(self, config: AWSConfig) -> Any:
        """Return an IAM client.

        Raises:
            ClientConstructionError: If the client cannot be created.
        """

    @abstractmethod
    def ec2_client(self, config: AWSConfig) -> Any:
        """Return an EC2 client.

        Raises:
            ClientConstructionError: If the client cannot be created.
        """

    @abstractmethod
    def cloudformation_client(self, config: AWSConfig) -> Any:
        """Return a CloudFormation client.

        Raises:
            ClientConstructionError: If the client cannot be created.
        """

    def build(self, config: AWSConfig) -> ProviderClients:
        """Construct all three clients with the same configuration.

        Stops at the first construction failure and lets that error
        propagate unchanged, so no partial client set is ever returned.

        Raises:
            ClientConstructionError: If any client cannot be created.
        """
        iam = self.iam_client(config)
        ec2 = self.ec2_client(config)
        cloudformation = self.cloudformation_client(config)
        return ProviderClients(iam=iam, ec2=ec2, cloudformation=cloudformation)


class BotoClientProvider(ClientProvider):
    """Create clients with boto3."""

    def __init__(self, session: boto3.session.Session | None = None) -> None:
        """Initialize the provider.

        Args:
            session: boto3 session to create clients from; a fresh session
                per client is used when omitted
        """
        self._session = session

    def iam_client(self, config: AWSConfig) -> Any:
        """Create an IAM client."""
        return self._create(IAM_SERVICE, config)

    def ec2_client(self, config: AWSConfig) -> Any:
        """Create an EC2 client."""
        return self._create(EC2_SERVICE, config)

    def cloudformation_client(self, config: AWSConfig) -> Any:
        """Create a CloudFormation client."""
        return self._create(CLOUDFORMATION_SERVICE, config)

    def _create(self, service: str, config: AWSConfig) -> Any:
        kwargs: dict[str, Any] = {
            "aws_access_key_id": config.access_key_id or None,
            "aws_secret_access_key": config.secret_access_key or None,
            "region_name": config.region or None,
        }
        if config.endpoint_override:
            kwargs["endpoint_url"] = config.endpoint_override

        logger.debug(
            f"Creating {service} client for region {config.region or '<default>'}"
        )
        session = self._session or boto3.session.Session()
        try:
            return session.client(service, **kwargs)
        except (BotoCoreError, ValueError) as exc:
            raise ClientConstructionError(service=service, message=str(exc)) from exc

"""Deployment state models for persisted deployments.

State is stored as camelCase JSON. Models are frozen: an updated state is
always a new value produced with ``model_copy``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

STATE_VERSION = 1


class _StateModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AWSState(_StateModel):
    """AWS credentials and region recorded for a deployment."""

    access_key_id: str = Field(default="", description="AWS access key ID")
    secret_access_key: str = Field(default="", description="AWS secret access key")
    region: str = Field(default="", description="AWS region")


class KeyPair(_StateModel):
    """EC2 key pair referenced by the stack."""

    name: str = Field(default="", description="EC2 key pair name")
    private_key: str = Field(default="", description="PEM encoded private key")
    public_key: str = Field(default="", description="OpenSSH public key")


class Stack(_StateModel):
    """CloudFormation stack holding the load balancers."""

    name: str = Field(default="", description="CloudFormation stack name")
    lb_type: str = Field(default="", description="Load balancer type")


class DeploymentState(_StateModel):
    """Top-level deployment state stored on disk.

    Fields that lbcert does not model (for example BOSH director details)
    are kept as extra attributes and written back unchanged.
    """

    version: int = Field(default=STATE_VERSION, description="State file version")
    aws: AWSState = Field(default_factory=AWSState)
    key_pair: KeyPair = Field(default_factory=KeyPair)
    stack: Stack = Field(default_factory=Stack)
    certificate_name: str = Field(
        default="", description="Name of the active load balancer certificate"
    )

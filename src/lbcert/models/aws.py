"""Pydantic models exchanged with the AWS adapters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from lbcert.models.deployment_state import DeploymentState


class AWSConfig(BaseModel):
    """Credentials, region and endpoint used to construct AWS clients.

    Attributes:
        access_key_id: AWS access key ID
        secret_access_key: AWS secret access key
        region: AWS region for every client
        endpoint_override: Alternate endpoint URL, empty for the AWS default
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    access_key_id: str = Field(default="", description="AWS access key ID")
    secret_access_key: str = Field(default="", description="AWS secret access key")
    region: str = Field(default="", description="AWS region")
    endpoint_override: str = Field(
        default="", description="Alternate endpoint URL for all clients"
    )

    @classmethod
    def from_state(
        cls, state: DeploymentState, endpoint_override: str | None = None
    ) -> AWSConfig:
        """Build client configuration from persisted deployment state."""
        return cls(
            access_key_id=state.aws.access_key_id,
            secret_access_key=state.aws.secret_access_key,
            region=state.aws.region,
            endpoint_override=endpoint_override or "",
        )


class CertificateRecord(BaseModel):
    """An uploaded server certificate.

    ``name`` is the lookup key chosen at upload time; ``arn`` is the
    provider reference that templates must cite.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Server certificate name")
    arn: str = Field(..., description="Server certificate ARN")
    body: str = Field(default="", description="PEM encoded certificate body")
    chain: str = Field(default="", description="PEM encoded certificate chain")

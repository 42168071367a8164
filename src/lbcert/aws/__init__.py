"""AWS adapters for certificates, availability zones and stacks."""

from lbcert.aws.clients import BotoClientProvider, ClientProvider, ProviderClients
from lbcert.aws.cloudformation import (
    CloudFormationInfrastructureManager,
    InfrastructureManager,
)
from lbcert.aws.ec2 import AvailabilityZoneRetriever, EC2AvailabilityZoneRetriever
from lbcert.aws.iam import CertificateManager, IAMCertificateManager

__all__ = [
    "AvailabilityZoneRetriever",
    "BotoClientProvider",
    "CertificateManager",
    "ClientProvider",
    "CloudFormationInfrastructureManager",
    "EC2AvailabilityZoneRetriever",
    "IAMCertificateManager",
    "InfrastructureManager",
    "ProviderClients",
]

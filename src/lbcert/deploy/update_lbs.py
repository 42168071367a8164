"""Rotate the certificate attached to a deployment's load balancers.

The update runs as a single linear pass:

1. build the IAM, EC2 and CloudFormation clients
2. list the region's availability zones
3. upload the new certificate
4. resolve the new certificate's ARN
5. update the stack to cite the new ARN
6. delete the previous certificate, if the state recorded one
7. return a copy of the state naming the new certificate

The first failure aborts the run and propagates unchanged. No compensation
is attempted: a failure after step 3 leaves the new certificate uploaded
but unused, and a failure in step 6 leaves the superseded certificate in
place. Both cases are logged as warnings naming the certificate.
"""

from __future__ import annotations

from lbcert.aws.clients import ClientProvider
from lbcert.aws.cloudformation import InfrastructureManager
from lbcert.aws.ec2 import AvailabilityZoneRetriever
from lbcert.aws.iam import CertificateManager
from lbcert.lib.logging_config import get_logger
from lbcert.models.aws import AWSConfig
from lbcert.models.deployment_state import DeploymentState

logger = get_logger(__name__)


class UpdateLBs:
    """Replace the load balancer certificate recorded in deployment state."""

    def __init__(
        self,
        certificate_manager: CertificateManager,
        client_provider: ClientProvider,
        availability_zone_retriever: AvailabilityZoneRetriever,
        infrastructure_manager: InfrastructureManager,
    ) -> None:
        """Initialize the command with its collaborators."""
        self._certificate_manager = certificate_manager
        self._client_provider = client_provider
        self._availability_zone_retriever = availability_zone_retriever
        self._infrastructure_manager = infrastructure_manager

    def execute(
        self,
        *,
        certificate_path: str,
        key_path: str,
        state: DeploymentState,
        endpoint_override: str | None = None,
    ) -> DeploymentState:
        """Upload a certificate, attach it to the stack and retire the old one.

        Args:
            certificate_path: Path to the PEM certificate
            key_path: Path to the PEM private key
            state: Current deployment state; never modified
            endpoint_override: Alternate endpoint for every AWS client

        Returns:
            A new state whose ``certificate_name`` is the uploaded certificate.
            All other fields are identical to ``state``.

        Raises:
            DeploymentError: The first collaborator error, unchanged.
        """
        config = AWSConfig.from_state(state, endpoint_override)
        clients = self._client_provider.build(config)

        zones = self._availability_zone_retriever.retrieve(clients.ec2, config.region)
        logger.info(f"Found {len(zones)} availability zones in {config.region}")

        certificate_name = self._certificate_manager.create(
            clients.iam, certificate_path, key_path
        )
        logger.info(f"Uploaded certificate {certificate_name}")

        try:
            certificate = self._certificate_manager.describe(
                clients.iam, certificate_name
            )
            logger.info(
                f"Updating stack {state.stack.name} with certificate {certificate.arn}"
            )
            self._infrastructure_manager.update(
                clients.cloudformation,
                stack_name=state.stack.name,
                lb_type=state.stack.lb_type,
                zone_count=len(zones),
                certificate_arn=certificate.arn,
                key_pair_name=state.key_pair.name,
            )
        except Exception:
            logger.warning(
                f"Certificate {certificate_name} was uploaded but is not attached "
                "to the stack; delete it manually if it is no longer needed"
            )
            raise

        previous_name = state.certificate_name
        if previous_name:
            try:
                self._certificate_manager.delete(clients.iam, previous_name)
            except Exception:
                logger.warning(
                    f"Stack now uses certificate {certificate_name}, but the "
                    f"previous certificate {previous_name} could not be deleted"
                )
                raise
            logger.info(f"Deleted previous certificate {previous_name}")
        else:
            logger.debug("No previous certificate recorded; nothing to delete")

        return state.model_copy(update={"certificate_name": certificate_name})

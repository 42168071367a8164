"""IAM server certificate management."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

from lbcert.aws.common import AWS_ERRORS, aws_error_message
from lbcert.lib.errors import (
    CertificateCreationError,
    CertificateDeletionError,
    CertificateLookupError,
)
from lbcert.lib.logging_config import get_logger
from lbcert.models.aws import CertificateRecord

logger = get_logger(__name__)

CERTIFICATE_NAME_PREFIX = "lbcert-cert-"


def read_file(path: str | Path) -> str:
    """Read a PEM file as text."""
    return Path(path).read_text(encoding="utf-8")


def generate_certificate_name() -> str:
    """Return a unique server certificate name."""
    return f"{CERTIFICATE_NAME_PREFIX}{uuid.uuid4().hex}"


class CertificateManager(ABC):
    """Abstract certificate manager over an identity service client."""

    @abstractmethod
    def create(self, client: Any, certificate_path: str, private_key_path: str) -> str:
        """Upload a certificate and private key.

        Args:
            client: Identity service client
            certificate_path: Path to the PEM certificate
            private_key_path: Path to the PEM private key

        Returns:
            Name assigned to the new certificate.

        Raises:
            CertificateCreationError: If the upload fails.
        """

    @abstractmethod
    def describe(self, client: Any, certificate_name: str) -> CertificateRecord:
        """Resolve a certificate name to its provider reference.

        Raises:
            CertificateLookupError: If the certificate is unknown or the call fails.
        """

    @abstractmethod
    def delete(self, client: Any, certificate_name: str) -> None:
        """Delete a certificate by name.

        Raises:
            CertificateDeletionError: If the provider rejects the call.
        """


class IAMCertificateManager(CertificateManager):
    """Manage load balancer certificates as IAM server certificates."""

    def __init__(
        self,
        reader: Callable[[str | Path], str] = read_file,
        name_generator: Callable[[], str] = generate_certificate_name,
    ) -> None:
        """Initialize the manager.

        Args:
            reader: Callable returning the text content of a file path
            name_generator: Callable returning a fresh certificate name
        """
        self._read = reader
        self._generate_name = name_generator

    def create(self, client: Any, certificate_path: str, private_key_path: str) -> str:
        """Upload the certificate pair under a generated name."""
        try:
            certificate_body = self._read(certificate_path)
            private_key = self._read(private_key_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise CertificateCreationError(str(exc)) from exc

        certificate_name = self._generate_name()
        logger.debug(f"Uploading server certificate {certificate_name}")
        try:
            client.upload_server_certificate(
                ServerCertificateName=certificate_name,
                CertificateBody=certificate_body,
                PrivateKey=private_key,
            )
        except AWS_ERRORS as exc:
            raise CertificateCreationError(aws_error_message(exc)) from exc

        return certificate_name

    def describe(self, client: Any, certificate_name: str) -> CertificateRecord:
        """Fetch the certificate ARN and PEM content by name."""
        try:
            response = client.get_server_certificate(
                ServerCertificateName=certificate_name
            )
        except AWS_ERRORS as exc:
            raise CertificateLookupError(aws_error_message(exc)) from exc

        certificate = response.get("ServerCertificate") or {}
        metadata = certificate.get("ServerCertificateMetadata") or {}
        arn = metadata.get("Arn")
        if not arn:
            raise CertificateLookupError(
                f"Server certificate {certificate_name} has no ARN"
            )

        return CertificateRecord(
            name=metadata.get("ServerCertificateName", certificate_name),
            arn=arn,
            body=certificate.get("CertificateBody", ""),
            chain=certificate.get("CertificateChain", ""),
        )

    def delete(self, client: Any, certificate_name: str) -> None:
        """Delete the named server certificate."""
        logger.debug(f"Deleting server certificate {certificate_name}")
        try:
            client.delete_server_certificate(ServerCertificateName=certificate_name)
        except AWS_ERRORS as exc:
            raise CertificateDeletionError(aws_error_message(exc)) from exc

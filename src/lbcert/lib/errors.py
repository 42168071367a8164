"""Custom exception hierarchy for lbcert configuration and operations."""


class LBCertError(Exception):
    """Base exception for all lbcert errors.

    All lbcert-specific exceptions inherit from this class, enabling
    centralized exception handling in the CLI.
    """

    pass


class ConfigError(LBCertError):
    """Exception raised for configuration errors.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class FileNotFoundError(LBCertError):
    """Exception raised when a configuration file is not found.

    Attributes:
        path: Path to the file that was not found
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str) -> None:
        """Initialize FileNotFoundError with path and message."""
        self.path = path
        self.message = message
        super().__init__(f"File not found: {path}\n{message}")


class DeploymentError(LBCertError):
    """Exception raised when a deployment operation fails.

    The string form of the error is exactly ``message`` so that provider
    messages surface to callers verbatim.

    Attributes:
        operation: Short name of the operation that failed
        message: Human-readable error message
    """

    operation_name = "deploy"

    def __init__(self, message: str, operation: str | None = None) -> None:
        """Create a deployment error.

        Args:
            message: Descriptive error message
            operation: Operation name, defaults to the class operation name
        """
        self.operation = operation or self.operation_name
        self.message = message
        super().__init__(message)


class StateError(DeploymentError):
    """Raised when deployment state cannot be read or written."""

    operation_name = "state"


class ClientConstructionError(DeploymentError):
    """Raised when a provider client cannot be constructed.

    Attributes:
        service: Provider service whose client failed (iam, ec2, cloudformation)
    """

    operation_name = "build_clients"

    def __init__(self, service: str, message: str) -> None:
        """Create a client construction error for a provider service."""
        self.service = service
        super().__init__(message)


class ZoneRetrievalError(DeploymentError):
    """Raised when availability zones cannot be retrieved."""

    operation_name = "retrieve_zones"


class CertificateCreationError(DeploymentError):
    """Raised when a certificate cannot be uploaded."""

    operation_name = "create_certificate"


class CertificateLookupError(DeploymentError):
    """Raised when a certificate cannot be described."""

    operation_name = "describe_certificate"


class CertificateDeletionError(DeploymentError):
    """Raised when a certificate cannot be deleted."""

    operation_name = "delete_certificate"


class InfrastructureUpdateError(DeploymentError):
    """Raised when the infrastructure stack update fails."""

    operation_name = "update_infrastructure"

"""Helpers shared by the AWS adapters."""

from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError

# Errors raised by botocore for failed or unreachable API calls
AWS_ERRORS = (ClientError, BotoCoreError)


def aws_error_message(exc: Exception) -> str:
    """Return the provider message carried by a botocore error."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Message") or str(exc)
    return str(exc)


def aws_error_code(exc: Exception) -> str:
    """Return the AWS error code of a ClientError, or an empty string."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""

"""Availability zone discovery through EC2."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from lbcert.aws.common import AWS_ERRORS, aws_error_message
from lbcert.lib.errors import ZoneRetrievalError
from lbcert.lib.logging_config import get_logger

logger = get_logger(__name__)


class AvailabilityZoneRetriever(ABC):
    """Abstract retriever of a region's availability zones."""

    @abstractmethod
    def retrieve(self, client: Any, region: str) -> list[str]:
        """Return availability zone names for a region.

        Raises:
            ZoneRetrievalError: If the zones cannot be listed.
        """


class EC2AvailabilityZoneRetriever(AvailabilityZoneRetriever):
    """List zones with ``DescribeAvailabilityZones``."""

    def retrieve(self, client: Any, region: str) -> list[str]:
        """Return zone names in the order EC2 reports them."""
        try:
            response = client.describe_availability_zones(
                Filters=[{"Name": "region-name", "Values": [region]}]
            )
        except AWS_ERRORS as exc:
            raise ZoneRetrievalError(aws_error_message(exc)) from exc

        zones = [
            zone["ZoneName"]
            for zone in response.get("AvailabilityZones", [])
            if zone.get("ZoneName")
        ]
        logger.debug(f"Found {len(zones)} availability zones in {region}: {zones}")
        return zones

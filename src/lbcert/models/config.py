"""Global configuration model for lbcert."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GlobalConfig(BaseModel):
    """User or project level settings read from config.yml.

    Attributes:
        endpoint_override: Alternate AWS endpoint URL for all clients
        state_dir: Directory holding state.json
        wait_for_stack: Block until the stack update completes
        stack_wait_delay: Seconds between stack status polls
        stack_wait_max_attempts: Maximum number of stack status polls
    """

    model_config = ConfigDict(extra="forbid")

    endpoint_override: str | None = Field(
        default=None, description="Alternate AWS endpoint URL"
    )
    state_dir: str | None = Field(
        default=None, description="Directory holding state.json"
    )
    wait_for_stack: bool = Field(
        default=True, description="Wait for the stack update to complete"
    )
    stack_wait_delay: int = Field(
        default=15, ge=1, description="Seconds between stack status polls"
    )
    stack_wait_max_attempts: int = Field(
        default=120, ge=1, description="Maximum number of stack status polls"
    )

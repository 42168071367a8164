"""Deployment state persistence helpers."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from lbcert.lib.errors import StateError
from lbcert.models.deployment_state import DeploymentState

STATE_FILENAME = "state.json"


def get_state_path(state_dir: str | Path) -> Path:
    """Return the state file path inside a state directory."""
    return Path(state_dir) / STATE_FILENAME


def load_state(state_path: Path) -> DeploymentState:
    """Load deployment state from disk.

    A missing or empty file yields a default state.

    Raises:
        StateError: If the file cannot be read or is not valid state JSON
    """
    if not state_path.exists():
        return DeploymentState()

    try:
        content = state_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StateError(
            f"Failed to read deployment state at {state_path}: {exc}"
        ) from exc

    if not content.strip():
        return DeploymentState()

    try:
        return DeploymentState.model_validate_json(content)
    except ValidationError as exc:
        raise StateError(
            f"Invalid deployment state format in {state_path}: {exc}"
        ) from exc


def save_state(state_path: Path, state: DeploymentState) -> None:
    """Persist deployment state to disk as camelCase JSON.

    Raises:
        StateError: If the file cannot be written
    """
    payload = json.dumps(
        state.model_dump(mode="json", by_alias=True), indent=2, sort_keys=True
    )
    try:
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text(payload + "\n", encoding="utf-8")
    except OSError as exc:
        raise StateError(
            f"Failed to write deployment state to {state_path}: {exc}"
        ) from exc

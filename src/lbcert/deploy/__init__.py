"""Load balancer certificate deployment.

Provides the update-lbs workflow and deployment state persistence.
"""

from lbcert.deploy.state import get_state_path, load_state, save_state
from lbcert.deploy.update_lbs import UpdateLBs

__all__ = [
    "UpdateLBs",
    "get_state_path",
    "load_state",
    "save_state",
]

"""lbcert - rotate the TLS certificate of a BOSH deployment's AWS load balancers.

lbcert uploads a new IAM server certificate, points the deployment's
CloudFormation stack at it, retires the previous certificate and records the
new certificate name in the deployment state file.
"""

from lbcert.lib.errors import ConfigError, DeploymentError, LBCertError

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ConfigError",
    "DeploymentError",
    "LBCertError",
]

"""
Exception types raised by the harness.

Every setup failure is fatal for the suite or the test, so these are
propagated as-is and surface through pytest's failure reporting.
"""
from typing import Optional


class HarnessError(Exception):
    """Base class for all harness failures"""


class BootstrapError(HarnessError):
    """Dependency install or contract compilation failed"""


class ContainerError(HarnessError):
    """Container start, readiness wait, inspection or teardown failed"""


class ArtifactError(HarnessError):
    """Compiled-contract artifact is missing or malformed"""


class DeploymentError(HarnessError):
    """Deployment transaction was rejected, reverted or produced no address"""


class RPCError(HarnessError):
    """JSON-RPC endpoint answered with a non-200 status or an unusable body"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DeadlineExceeded(HarnessError, TimeoutError):
    """Per-test wait budget ran out (or was cancelled) before the call finished"""

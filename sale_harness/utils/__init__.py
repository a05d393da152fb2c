"""
Utilities package for the token-sale integration harness.

This package contains utility modules for:
- Logging: logging setup and run tracking
- Errors: harness exception hierarchy
- Deadline: per-test wait budget
- Validation: artifact and address checks
"""

from .logging_utils import HarnessLogger, setup_logging
from .errors import (
    HarnessError,
    BootstrapError,
    ContainerError,
    ArtifactError,
    DeploymentError,
    RPCError,
    DeadlineExceeded
)
from .deadline import Deadline
from .validation import ValidationResult, validate_artifact_payload, is_zero_address

__all__ = [
    'HarnessLogger',
    'setup_logging',
    'HarnessError',
    'BootstrapError',
    'ContainerError',
    'ArtifactError',
    'DeploymentError',
    'RPCError',
    'DeadlineExceeded',
    'Deadline',
    'ValidationResult',
    'validate_artifact_payload',
    'is_zero_address'
]

"""
Validation utilities for compiled artifacts and deployment results
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from eth_utils import is_hex

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x" + "0" * 40


@dataclass
class ValidationResult:
    """Result of a validation check"""
    is_valid: bool
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


def strip_hex_prefix(value: str) -> str:
    if value.startswith(("0x", "0X")):
        return value[2:]
    return value


def validate_artifact_payload(payload: Any) -> ValidationResult:
    """
    Validate the decoded JSON of a Hardhat artifact

    Args:
        payload: Decoded artifact document

    Returns:
        ValidationResult with validation status
    """
    if not isinstance(payload, dict):
        return ValidationResult(
            is_valid=False,
            error=f"artifact must be a JSON object, got {type(payload).__name__}"
        )

    if 'abi' not in payload:
        return ValidationResult(is_valid=False, error="artifact has no 'abi' field")
    if not isinstance(payload['abi'], list):
        return ValidationResult(is_valid=False, error="'abi' must be a list")

    if 'bytecode' not in payload:
        return ValidationResult(is_valid=False, error="artifact has no 'bytecode' field")
    bytecode = payload['bytecode']
    if not isinstance(bytecode, str):
        return ValidationResult(is_valid=False, error="'bytecode' must be a hex string")

    body = strip_hex_prefix(bytecode)
    if not body:
        # Interfaces and abstract contracts compile to "0x"
        return ValidationResult(is_valid=False, error="'bytecode' is empty")
    if len(body) % 2 != 0:
        return ValidationResult(is_valid=False, error="'bytecode' has odd length")
    if not is_hex(bytecode):
        return ValidationResult(is_valid=False, error="'bytecode' is not hex")

    return ValidationResult(
        is_valid=True,
        details={'abi_entries': len(payload['abi']), 'bytecode_size': len(body) // 2}
    )


def is_zero_address(address: Optional[str]) -> bool:
    if not address:
        return True
    return strip_hex_prefix(str(address)).strip("0") == ""

"""
Hardhat artifact loading.

An artifact is read and validated in full before anything derived from it
reaches the network.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from eth_utils import decode_hex

from ..utils.errors import ArtifactError
from ..utils.validation import validate_artifact_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeploymentArtifact:
    """Interface description and creation bytecode of one compiled contract"""
    contract_name: str
    abi: Tuple[Dict[str, Any], ...] = field(repr=False)
    bytecode: bytes = field(repr=False)
    source_path: Path = None

    @property
    def abi_list(self) -> List[Dict[str, Any]]:
        return list(self.abi)

    @property
    def bytecode_hex(self) -> str:
        return "0x" + self.bytecode.hex()


def artifact_path(artifacts_dir: Path, source: str, contract_name: str) -> Path:
    """Canonical Hardhat location: contracts/<source>.sol/<name>.json"""
    return Path(artifacts_dir) / "contracts" / f"{source}.sol" / f"{contract_name}.json"


def load_artifact(path: Path) -> DeploymentArtifact:
    """
    Read and validate a Hardhat artifact file

    Raises:
        ArtifactError: file missing, not JSON, or without usable abi/bytecode
    """
    path = Path(path)
    try:
        with open(path, 'r') as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise ArtifactError(f"failed to read artifact: {path} not found") from e
    except OSError as e:
        raise ArtifactError(f"failed to read artifact {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ArtifactError(f"failed to unmarshal artifact {path}: {e}") from e

    result = validate_artifact_payload(payload)
    if not result.is_valid:
        raise ArtifactError(f"invalid artifact {path}: {result.error}")

    try:
        bytecode = decode_hex(payload['bytecode'])
    except ValueError as e:
        raise ArtifactError(f"invalid artifact {path}: undecodable bytecode: {e}") from e

    name = payload.get('contractName') or path.stem
    artifact = DeploymentArtifact(
        contract_name=name,
        abi=tuple(payload['abi']),
        bytecode=bytecode,
        source_path=path
    )
    logger.debug(
        f"Loaded artifact {name}: {result.details['abi_entries']} ABI entries, "
        f"{result.details['bytecode_size']} bytes")
    return artifact


def find_artifact(artifacts_dir: Path, contract_name: str) -> DeploymentArtifact:
    """Search ``artifacts_dir`` for ``<contract_name>.json`` (debug files skipped)"""
    target = f"{contract_name}.json"
    for root, dirs, files in os.walk(artifacts_dir):
        dirs.sort()
        for file in sorted(files):
            if file == target and not file.endswith(".dbg.json"):
                return load_artifact(Path(root) / file)

    raise ArtifactError(
        f"Contract artifact for {contract_name} not found in {artifacts_dir}")

# =============================================================================
# FILE: sale_harness/config.py
"""
Harness Configuration

Loads the YAML run configuration, layers `.env` / environment overrides
on top and exposes the result as a single dataclass.

Environment overrides:
- PRIVATE_KEY                  deployer key (defaults to Anvil account #0)
- HARNESS_CONTRACTS_DIR        Hardhat project directory
- HARNESS_ANVIL_IMAGE          chain simulator image
- HARNESS_POSTGRES_IMAGE       database image
- HARNESS_RPC_TIMEOUT          per-test wait budget in seconds
- HARNESS_RECEIPT_TIMEOUT      per-deployment confirmation wait in seconds
- HARNESS_PRINT_CONTAINER_LOGS dump container logs in scenarios (0/1)
"""
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_CONFIG_PATH = PROJECT_ROOT / "configs" / "harness.yaml"

# Anvil / Hardhat default account #0, pre-funded on every local devnet
ANVIL_DEFAULT_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
ANVIL_CHAIN_ID = 31337


@dataclass
class HarnessConfig:
    """Configuration for one harness run"""

    # Hardhat project
    contracts_dir: Path = PROJECT_ROOT / "solidity"
    artifacts_subdir: str = "artifacts"
    install_command: List[str] = field(default_factory=lambda: ["npm", "install"])
    compile_command: List[str] = field(default_factory=lambda: ["npx", "hardhat", "compile"])

    # Chain simulator container
    anvil_image: str = "ghcr.io/foundry-rs/foundry:latest"
    anvil_command: List[str] = field(
        default_factory=lambda: ["anvil --host 0.0.0.0 --port 8545"]
    )
    anvil_port: int = 8545
    anvil_alias: str = "anvil"
    anvil_ready_log: str = "Listening on"

    # Database container
    postgres_image: str = "postgres:16-alpine"
    postgres_user: str = "harness"
    postgres_password: str = "harness"
    postgres_db: str = "token_sale"
    postgres_alias: str = "postgres"

    # Chain
    chain_id: int = ANVIL_CHAIN_ID
    private_key: str = ANVIL_DEFAULT_KEY
    gas_limit: int = 3_000_000

    # Timeouts (seconds)
    startup_timeout: float = 60.0
    rpc_timeout: float = 10.0
    receipt_timeout: float = 30.0

    # Output
    deployments_dir: Path = PROJECT_ROOT / "deployments"
    print_container_logs: bool = False

    @property
    def artifacts_dir(self) -> Path:
        return Path(self.contracts_dir) / self.artifacts_subdir

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict for logging; the private key is masked"""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == 'private_key':
                value = value[:6] + "..." if value else value
            elif isinstance(value, Path):
                value = str(value)
            result[f.name] = value
        return result


_ENV_OVERRIDES = {
    'PRIVATE_KEY': ('private_key', str),
    'HARNESS_CONTRACTS_DIR': ('contracts_dir', Path),
    'HARNESS_ANVIL_IMAGE': ('anvil_image', str),
    'HARNESS_POSTGRES_IMAGE': ('postgres_image', str),
    'HARNESS_RPC_TIMEOUT': ('rpc_timeout', float),
    'HARNESS_RECEIPT_TIMEOUT': ('receipt_timeout', float),
    'HARNESS_PRINT_CONTAINER_LOGS': ('print_container_logs', lambda v: v == "1"),
}

_PATH_FIELDS = {'contracts_dir', 'deployments_dir'}


def _resolve_path(value: Any, base: Path) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = base / path
    return path


def load_config(config_path: Optional[Path] = None, env: Optional[Dict[str, str]] = None) -> HarnessConfig:
    """
    Load harness configuration

    Relative paths in the YAML file are resolved against the project root.
    Unknown keys are rejected so typos fail loudly.
    """
    load_dotenv()
    env = os.environ if env is None else env

    raw: Dict[str, Any] = {}
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if config_path or path.exists():
        with open(path, 'r') as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(HarnessConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {sorted(unknown)}")

    for name in _PATH_FIELDS & set(raw):
        raw[name] = _resolve_path(raw[name], PROJECT_ROOT)

    for var, (name, convert) in _ENV_OVERRIDES.items():
        if env.get(var):
            raw[name] = convert(env[var])

    return HarnessConfig(**raw)

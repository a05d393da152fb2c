"""
Shared fixtures.

Unit tests use the artifact tree written by ``artifacts_dir``. The
integration fixtures start real containers once per session and skip when
Docker or npm is unavailable.
"""
import json
import shutil
from pathlib import Path

import pytest

from sale_harness.config import load_config
from sale_harness.modules.bootstrap import EnvironmentBootstrapper
from sale_harness.modules.containers import ContainerOrchestrator
from sale_harness.utils.deadline import Deadline

# init code that deploys a one-byte STOP runtime; ignores constructor args
TINY_BYTECODE = "0x6001600c60003960016000f300"

TOKEN_ABI = [
    {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"},
    {
        "type": "function", "name": "transfer", "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"}
        ],
        "outputs": [{"name": "", "type": "bool"}]
    },
    {
        "type": "function", "name": "balanceOf", "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}]
    }
]

SALE_ABI = [
    {
        "type": "constructor", "stateMutability": "nonpayable",
        "inputs": [
            {"name": "usdt_", "type": "address"},
            {"name": "kaatinga_", "type": "address"}
        ]
    },
    {
        "type": "function", "name": "configureSale", "stateMutability": "nonpayable",
        "inputs": [
            {"name": "rate_", "type": "uint256"},
            {"name": "hardCap_", "type": "uint256"},
            {"name": "saleStart_", "type": "uint256"},
            {"name": "saleEnd_", "type": "uint256"}
        ],
        "outputs": []
    },
    {
        "type": "function", "name": "buyTokens", "stateMutability": "nonpayable",
        "inputs": [{"name": "usdtAmount", "type": "uint256"}],
        "outputs": []
    }
]


def write_artifact(artifacts_dir: Path, source: str, name: str, abi, bytecode=TINY_BYTECODE) -> Path:
    """Write a Hardhat-shaped artifact plus its debug sidecar"""
    folder = artifacts_dir / "contracts" / f"{source}.sol"
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{name}.json"
    path.write_text(json.dumps({
        "_format": "hh-sol-artifact-1",
        "contractName": name,
        "sourceName": f"contracts/{source}.sol",
        "abi": abi,
        "bytecode": bytecode,
        "deployedBytecode": "0x00",
    }))
    (folder / f"{name}.dbg.json").write_text(json.dumps({"_format": "hh-sol-dbg-1"}))
    return path


@pytest.fixture
def artifacts_dir(tmp_path):
    """Artifact tree with KaatingaToken and TokenSale"""
    root = tmp_path / "artifacts"
    write_artifact(root, "KaatingaToken", "KaatingaToken", TOKEN_ABI)
    write_artifact(root, "TokenSale", "TokenSale", SALE_ABI)
    return root


# =============================================================================
# Integration fixtures
# =============================================================================


def _docker_available() -> bool:
    try:
        import docker
        client = docker.from_env()
        try:
            return client.ping()
        finally:
            client.close()
    except Exception:
        return False


@pytest.fixture(scope="session")
def harness_config():
    return load_config()


@pytest.fixture(scope="session")
def compiled_contracts(harness_config):
    """Install + compile the Hardhat project once per session"""
    if shutil.which("npm") is None:
        pytest.skip("npm is not installed")
    EnvironmentBootstrapper.from_config(harness_config).prepare()
    return harness_config.artifacts_dir


@pytest.fixture(scope="session")
def orchestrator(harness_config):
    """Suite-scoped containers, torn down even if tests fail"""
    if not _docker_available():
        pytest.skip("Docker daemon is not reachable")

    env = ContainerOrchestrator(harness_config)
    env.start()
    try:
        yield env
    finally:
        env.stop()


@pytest.fixture
def deadline(harness_config):
    """Per-test wait budget, cancelled when the test ends"""
    budget = Deadline(harness_config.rpc_timeout)
    yield budget
    budget.cancel()

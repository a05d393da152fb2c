"""
Token-Sale Integration Harness.

This package provides:
- Devnet (Anvil) and Postgres containers for integration tests
- Hardhat bootstrap and contract deployment from compiled artifacts
- JSON-RPC and purchase-flow scenarios against the deployed system
"""

# Import core modules for easy access
from .modules import (
    EnvironmentBootstrapper,
    ContainerOrchestrator,
    Endpoint,
    DeploymentArtifact,
    ContractDeployer,
    RPCClient,
    PurchaseFlow,
    HarnessSession
)
from .config import HarnessConfig, load_config
from .utils import HarnessLogger, Deadline

__all__ = [
    # Core modules
    'EnvironmentBootstrapper',
    'ContainerOrchestrator',
    'Endpoint',
    'DeploymentArtifact',
    'ContractDeployer',
    'RPCClient',
    'PurchaseFlow',
    'HarnessSession',
    'HarnessConfig',
    'load_config',
    'HarnessLogger',
    'Deadline'
]

__version__ = "1.0.0"

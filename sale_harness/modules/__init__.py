"""
Modules package for the token-sale integration harness.

This package contains core modules for:
- Bootstrap: npm install + hardhat compile of the contract project
- Containers: chain simulator and database containers on a shared network
- Artifacts: Hardhat artifact loading and validation
- Deployer: ordered contract deployment with confirmation waits
- RPC: raw JSON-RPC client with per-test deadlines
- Scenarios: endpoint checks and purchase-flow assembly
- Session: the full sequential pipeline
"""

from .bootstrap import EnvironmentBootstrapper
from .containers import ContainerOrchestrator, Endpoint
from .artifacts import DeploymentArtifact, load_artifact, find_artifact
from .deployer import ContractDeployer, DeployedContract, SystemDeployment
from .rpc import RPCClient, RPCResponse
from .scenarios import PurchaseFlow, PurchasePlan, check_rpc_endpoint, check_database_ready
from .session import HarnessSession, SessionReport

__all__ = [
    'EnvironmentBootstrapper',
    'ContainerOrchestrator',
    'Endpoint',
    'DeploymentArtifact',
    'load_artifact',
    'find_artifact',
    'ContractDeployer',
    'DeployedContract',
    'SystemDeployment',
    'RPCClient',
    'RPCResponse',
    'PurchaseFlow',
    'PurchasePlan',
    'check_rpc_endpoint',
    'check_database_ready',
    'HarnessSession',
    'SessionReport'
]

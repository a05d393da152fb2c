# =============================================================================
# FILE: sale_harness/modules/deployer.py
"""
Contract Deployer - Deploys the token-sale system from Hardhat artifacts

Deployment order is fixed because TokenSale's constructor takes the other
two addresses:
1. KaatingaToken  (sale token)
2. MockUSDT       (stable asset; same artifact as the token)
3. TokenSale(usdt, token)

Each deployment is signed with the fixed devnet account and blocks until
mined before the next one starts.
"""
import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from eth_account import Account
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from .artifacts import DeploymentArtifact, artifact_path, load_artifact
from ..utils.deadline import Deadline
from ..utils.errors import ArtifactError, DeadlineExceeded, DeploymentError
from ..utils.validation import is_zero_address

logger = logging.getLogger(__name__)

# label -> (artifact source file, contract name)
TOKEN_SALE_CONTRACTS = {
    'KaatingaToken': ('KaatingaToken', 'KaatingaToken'),
    'MockUSDT': ('KaatingaToken', 'KaatingaToken'),
    'TokenSale': ('TokenSale', 'TokenSale'),
}


@dataclass
class DeployedContract:
    """Deployment record for one contract instance"""
    label: str
    artifact_name: str
    address: str
    abi: List[Dict[str, Any]]
    tx_hash: str
    block_number: int


@dataclass
class SystemDeployment:
    """Addresses of the full token-sale system"""
    token: DeployedContract
    usdt: DeployedContract
    sale: DeployedContract

    def addresses(self) -> Dict[str, str]:
        return {
            'KaatingaToken': self.token.address,
            'MockUSDT': self.usdt.address,
            'TokenSale': self.sale.address,
        }


class ContractDeployer:
    """Deploy and record token-sale contracts"""

    def __init__(
        self,
        w3: Web3,
        account,
        chain_id: int,
        artifacts_dir: Path,
        gas_limit: int = 3_000_000,
        receipt_timeout: float = 30.0,
        deadline: Optional[Deadline] = None
    ):
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id
        self.artifacts_dir = Path(artifacts_dir)
        self.gas_limit = gas_limit
        self.receipt_timeout = receipt_timeout
        self.deadline = deadline
        self.deployed_contracts: Dict[str, DeployedContract] = {}
        self.deployment_order: List[str] = []

    @classmethod
    def from_config(cls, config, rpc_url: str, deadline: Optional[Deadline] = None) -> "ContractDeployer":
        """Connect to ``rpc_url`` and sign with the configured devnet key"""
        w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={'timeout': config.rpc_timeout}))
        account = Account.from_key(config.private_key)
        return cls(
            w3=w3,
            account=account,
            chain_id=config.chain_id,
            artifacts_dir=config.artifacts_dir,
            gas_limit=config.gas_limit,
            receipt_timeout=config.receipt_timeout,
            deadline=deadline
        )

    def load_contract(self, label: str) -> DeploymentArtifact:
        """Load the artifact backing ``label``"""
        try:
            source, name = TOKEN_SALE_CONTRACTS[label]
        except KeyError:
            raise ArtifactError(f"Unknown contract label: {label}") from None
        return load_artifact(artifact_path(self.artifacts_dir, source, name))

    def _receipt_timeout(self) -> float:
        if self.deadline is None:
            return self.receipt_timeout
        return self.deadline.timeout_for(self.receipt_timeout)

    def deploy_artifact(
        self,
        label: str,
        artifact: DeploymentArtifact,
        constructor_args: Sequence[Any] = ()
    ) -> DeployedContract:
        """Submit a deployment for an already-parsed artifact and wait for it"""
        logger.info(f"Deploying {label} ({artifact.contract_name})...")

        # An expired or cancelled deadline must stop the run before anything is sent
        self._receipt_timeout()

        Contract = self.w3.eth.contract(
            abi=artifact.abi_list,
            bytecode=artifact.bytecode_hex
        )

        try:
            construct_txn = Contract.constructor(*constructor_args).build_transaction({
                'from': self.account.address,
                'nonce': self.w3.eth.get_transaction_count(self.account.address),
                'gas': self.gas_limit,
                'gasPrice': self.w3.eth.gas_price,
                'chainId': self.chain_id
            })
            signed_txn = self.account.sign_transaction(construct_txn)
            tx_hash = self.w3.eth.send_raw_transaction(signed_txn.raw_transaction)
        except (TypeError, ValueError, Web3Exception) as e:
            raise DeploymentError(f"failed to deploy {label}: {e}") from e

        timeout = self._receipt_timeout()
        try:
            tx_receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TimeExhausted as e:
            raise DeadlineExceeded(
                f"{label} deployment not mined within {timeout:.1f}s") from e

        if tx_receipt['status'] != 1:
            raise DeploymentError(f"{label} deployment reverted (tx {Web3.to_hex(tx_hash)})")

        contract_address = tx_receipt['contractAddress']
        if is_zero_address(contract_address):
            raise DeploymentError(f"{label} deployment returned zero address")

        deployed = DeployedContract(
            label=label,
            artifact_name=artifact.contract_name,
            address=contract_address,
            abi=artifact.abi_list,
            tx_hash=Web3.to_hex(tx_hash),
            block_number=tx_receipt['blockNumber']
        )
        self.deployed_contracts[label] = deployed
        self.deployment_order.append(label)
        logger.info(f"{label} deployed at: {contract_address}")
        return deployed

    def deploy_contract(self, label: str, constructor_args: Sequence[Any] = ()) -> DeployedContract:
        """Deploy a single contract; the artifact is parsed before any RPC call"""
        artifact = self.load_contract(label)
        return self.deploy_artifact(label, artifact, constructor_args)

    def deploy_system(self) -> SystemDeployment:
        """Deploy token, mock stable asset and sale contract, in that order"""
        logger.info("Starting token-sale system deployment")

        token = self.deploy_contract('KaatingaToken')
        usdt = self.deploy_contract('MockUSDT')
        sale = self.deploy_contract('TokenSale', [usdt.address, token.address])

        logger.info("Contracts deployed:")
        logger.info(f"  KaatingaToken: {token.address}")
        logger.info(f"  MockUSDT: {usdt.address}")
        logger.info(f"  TokenSale: {sale.address}")

        return SystemDeployment(token=token, usdt=usdt, sale=sale)

    def save_deployment(self, output_dir: Path, network: str = "anvil") -> Path:
        """Save deployment information"""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        deployment_file = output_dir / f"{network}_latest.json"
        deployment_data = {
            'network': network,
            'chain_id': self.chain_id,
            'deployer': self.account.address,
            'order': self.deployment_order,
            'contracts': {
                label: asdict(record) for label, record in self.deployed_contracts.items()
            }
        }

        with open(deployment_file, 'w') as f:
            json.dump(deployment_data, f, indent=2)

        logger.info(f"Deployment saved to: {deployment_file}")
        return deployment_file

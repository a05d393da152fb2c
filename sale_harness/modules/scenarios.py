"""
Scenarios run against a freshly deployed devnet.

- check_rpc_endpoint: raw eth_blockNumber round trip
- check_database_ready: pg_isready inside the database container
- PurchaseFlow: assembles the sale-configuration transaction (not submitted)
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from web3 import Web3

from .deployer import DeployedContract
from .rpc import RPCClient, RPCResponse
from ..utils.errors import ContainerError, RPCError

logger = logging.getLogger(__name__)

STABLE_DECIMALS = 6
TOKEN_DECIMALS = 18

# 1 USDT = 10 KAATINGA
SALE_RATE = 10
SALE_HARD_CAP = 100_000 * 10 ** TOKEN_DECIMALS
STABLE_FUNDING = 1_000 * 10 ** STABLE_DECIMALS

CONFIGURE_GAS = 800_000
CONFIGURE_GAS_PRICE = 10 ** 9


def check_rpc_endpoint(client: RPCClient) -> RPCResponse:
    """Issue eth_blockNumber and require HTTP 200 with a hex ``result`` field"""
    response = client.call('eth_blockNumber')
    if response.status_code != 200:
        raise RPCError(
            f"chain simulator answered HTTP {response.status_code}", response.status_code)
    if not response.has_result:
        raise RPCError(f"eth_blockNumber response has no result: {response.raw}", 200)
    response.quantity()
    logger.info(f"RPC Response: {response.raw}")
    return response


def check_database_ready(orchestrator) -> str:
    """Run pg_isready inside the database container"""
    cfg = orchestrator.config
    exit_code, output = orchestrator.exec(
        'postgres', ['pg_isready', '-U', cfg.postgres_user, '-d', cfg.postgres_db])
    if exit_code != 0:
        raise ContainerError(f"pg_isready exited with {exit_code}: {output}")
    logger.info(f"Database ready: {output.strip()}")
    return output


@dataclass
class PurchasePlan:
    """Calldata and signed transaction for the purchase-flow setup"""
    funding_calldata: str
    configure_calldata: str
    configure_tx: Dict[str, Any]
    signed_configure_tx: bytes = field(repr=False)
    sale_start: int
    sale_end: int
    submitted: bool = False


class PurchaseFlow:
    """
    Builds the token-sale purchase setup without broadcasting it

    The stable asset is funded with a plain ERC-20 transfer to the sale
    contract (no mint), then the sale is configured. Neither transaction
    is sent.
    """

    def __init__(self, w3: Web3, account, chain_id: int):
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id

    def build(
        self,
        token: DeployedContract,
        usdt: DeployedContract,
        sale: DeployedContract,
        now: Optional[int] = None
    ) -> PurchasePlan:
        now = int(time.time()) if now is None else now
        sale_address = Web3.to_checksum_address(sale.address)

        usdt_contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(usdt.address), abi=usdt.abi)
        funding_calldata = usdt_contract.encode_abi(
            'transfer', args=[sale_address, STABLE_FUNDING])

        sale_contract = self.w3.eth.contract(address=sale_address, abi=sale.abi)
        sale_start = now - 10
        sale_end = now + 1000
        configure_calldata = sale_contract.encode_abi(
            'configureSale', args=[SALE_RATE, SALE_HARD_CAP, sale_start, sale_end])

        configure_tx = {
            'nonce': 0,
            'to': sale_address,
            'value': 0,
            'gas': CONFIGURE_GAS,
            'gasPrice': CONFIGURE_GAS_PRICE,
            'data': configure_calldata,
            'chainId': self.chain_id
        }
        signed = self.account.sign_transaction(configure_tx)

        logger.info(
            f"Assembled configureSale for {sale_address} "
            f"(token {token.address}, window {sale_start}-{sale_end}); not submitted")

        return PurchasePlan(
            funding_calldata=funding_calldata,
            configure_calldata=configure_calldata,
            configure_tx=configure_tx,
            signed_configure_tx=bytes(signed.raw_transaction),
            sale_start=sale_start,
            sale_end=sale_end
        )

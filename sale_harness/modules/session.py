# =============================================================================
# FILE: sale_harness/modules/session.py
"""
Harness Session - Runs the whole pipeline once, strictly in sequence

bootstrap -> start containers -> compile -> deploy -> scenarios -> teardown

Teardown always runs, whatever failed before it.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .bootstrap import EnvironmentBootstrapper
from .containers import ANVIL, ContainerOrchestrator
from .deployer import ContractDeployer, SystemDeployment
from .rpc import RPCClient
from .scenarios import PurchaseFlow, PurchasePlan, check_database_ready, check_rpc_endpoint
from ..utils.deadline import Deadline
from ..utils.logging_utils import HarnessLogger

logger = logging.getLogger(__name__)


@dataclass
class SessionReport:
    """Outcome of a harness session"""
    anvil_url: Optional[str] = None
    block_number: Optional[int] = None
    deployment: Optional[SystemDeployment] = None
    purchase_plan: Optional[PurchasePlan] = None
    deployment_file: Optional[str] = None
    steps: List[str] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        return {
            'anvil_url': self.anvil_url,
            'block_number': self.block_number,
            'contracts': self.deployment.addresses() if self.deployment else {},
            'deployment_file': self.deployment_file,
            'steps': list(self.steps),
        }


class HarnessSession:
    """Sequential end-to-end run over a fresh set of containers"""

    def __init__(self, config, orchestrator: Optional[ContainerOrchestrator] = None,
                 bootstrapper: Optional[EnvironmentBootstrapper] = None):
        self.config = config
        self.orchestrator = orchestrator or ContainerOrchestrator(config)
        self.bootstrapper = bootstrapper or EnvironmentBootstrapper.from_config(config)
        self.tracker = HarnessLogger(config=config.to_dict())

    def _step(self, report: SessionReport, name: str) -> None:
        report.steps.append(name)
        self.tracker.log_milestone(name)

    def run(self, save_deployment: bool = True) -> SessionReport:
        report = SessionReport()
        self.tracker.log_run_start()

        self._step(report, "bootstrap")
        self.bootstrapper.ensure_dependencies()

        try:
            self._step(report, "start containers")
            self.orchestrator.start()
            endpoint = self.orchestrator.anvil_endpoint
            report.anvil_url = endpoint.url

            self._step(report, "compile")
            self.bootstrapper.compile_contracts()

            self._step(report, "deploy")
            deployer = ContractDeployer.from_config(self.config, endpoint.url)
            report.deployment = deployer.deploy_system()
            if save_deployment:
                report.deployment_file = str(
                    deployer.save_deployment(self.config.deployments_dir))

            self._step(report, "scenarios")
            self._run_scenarios(report, endpoint.url, deployer)
        except BaseException:
            # Keep the original failure primary; teardown errors are only logged
            self._step(report, "teardown")
            self.orchestrator.stop(raise_errors=False)
            raise

        self._step(report, "teardown")
        self.orchestrator.stop()

        self.tracker.log_run_end(report.summary())
        return report

    def _run_scenarios(self, report: SessionReport, url: str, deployer: ContractDeployer) -> None:
        if self.config.print_container_logs:
            self.orchestrator.print_logs(ANVIL)

        deadline = Deadline(self.config.rpc_timeout)
        try:
            with RPCClient(url, timeout=self.config.rpc_timeout, deadline=deadline) as client:
                response = check_rpc_endpoint(client)
                report.block_number = response.quantity()
        finally:
            deadline.cancel()

        check_database_ready(self.orchestrator)

        flow = PurchaseFlow(deployer.w3, deployer.account, self.config.chain_id)
        d = report.deployment
        report.purchase_plan = flow.build(d.token, d.usdt, d.sale)

# =============================================================================
# FILE: sale_harness/modules/bootstrap.py
"""
Environment Bootstrapper - Prepares the Hardhat project before any test runs

Steps:
- Install npm dependencies when node_modules/hardhat is missing
- Compile contracts with `npx hardhat compile`

Both steps run as external processes. Any failure is fatal: later steps
depend on the generated artifacts.
"""
import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from ..utils.errors import BootstrapError

logger = logging.getLogger(__name__)


class EnvironmentBootstrapper:
    """
    Ensures contract-project dependencies are installed and contracts compiled
    """

    def __init__(
        self,
        contracts_dir: Path,
        install_command: Optional[Sequence[str]] = None,
        compile_command: Optional[Sequence[str]] = None
    ):
        self.contracts_dir = Path(contracts_dir).resolve()
        self.install_command = list(install_command or ["npm", "install"])
        self.compile_command = list(compile_command or ["npx", "hardhat", "compile"])

    @classmethod
    def from_config(cls, config) -> "EnvironmentBootstrapper":
        return cls(
            contracts_dir=config.contracts_dir,
            install_command=config.install_command,
            compile_command=config.compile_command
        )

    def dependencies_installed(self) -> bool:
        return (self.contracts_dir / "node_modules" / "hardhat").exists()

    def _run(self, command: List[str], step: str) -> str:
        if not self.contracts_dir.is_dir():
            raise BootstrapError(
                f"{step}: contracts directory not found: {self.contracts_dir}")

        logger.info(f"{step}: running '{' '.join(command)}' in {self.contracts_dir}")
        try:
            completed = subprocess.run(
                command,
                cwd=self.contracts_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False
            )
        except FileNotFoundError as e:
            raise BootstrapError(f"{step}: executable not found: {command[0]}") from e

        output = completed.stdout or ""
        logger.info(f"{step} output: {output}")
        if completed.returncode != 0:
            raise BootstrapError(
                f"{step} failed with exit code {completed.returncode}: {output.strip()[-500:]}")
        return output

    def ensure_dependencies(self) -> bool:
        """
        Install npm dependencies if hardhat is not present

        Returns:
            True if an install was performed
        """
        if self.dependencies_installed():
            logger.info("node_modules/hardhat found, skipping npm install")
            return False

        logger.info("node_modules/hardhat not found, running npm install...")
        self._run(self.install_command, "npm install")
        return True

    def compile_contracts(self) -> str:
        """Compile contracts; returns the compiler output"""
        logger.info(f"compile_contracts: using contracts dir: {self.contracts_dir}")
        output = self._run(self.compile_command, "Compilation")
        logger.info("Contracts compiled successfully")
        return output

    def prepare(self) -> None:
        """Install dependencies (if needed) and compile"""
        self.ensure_dependencies()
        self.compile_contracts()

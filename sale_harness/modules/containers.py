# =============================================================================
# FILE: sale_harness/modules/containers.py
"""
Container Orchestrator - Chain simulator + database on a shared network

Lifecycle:
1. start()  - create network, start Anvil, wait for its port, start Postgres
2. tests dial the resolved host endpoints
3. stop()   - terminate every started container and remove the network

Container lifecycle itself is delegated to testcontainers. There is no
retry policy: a single failed readiness wait aborts the run.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from testcontainers.core.container import DockerContainer
from testcontainers.core.network import Network
from testcontainers.core.wait_strategies import (
    CompositeWaitStrategy,
    LogMessageWaitStrategy,
    PortWaitStrategy,
)
from testcontainers.community.postgres import PostgresContainer

from ..utils.errors import ContainerError

logger = logging.getLogger(__name__)

ANVIL = "anvil"
POSTGRES = "postgres"


@dataclass(frozen=True)
class Endpoint:
    """Host-visible address of a container port"""
    host: str
    port: int
    scheme: str = "http"

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def __str__(self) -> str:
        return self.url


class ContainerOrchestrator:
    """
    Starts and tears down the suite-scoped containers

    Usage:
        with ContainerOrchestrator(config) as env:
            client = RPCClient(env.anvil_endpoint.url)
    """

    def __init__(self, config):
        self.config = config
        self.network: Optional[Network] = None
        self.containers: Dict[str, DockerContainer] = {}
        self._endpoints: Dict[str, Endpoint] = {}

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def start(self) -> "ContainerOrchestrator":
        """Create network and start both containers; stops everything on failure"""
        try:
            self._create_network()
            self._start_anvil()
            self._start_postgres()
        except Exception:
            self.stop(raise_errors=False)
            raise
        return self

    def _create_network(self) -> None:
        try:
            self.network = Network().create()
        except Exception as e:
            raise ContainerError(f"failed to create network: {e}") from e
        logger.info(f"Created network {self.network.name}")

    def _anvil_wait_strategy(self) -> CompositeWaitStrategy:
        """Ready once the listen banner is logged and the mapped port accepts"""
        cfg = self.config
        return CompositeWaitStrategy(
            LogMessageWaitStrategy(cfg.anvil_ready_log),
            PortWaitStrategy(cfg.anvil_port),
        ).with_startup_timeout(cfg.startup_timeout)

    def _start_anvil(self) -> None:
        cfg = self.config
        container = (
            DockerContainer(cfg.anvil_image)
            .with_command(cfg.anvil_command)
            .with_exposed_ports(cfg.anvil_port)
            .with_network(self.network)
            .with_network_aliases(cfg.anvil_alias)
            .waiting_for(self._anvil_wait_strategy())
        )
        self._start(ANVIL, container)

        try:
            host = container.get_container_host_ip()
            port = int(container.get_exposed_port(cfg.anvil_port))
        except Exception as e:
            raise ContainerError(f"{ANVIL} port mapping unavailable: {e}") from e

        self._endpoints[ANVIL] = Endpoint(host, port)
        logger.info(f"Anvil endpoint: {self._endpoints[ANVIL].url}")

    def _start_postgres(self) -> None:
        cfg = self.config
        container = (
            PostgresContainer(
                cfg.postgres_image,
                username=cfg.postgres_user,
                password=cfg.postgres_password,
                dbname=cfg.postgres_db,
                driver=None
            )
            .with_network(self.network)
            .with_network_aliases(cfg.postgres_alias)
        )
        # PostgresContainer.start() blocks until the server accepts connections
        self._start(POSTGRES, container)

        try:
            host = container.get_container_host_ip()
            port = int(container.get_exposed_port(5432))
        except Exception as e:
            raise ContainerError(f"{POSTGRES} port mapping unavailable: {e}") from e

        self._endpoints[POSTGRES] = Endpoint(host, port, scheme="postgresql")
        logger.info(f"Postgres endpoint: {host}:{port}")

    def _start(self, name: str, container: DockerContainer) -> None:
        # Register before starting so a half-started container is still stopped
        self.containers[name] = container
        try:
            container.start()
        except TimeoutError as e:
            raise ContainerError(f"{name} did not become ready: {e}") from e
        except Exception as e:
            raise ContainerError(f"failed to start {name} container: {e}") from e

    # ------------------------------------------------------------------
    # Resolved endpoints and inspection
    # ------------------------------------------------------------------

    def endpoint(self, name: str) -> Endpoint:
        try:
            return self._endpoints[name]
        except KeyError:
            raise ContainerError(
                f"{name} endpoint is not resolved; start() the orchestrator first") from None

    @property
    def anvil_endpoint(self) -> Endpoint:
        return self.endpoint(ANVIL)

    @property
    def postgres_endpoint(self) -> Endpoint:
        return self.endpoint(POSTGRES)

    @property
    def postgres_dsn(self) -> str:
        ep = self.postgres_endpoint
        cfg = self.config
        return (f"postgresql://{cfg.postgres_user}:{cfg.postgres_password}"
                f"@{ep.host}:{ep.port}/{cfg.postgres_db}")

    def container(self, name: str) -> DockerContainer:
        try:
            return self.containers[name]
        except KeyError:
            raise ContainerError(f"{name} container is not running") from None

    def container_id(self, name: str) -> str:
        return self.container(name).get_wrapped_container().id

    def container_ip(self, name: str) -> str:
        """Address of the container on the shared network"""
        wrapped = self.container(name).get_wrapped_container()
        wrapped.reload()
        networks = wrapped.attrs.get('NetworkSettings', {}).get('Networks', {})
        info = networks.get(self.network.name) if self.network else None
        if not info or not info.get('IPAddress'):
            raise ContainerError(f"{name} has no address on network {self.network_name}")
        return info['IPAddress']

    @property
    def network_name(self) -> Optional[str]:
        return self.network.name if self.network else None

    def container_logs(self, name: str) -> str:
        stdout, stderr = self.container(name).get_logs()
        return (stdout or b"").decode(errors="replace") + (stderr or b"").decode(errors="replace")

    def print_logs(self, name: str) -> None:
        try:
            logs = self.container_logs(name)
        except Exception as e:
            logger.error(f"failed to get {name} container logs: {e}")
            return
        logger.info(f"{name} container logs:\n{logs}")

    def exec(self, name: str, command):
        """Run ``command`` inside a container; returns (exit_code, output)"""
        result = self.container(name).exec(command)
        output = result.output
        if isinstance(output, bytes):
            output = output.decode(errors="replace")
        return result.exit_code, output

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def stop(self, raise_errors: bool = True) -> None:
        """
        Terminate all started containers, then remove the network

        Every step is attempted even if an earlier one fails.
        """
        failures = []
        for name in reversed(list(self.containers)):
            container = self.containers.pop(name)
            try:
                container.stop()
                logger.info(f"Stopped {name} container")
            except Exception as e:
                logger.error(f"failed to stop {name} container: {e}")
                failures.append(f"{name}: {e}")

        if self.network is not None:
            network, self.network = self.network, None
            try:
                network.remove()
                logger.info(f"Removed network {network.name}")
            except Exception as e:
                logger.error(f"failed to remove network {network.name}: {e}")
                failures.append(f"network: {e}")

        self._endpoints.clear()

        if failures and raise_errors:
            raise ContainerError(f"teardown incomplete: {'; '.join(failures)}")

    def __enter__(self) -> "ContainerOrchestrator":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.stop()

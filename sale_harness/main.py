#!/usr/bin/env python3
# =============================================================================
# FILE: sale_harness/main.py
"""
Main CLI Entry Point

Provides command-line interface for:
- Installing and compiling the contract project
- Starting the devnet containers for manual use
- Deploying the token-sale system to an existing node
- Running the full harness session
"""
import sys
from pathlib import Path

import click
from web3 import Web3

from .config import ANVIL_DEFAULT_KEY, load_config
from .modules.bootstrap import EnvironmentBootstrapper
from .modules.containers import ContainerOrchestrator
from .modules.deployer import ContractDeployer
from .modules.session import HarnessSession
from .utils.errors import HarnessError
from .utils.logging_utils import setup_logging


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--config', '-c', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              default=None, help='Path to harness config file')
@click.option('--log-file', default='harness.log', help='Log file ("" disables)')
@click.pass_context
def cli(ctx, verbose, config_path, log_file):
    """Token-sale integration harness"""
    setup_logging(verbose, log_file or None)
    ctx.obj = load_config(config_path)


@cli.command()
@click.pass_obj
def bootstrap(config):
    """Install npm dependencies (if missing) and compile contracts"""
    try:
        EnvironmentBootstrapper.from_config(config).prepare()
    except HarnessError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    click.echo("✅ Contracts compiled")


@cli.command()
@click.pass_obj
def up(config):
    """Start the devnet containers until Enter is pressed"""
    orchestrator = ContainerOrchestrator(config)
    try:
        orchestrator.start()
    except HarnessError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    try:
        click.echo(f"🌐 Anvil:    {orchestrator.anvil_endpoint.url}")
        click.echo(f"🗄  Postgres: {orchestrator.postgres_dsn}")
        click.echo(f"🔗 Network:  {orchestrator.network_name}")
        click.prompt("Press Enter to stop", default="", show_default=False)
    finally:
        orchestrator.stop()
        click.echo("🧹 Containers stopped")


@cli.command()
@click.option('--rpc-url', envvar='RPC_URL', default='http://127.0.0.1:8545', help='RPC URL')
@click.option('--private-key', envvar='PRIVATE_KEY', default=None, help='Deployer private key')
@click.option('--network', default='anvil', help='Network name for the deployment file')
@click.pass_obj
def deploy(config, rpc_url, private_key, network):
    """Deploy the token-sale contracts to an existing node"""
    if private_key:
        config.private_key = private_key
    elif config.private_key == ANVIL_DEFAULT_KEY:
        click.echo("🔧 Using default devnet private key")

    deployer = ContractDeployer.from_config(config, rpc_url)
    if not deployer.w3.is_connected():
        click.echo(f"❌ Failed to connect to {rpc_url}", err=True)
        sys.exit(1)

    balance = Web3.from_wei(deployer.w3.eth.get_balance(deployer.account.address), 'ether')
    click.echo(f"🔑 Deploying from: {deployer.account.address}")
    click.echo(f"💰 Balance: {balance:.4f} ETH")

    try:
        system = deployer.deploy_system()
    except HarnessError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo("\n📋 Deployment Summary:")
    for label, address in system.addresses().items():
        click.echo(f"  {label}: {address}")

    path = deployer.save_deployment(config.deployments_dir, network)
    click.echo(f"\n💾 Deployment saved to: {path}")


@cli.command()
@click.option('--no-save', is_flag=True, help='Do not write the deployment file')
@click.pass_obj
def run(config, no_save):
    """Run bootstrap, containers, deployment and scenarios once"""
    try:
        report = HarnessSession(config).run(save_deployment=not no_save)
    except HarnessError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"\n✅ Harness run complete (block {report.block_number})")
    for label, address in report.deployment.addresses().items():
        click.echo(f"  {label}: {address}")


def main():
    """Main CLI entry point"""
    cli()


if __name__ == '__main__':
    main()

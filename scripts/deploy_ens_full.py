#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.ens import EnsFullConfig, deploy_ens_full
from deployment.networks import active_chain_id
from deployment.options import (
    autosign_option,
    ens_dao_option,
    log_option,
    registry_filepath_option,
    verify_option,
)
from deployment.params import Deployer
from deployment.registry import DeploymentRegistry
from deployment.utils import check_plugins, default_registry_filepath


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@registry_filepath_option
@ens_dao_option
@log_option
@verify_option
@autosign_option
def cli(network, account, registry_filepath, ens_dao, log, verify, autosign):
    """
    Deploys a complete ENS stack through the ENSDeployer contract and,
    with --ens-dao, the ENS DAO contracts on top of it.

    ape run deploy_ens_full --network ethereum:local:test --account TEST::0 --ens-dao --log --autosign
    """
    check_plugins(verify=verify)

    registry = DeploymentRegistry(
        chain_id=active_chain_id(),
        filepath=registry_filepath or default_registry_filepath(),
    )
    deployer = Deployer(
        registry=registry, verify=verify, account=account, autosign=autosign, log=log
    )
    deploy_ens_full(deployer, EnsFullConfig(ens_dao=ens_dao, log=log))
    deployer.finalize()


if __name__ == "__main__":
    cli()

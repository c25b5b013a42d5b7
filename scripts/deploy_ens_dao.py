#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.ens import EnsDaoConfig, deploy_ens_dao
from deployment.networks import active_chain_id
from deployment.options import (
    autosign_option,
    base_uri_option,
    domain_name_option,
    ens_option,
    log_option,
    name_wrapper_option,
    owner_option,
    params_file_option,
    registry_filepath_option,
    reservation_duration_option,
    resolver_option,
    symbol_option,
    verify_option,
)
from deployment.params import Deployer
from deployment.registry import DeploymentRegistry
from deployment.utils import _load_yaml, check_plugins, default_registry_filepath, validate_config


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_file_option
@registry_filepath_option
@ens_option
@resolver_option
@name_wrapper_option
@domain_name_option
@symbol_option
@base_uri_option
@owner_option
@reservation_duration_option
@log_option
@verify_option
@autosign_option
def cli(
    network,
    account,
    params_file,
    registry_filepath,
    ens,
    resolver,
    name_wrapper,
    domain_name,
    symbol,
    base_uri,
    owner,
    reservation_duration,
    log,
    verify,
    autosign,
):
    """
    Deploys the ENS DAO Token, Label Booker and Registrar on top of an existing
    ENS Registry and Public Resolver, then grants the Registrar its roles.

    ape run deploy_ens_dao --network ethereum:mainnet:infura --params-file \
        deployment/constructor_params/ens-dao/mainnet.yml --verify
    """
    check_plugins(verify=verify)

    params = dict()
    if params_file:
        params_config = _load_yaml(params_file)
        registry_filepath = registry_filepath or validate_config(params_config)
        params = params_config.get("ens_dao") or dict()
    registry_filepath = registry_filepath or default_registry_filepath()

    config = EnsDaoConfig.from_params(
        params,
        ens=ens,
        resolver=resolver,
        name_wrapper=name_wrapper,
        domain_name=domain_name,
        symbol=symbol,
        base_uri=base_uri,
        owner=owner,
        reservation_duration=reservation_duration,
        log=log,
    )
    # fail on missing or malformed inputs before anything is sent
    config.resolve(deployer_address=account.address)

    registry = DeploymentRegistry(chain_id=active_chain_id(), filepath=registry_filepath)
    deployer = Deployer(
        registry=registry, verify=verify, account=account, autosign=autosign, log=log
    )
    deploy_ens_dao(deployer, config)
    deployer.finalize()


if __name__ == "__main__":
    cli()

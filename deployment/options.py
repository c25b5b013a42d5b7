from pathlib import Path

import click

from deployment.constants import (
    DAO_TOKEN_BASE_URI,
    DEFAULT_DAO_TOKEN_SYMBOL,
    DEFAULT_DOMAIN_NAME,
    DEFAULT_RESERVATION_DURATION,
)
from deployment.types import ChecksumAddress, Duration

params_file_option = click.option(
    "--params-file",
    "-p",
    help="YAML deployment parameters file.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)

registry_filepath_option = click.option(
    "--registry-filepath",
    "-f",
    help="Registry file recording deployments; in-memory only on local networks if omitted.",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)

ens_option = click.option(
    "--ens",
    help="ENS Registry address.",
    type=ChecksumAddress(),
    required=False,
)

resolver_option = click.option(
    "--resolver",
    help="Public Resolver address.",
    type=ChecksumAddress(),
    required=False,
)

name_wrapper_option = click.option(
    "--name-wrapper",
    help="Name Wrapper address; defaults to the zero address.",
    type=ChecksumAddress(),
    required=False,
)

domain_name_option = click.option(
    "--domain-name",
    "-n",
    help=f"Name of the .eth domain [default: {DEFAULT_DOMAIN_NAME}]; "
    "the NFT name will be '<name>.eth DAO'.",
    type=str,
    required=False,
)

symbol_option = click.option(
    "--symbol",
    "-s",
    help=f"Symbol of the DAO Token [default: {DEFAULT_DAO_TOKEN_SYMBOL}].",
    type=str,
    required=False,
)

base_uri_option = click.option(
    "--base-uri",
    help=f"Metadata base URI of the DAO Token [default: {DAO_TOKEN_BASE_URI}].",
    type=str,
    required=False,
)

owner_option = click.option(
    "--owner",
    "-o",
    help="Owner address of the contracts; defaults to the deployer account.",
    type=ChecksumAddress(),
    required=False,
)

reservation_duration_option = click.option(
    "--reservation-duration",
    "-r",
    help=f"Reservation duration of the ENS DAO Registrar, in seconds or with an "
    f"s/m/h/d/w suffix "
    f"[default: {DEFAULT_RESERVATION_DURATION}].",
    type=Duration(min_value=0),
    required=False,
)

ens_dao_option = click.option(
    "--ens-dao",
    help="Additionally deploy the ENS DAO contracts.",
    is_flag=True,
    default=False,
)

log_option = click.option(
    "--log",
    help="Log deployments.",
    is_flag=True,
    default=False,
)

verify_option = click.option(
    "--verify",
    help="Verify contracts on the block explorer.",
    is_flag=True,
    default=False,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without confirmation prompts.",
    is_flag=True,
    default=False,
)

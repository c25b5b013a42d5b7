"""
Deployment sequences of the ENS DAO contracts and of a full ENS stack.

Every deployment and transaction is sent and confirmed before the next one starts:
the registrar constructor needs the token and label booker addresses, and the
role wiring needs the registrar address.
"""

from collections import OrderedDict
from typing import Any, Dict, NamedTuple, Optional

from ape.contracts import ContractInstance
from ape.utils import ZERO_ADDRESS
from ens import ENS
from eth_utils import to_checksum_address
from hexbytes import HexBytes

from deployment.constants import (
    DAO_TOKEN_BASE_URI,
    DEFAULT_DAO_TOKEN_SYMBOL,
    DEFAULT_DOMAIN_NAME,
    DEFAULT_RESERVATION_DURATION,
    ENS_DAO_REGISTRAR,
    ENS_DAO_TOKEN,
    ENS_DEPLOYER,
    ENS_LABEL_BOOKER,
    ENS_STACK,
    ETH_TLD,
    FULL_STACK_DAO_TOKEN_SYMBOL,
    FULL_STACK_DOMAIN_NAME,
)
from deployment.exceptions import DeploymentConfigError, IncompleteSetupError
from deployment.params import Deployer
from deployment.types import parse_duration
from deployment.utils import get_contract_container


def name_node(domain_name: str) -> HexBytes:
    """Returns the ENS namehash of '<domain_name>.eth'."""
    return HexBytes(ENS.namehash(f"{domain_name}.{ETH_TLD}"))


class EnsDaoConfig(NamedTuple):
    """
    Inputs of the ENS DAO deployment.

    ens and resolver are the addresses of an already deployed ENS Registry and
    Public Resolver. name_wrapper defaults to the zero address (no Name Wrapper).
    owner defaults to the deployer account. reservation_duration is in seconds.
    """

    ens: Optional[str] = None
    resolver: Optional[str] = None
    name_wrapper: str = ZERO_ADDRESS
    domain_name: str = DEFAULT_DOMAIN_NAME
    symbol: str = DEFAULT_DAO_TOKEN_SYMBOL
    base_uri: str = DAO_TOKEN_BASE_URI
    owner: Optional[str] = None
    reservation_duration: int = DEFAULT_RESERVATION_DURATION
    log: bool = False

    @classmethod
    def from_params(cls, params: Optional[Dict[str, Any]] = None, **overrides) -> "EnsDaoConfig":
        """
        Builds a config from a params file section; overrides that are not None
        take precedence and unset values keep their defaults.
        """
        values = dict()
        for source in (params or dict(), overrides):
            values.update({key: value for key, value in source.items() if value is not None})

        unknown = sorted(set(values) - set(cls._fields))
        if unknown:
            raise DeploymentConfigError(f"Unknown ENS DAO parameter(s): {', '.join(unknown)}")
        return cls(**values)

    def resolve(self, deployer_address: str) -> "EnsDaoConfig":
        """Validates the inputs and returns a config with every default resolved."""
        missing = [name for name in ("ens", "resolver") if not getattr(self, name)]
        if missing:
            raise DeploymentConfigError(f"Missing required address(es): {', '.join(missing)}")

        addresses = dict()
        unresolved = self._replace(
            name_wrapper=self.name_wrapper or ZERO_ADDRESS,
            owner=self.owner or deployer_address,
        )
        for name in ("ens", "resolver", "name_wrapper", "owner"):
            value = getattr(unresolved, name)
            try:
                addresses[name] = to_checksum_address(value)
            except (TypeError, ValueError) as e:
                raise DeploymentConfigError(f"Invalid {name} address: {value}") from e

        if not self.domain_name:
            raise DeploymentConfigError("Domain name must not be empty")
        if not self.symbol:
            raise DeploymentConfigError("Token symbol must not be empty")

        try:
            reservation_duration = parse_duration(self.reservation_duration)
        except ValueError as e:
            raise DeploymentConfigError(
                f"Invalid reservation duration: {self.reservation_duration!r}"
            ) from e
        if reservation_duration < 0:
            raise DeploymentConfigError("Reservation duration must not be negative")

        return self._replace(reservation_duration=reservation_duration, **addresses)


class EnsFullConfig(NamedTuple):
    """Inputs of the full ENS stack deployment."""

    ens_dao: bool = False
    log: bool = False


class EnsDaoDeployment(NamedTuple):
    registrar: ContractInstance
    token: ContractInstance
    label_booker: ContractInstance

    def as_dict(self) -> Dict[str, ContractInstance]:
        return {
            "ensDaoRegistrar": self.registrar,
            "ensDaoToken": self.token,
            "ensDaoLabelBooker": self.label_booker,
        }


def deploy_ens_dao(deployer: Deployer, config: EnsDaoConfig) -> EnsDaoDeployment:
    """
    Deploys the ENS DAO Token, Label Booker and Registrar, then allows the
    Registrar to modify the Label Booker and to mint the Token.

    Raises IncompleteSetupError when a step fails after a contract was deployed.
    """
    config = config.resolve(deployer_address=deployer.address)
    node = name_node(config.domain_name)

    deployed = OrderedDict()
    step = f"deploy {ENS_DAO_TOKEN}"
    try:
        token = deployer.deploy(
            get_contract_container(ENS_DAO_TOKEN),
            f"{config.domain_name}.{ETH_TLD} DAO",
            config.symbol,
            config.base_uri,
            config.owner,
        )
        deployed[ENS_DAO_TOKEN] = token

        step = f"deploy {ENS_LABEL_BOOKER}"
        label_booker = deployer.deploy(
            get_contract_container(ENS_LABEL_BOOKER),
            config.ens,
            node,
            config.owner,
        )
        deployed[ENS_LABEL_BOOKER] = label_booker

        step = f"deploy {ENS_DAO_REGISTRAR}"
        registrar = deployer.deploy(
            get_contract_container(ENS_DAO_REGISTRAR),
            config.ens,
            config.resolver,
            config.name_wrapper,
            token.address,
            label_booker.address,
            node,
            config.domain_name,
            config.owner,
            config.reservation_duration,
        )
        deployed[ENS_DAO_REGISTRAR] = registrar

        # Allow the Label Booker to be modified by the Registrar
        step = f"{ENS_LABEL_BOOKER}.setRegistrar"
        deployer.transact(label_booker.setRegistrar, registrar.address)

        # Allow the Token to be minted by the Registrar
        step = f"{ENS_DAO_TOKEN}.setMinter"
        deployer.transact(token.setMinter, registrar.address)
    except (Exception, KeyboardInterrupt) as e:
        if not deployed:
            raise
        raise IncompleteSetupError(step=step, deployed=deployed) from e

    if config.log:
        print(
            f"Deployed ENS DAO Token: {token.address}",
            f"Deployed ENS DAO Label Booker: {label_booker.address}",
            f"Deployed ENS DAO Registrar: {registrar.address}",
            sep="\n",
        )

    return EnsDaoDeployment(registrar=registrar, token=token, label_booker=label_booker)


def deploy_ens_full(deployer: Deployer, config: EnsFullConfig) -> Dict[str, ContractInstance]:
    """
    Deploys an ENSDeployer, whose construction deploys a complete ENS stack,
    and binds each of the stack contracts. Optionally deploys the ENS DAO on top.

    Returns the contracts keyed by role.
    """
    ens_deployer = deployer.deploy(get_contract_container(ENS_DEPLOYER))

    contracts = OrderedDict()
    for role, (contract_name, accessor) in ENS_STACK.items():
        address = getattr(ens_deployer, accessor)()
        contracts[role] = get_contract_container(contract_name).at(address)

    if config.log:
        lines = [f"Deployed by {deployer.address}.", f"\tensDeployer: {ens_deployer.address}"]
        lines.extend(f"\t{role}: {contract.address}" for role, contract in contracts.items())
        print(*lines, sep="\n")

    if not config.ens_dao:
        return contracts

    dao = deploy_ens_dao(
        deployer,
        EnsDaoConfig(
            ens=contracts["registry"].address,
            resolver=contracts["publicResolver"].address,
            name_wrapper=contracts["nameWrapper"].address,
            domain_name=FULL_STACK_DOMAIN_NAME,
            symbol=FULL_STACK_DAO_TOKEN_SYMBOL,
            log=config.log,
        ),
    )
    contracts.update(dao.as_dict())
    return contracts

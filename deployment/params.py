import typing
from collections import OrderedDict
from typing import Any, List, Optional, Sequence

from ape import networks
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from ape_accounts import KeyfileAccount
from ethpm_types import MethodABI
from web3 import Web3

from deployment.confirm import _confirm_resolution, _continue
from deployment.exceptions import InvalidArguments, TransactionFailed
from deployment.networks import is_local_network
from deployment.registry import DeploymentRegistry, get_entry
from deployment.utils import verify_contracts

w3 = Web3()


def _validate_method_args(
    method_abis: List[MethodABI], args: Sequence[Any]
) -> typing.Dict[str, Any]:
    """Validates the transaction arguments against the function ABI."""
    if len(method_abis) == 0:
        raise InvalidArguments("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = OrderedDict()
        for arg, abi_input in zip(args, abi.inputs):
            if not w3.is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name] = arg
        else:
            return named_args
    raise InvalidArguments(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


def _validate_constructor_args(
    contract_name: str, abi_inputs: List[Any], args: Sequence[Any]
) -> OrderedDict:
    """Validates constructor arguments against the constructor ABI and names them."""
    if len(args) != len(abi_inputs):
        raise InvalidArguments(
            f"Constructor parameters length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(args)}."
        )

    named_args = OrderedDict()
    for position, (abi_input, value) in enumerate(zip(abi_inputs, args)):
        if not w3.is_encodable(abi_input.type, value):
            raise InvalidArguments(
                f"{contract_name} constructor param '{abi_input.name}' at position {position} "
                f"has a value '{value}' whose type does not match expected ABI type "
                f"'{abi_input.type}'"
            )
        named_args[abi_input.name or f"arg{position}"] = value
    return named_args


class Transactor:
    """
    Represents an ape account plus validated/annotated transaction execution.
    """

    def __init__(self, account: Optional[AccountAPI] = None, autosign: bool = False):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        if isinstance(self._account, KeyfileAccount):
            self._account.set_autosign(autosign)

    @property
    def address(self) -> str:
        return self._account.address

    def transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        """Sends a transaction and returns its receipt once confirmed."""
        named_args = _validate_method_args(method_abis=method.abis, args=args)
        description = (
            f"{method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method.abis[0].name}"
        )
        if named_args:
            pretty_args = "\n\t".join(f"{k}={v}" for k, v in named_args.items())
            message = f"\nTransacting {description} with arguments:\n\t{pretty_args}"
        else:
            message = f"\nTransacting {description} with no arguments"
        print(message)
        if not self._autosign:
            _continue()

        receipt = method(*args, sender=self._account)
        if receipt.failed:
            raise TransactionFailed(f"{description} failed in transaction {receipt.txn_hash}")
        return receipt


class Deployer(Transactor):
    """
    Represents an ape account plus a deployment registry,
    with validated, annotated and idempotent contract deployment.
    """

    def __init__(
        self,
        registry: DeploymentRegistry,
        verify: bool = False,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
        log: bool = False,
    ):
        super().__init__(account, autosign)
        self.registry = registry
        self.verify = verify
        self.log = log
        # contracts deployed (not reused) by this deployer
        self.deployments: List[ContractInstance] = list()

        if self.log:
            self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    def _print(self, *lines: str) -> None:
        if self.log:
            print(*lines, sep="\n")

    def deploy(self, container: ContractContainer, *args) -> ContractInstance:
        """
        Deploys a contract with the given constructor arguments.

        A contract already recorded under the same name with the same arguments
        on this chain is not redeployed; its recorded instance is returned instead.
        """
        contract_name = container.contract_type.name
        named_args = _validate_constructor_args(
            contract_name=contract_name,
            abi_inputs=container.constructor.abi.inputs,
            args=args,
        )

        entry = self.registry.find(contract_name, args)
        if entry is not None:
            self._print(f"(i) Reusing {contract_name} at {entry.address}")
            return container.at(entry.address)

        if not self._autosign:
            _confirm_resolution(named_args, contract_name)

        instance = self._account.deploy(container, *args)
        self.registry.record(get_entry(instance, args))
        self.deployments.append(instance)
        self._print(f"(i) Deployed {contract_name} at {instance.address}")
        return instance

    def finalize(self) -> None:
        """Optionally publishes this run's new deployments to the block explorer."""
        if self.registry.filepath is not None:
            print(f"(i) Registry written to {self.registry.filepath}!")
        if not self.verify or not self.deployments:
            return
        if is_local_network():
            print("(i) Skipping verification on a local network.")
            return
        verify_contracts(contracts=self.deployments)

    def _print_deployment_info(self):
        info = [
            f"Account: {self.address}",
            f"Registry: {self.registry.filepath or 'in-memory'}",
            f"Verify: {self.verify}",
        ]
        provider = networks.active_provider
        if provider is not None:
            info.extend(
                [
                    f"Ecosystem: {provider.network.ecosystem.name}",
                    f"Network: {provider.network.name}",
                    f"Chain ID: {provider.chain_id}",
                ]
            )
        print(*info, sep="\n")

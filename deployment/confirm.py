from collections import OrderedDict

from ape.utils import ZERO_ADDRESS

from deployment.exceptions import DeploymentAborted


def _ask(question: str) -> None:
    """Raises DeploymentAborted if the user answers no."""
    answer = input(f"{question} Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        raise DeploymentAborted(f"Declined: {question}")


def _continue() -> None:
    """Asks the user to continue."""
    _ask("Continue")


def _confirm_resolution(resolved_params: OrderedDict, contract_name: str) -> None:
    """Asks the user to confirm the constructor arguments of a single contract."""
    if not resolved_params:
        print(f"\n(i) No constructor parameters for {contract_name}")
        _ask(f"Deploy {contract_name}")
        return

    print(f"\nConstructor parameters for {contract_name}")
    for name, value in resolved_params.items():
        print(f"\t{name}={value}")
    _ask(f"Deploy {contract_name}")

    if ZERO_ADDRESS in resolved_params.values():
        _ask(f"Zero Address detected for a {contract_name} parameter; Continue")

import pytest

from deployment.ens import EnsFullConfig, deploy_ens_full, name_node
from deployment.exceptions import IncompleteSetupError

ENS_ROLES = ["registry", "registrar", "reverseRegistrar", "publicResolver", "nameWrapper"]
DAO_ROLES = ["ensDaoRegistrar", "ensDaoToken", "ensDaoLabelBooker"]


def test_deploy_ens_full_without_dao(chain, deployer):
    contracts = deploy_ens_full(deployer, EnsFullConfig(ens_dao=False))

    assert list(contracts) == ENS_ROLES
    assert chain.deployed == ["ENSDeployer"]
    assert chain.transactions == []

    ens_deployer = deployer.deployments[0]
    assert contracts["registry"].address == ens_deployer.ens()
    assert contracts["registrar"].address == ens_deployer.ethRegistrar()
    assert contracts["reverseRegistrar"].address == ens_deployer.reverseRegistrar()
    assert contracts["publicResolver"].address == ens_deployer.publicResolver()
    assert contracts["nameWrapper"].address == ens_deployer.nameWrapper()

    assert contracts["registry"].contract_type.name == "ENSRegistry"
    assert contracts["registrar"].contract_type.name == "EthRegistrar"
    assert contracts["reverseRegistrar"].contract_type.name == "ReverseRegistrar"
    assert contracts["publicResolver"].contract_type.name == "PublicResolver"
    assert contracts["nameWrapper"].contract_type.name == "NameWrapper"


def test_deploy_ens_full_with_dao(chain, deployer, account):
    contracts = deploy_ens_full(deployer, EnsFullConfig(ens_dao=True))

    assert list(contracts) == ENS_ROLES + DAO_ROLES
    assert chain.deployed == ["ENSDeployer", "ENSDaoToken", "ENSLabelBooker", "ENSDaoRegistrar"]

    registry = contracts["registry"].address
    resolver = contracts["publicResolver"].address
    name_wrapper = contracts["nameWrapper"].address

    token = contracts["ensDaoToken"]
    label_booker = contracts["ensDaoLabelBooker"]
    registrar = contracts["ensDaoRegistrar"]

    assert token.args[:2] == ("sismo.eth DAO", "SISMO")
    assert label_booker.args == (registry, name_node("sismo"), account.address)
    assert registrar.args[:3] == (registry, resolver, name_wrapper)
    assert registrar.args[6] == "sismo"

    assert label_booker.registrar() == registrar.address
    assert token.minter() == registrar.address


def test_deploy_ens_full_reuses_ens_deployer(chain, deployer):
    first = deploy_ens_full(deployer, EnsFullConfig())
    second = deploy_ens_full(deployer, EnsFullConfig())

    assert chain.deployed == ["ENSDeployer"]
    assert {role: c.address for role, c in first.items()} == {
        role: c.address for role, c in second.items()
    }


def test_deploy_ens_full_logs(chain, deployer, account, capsys):
    contracts = deploy_ens_full(deployer, EnsFullConfig(ens_dao=True, log=True))

    output = capsys.readouterr().out
    assert f"Deployed by {account.address}." in output
    for role in ENS_ROLES:
        assert f"{role}: {contracts[role].address}" in output
    assert f"Deployed ENS DAO Registrar: {contracts['ensDaoRegistrar'].address}" in output


def test_deploy_ens_full_propagates_failures(chain, deployer):
    chain.failing_deployments.add("ENSDeployer")
    with pytest.raises(RuntimeError, match="ENSDeployer deployment reverted"):
        deploy_ens_full(deployer, EnsFullConfig(ens_dao=True))
    assert chain.deployed == []


def test_deploy_ens_full_propagates_dao_failures(chain, deployer):
    chain.failing_calls.add("setMinter")
    with pytest.raises(IncompleteSetupError) as error:
        deploy_ens_full(deployer, EnsFullConfig(ens_dao=True))

    assert error.value.step == "ENSDaoToken.setMinter"
    assert list(error.value.deployed) == ["ENSDaoToken", "ENSLabelBooker", "ENSDaoRegistrar"]
    assert isinstance(error.value.__cause__, RuntimeError)
    assert chain.deployed == ["ENSDeployer", "ENSDaoToken", "ENSLabelBooker", "ENSDaoRegistrar"]

from itertools import count
from types import SimpleNamespace

import pytest
from eth_utils import to_checksum_address

from deployment.params import Deployer
from deployment.registry import DeploymentRegistry

CHAIN_ID = 1337

# contract name -> constructor inputs
CONSTRUCTORS = {
    "ENSDaoToken": [
        ("name", "string"),
        ("symbol", "string"),
        ("baseURI", "string"),
        ("owner", "address"),
    ],
    "ENSLabelBooker": [
        ("ensAddress", "address"),
        ("node", "bytes32"),
        ("owner", "address"),
    ],
    "ENSDaoRegistrar": [
        ("ensAddr", "address"),
        ("resolver", "address"),
        ("nameWrapper", "address"),
        ("daoToken", "address"),
        ("ensLabelBooker", "address"),
        ("node", "bytes32"),
        ("name", "string"),
        ("owner", "address"),
        ("reservationDuration", "uint256"),
    ],
    "ENSDeployer": [],
}

# contract name -> {setter: state key}
SETTERS = {
    "ENSDaoToken": {"setMinter": "minter"},
    "ENSLabelBooker": {"setRegistrar": "registrar"},
}

# ENSDeployer accessor -> deployed contract name
ENS_DEPLOYER_ACCESSORS = {
    "ens": "ENSRegistry",
    "ethRegistrar": "EthRegistrar",
    "reverseRegistrar": "ReverseRegistrar",
    "publicResolver": "PublicResolver",
    "nameWrapper": "NameWrapper",
}


def _abi_input(name, type_):
    return SimpleNamespace(name=name, type=type_)


class FakeReceipt:
    def __init__(self, chain, sender, failed=False):
        self.chain_id = chain.chain_id
        self.txn_hash = "0x" + f"{chain.block_number:064x}"
        self.block_number = chain.block_number
        self.transaction = SimpleNamespace(sender=sender.address)
        self.failed = failed


class FakeMethod:
    def __init__(self, contract, name, state_key):
        self.contract = contract
        self.state_key = state_key
        self.abis = [
            SimpleNamespace(name=name, inputs=[_abi_input(state_key, "address")]),
        ]

    def __call__(self, *args, sender):
        chain = self.contract.chain
        name = self.abis[0].name
        if name in chain.failing_calls:
            raise RuntimeError(f"{name} reverted")
        receipt = chain.mine(sender)
        chain.transactions.append((self.contract.contract_type.name, name, args))
        self.contract.state[self.state_key] = args[0]
        return receipt


class FakeInstance:
    def __init__(self, chain, container, address, receipt, args):
        self.chain = chain
        self.contract_type = container.contract_type
        self.address = address
        self.receipt = receipt
        self.args = args
        self.state = dict()
        self._setters = SETTERS.get(container.contract_type.name, dict())

    def __getattr__(self, item):
        setters = self.__dict__.get("_setters", dict())
        if item in setters:
            return FakeMethod(self, item, setters[item])
        state = self.__dict__.get("state", dict())
        if item in state:
            return lambda: state[item]
        raise AttributeError(item)


class FakeContainer:
    def __init__(self, chain, name):
        self.chain = chain
        self.contract_type = SimpleNamespace(name=name, abi=[])
        inputs = [_abi_input(n, t) for n, t in CONSTRUCTORS.get(name, [])]
        self.constructor = SimpleNamespace(abi=SimpleNamespace(inputs=inputs))

    def at(self, address):
        instance = self.chain.instances.get(address)
        if instance is None or instance.contract_type.name != self.contract_type.name:
            raise ValueError(f"No {self.contract_type.name} at {address}")
        return instance


class FakeAccount:
    def __init__(self, chain, address):
        self.chain = chain
        self.address = address

    def deploy(self, container, *args):
        return self.chain.create(container, args, sender=self)


class FakeChain:
    """An in-memory chain recording deployments and transactions."""

    def __init__(self, chain_id=CHAIN_ID):
        self.chain_id = chain_id
        self.block_number = 0
        self._addresses = count(0x1000)
        self.instances = dict()
        self.containers = dict()
        self.deployed = list()  # contract names, in deployment order
        self.transactions = list()
        self.failing_deployments = set()
        self.failing_calls = set()

    def new_address(self):
        return to_checksum_address(f"0x{next(self._addresses):040x}")

    def account(self, index=0):
        return FakeAccount(self, to_checksum_address(f"0x{0xacc0 + index:040x}"))

    def mine(self, sender):
        self.block_number += 1
        return FakeReceipt(self, sender)

    def get_contract_container(self, name):
        if name not in self.containers:
            self.containers[name] = FakeContainer(self, name)
        return self.containers[name]

    def create(self, container, args, sender):
        name = container.contract_type.name
        if name in self.failing_deployments:
            raise RuntimeError(f"{name} deployment reverted")
        receipt = self.mine(sender)
        instance = FakeInstance(self, container, self.new_address(), receipt, args)
        self.instances[instance.address] = instance
        self.deployed.append(name)
        if name == "ENSDeployer":
            # the aggregate deploys the whole stack from its constructor
            for accessor, contract_name in ENS_DEPLOYER_ACCESSORS.items():
                sub_container = self.get_contract_container(contract_name)
                sub_instance = FakeInstance(self, sub_container, self.new_address(), receipt, ())
                self.instances[sub_instance.address] = sub_instance
                instance.state[accessor] = sub_instance.address
        return instance


@pytest.fixture
def chain(monkeypatch):
    fake_chain = FakeChain()
    monkeypatch.setattr("deployment.ens.get_contract_container", fake_chain.get_contract_container)
    return fake_chain


@pytest.fixture
def account(chain):
    return chain.account(0)


@pytest.fixture
def registry():
    return DeploymentRegistry(chain_id=CHAIN_ID)


@pytest.fixture
def deployer(account, registry):
    return Deployer(registry=registry, account=account, autosign=True)


@pytest.fixture
def ens_stack(chain, deployer):
    """Addresses of an already deployed ENS Registry and Public Resolver."""
    ens_deployer = deployer.deploy(chain.get_contract_container("ENSDeployer"))
    chain.deployed.clear()
    return SimpleNamespace(
        ens=ens_deployer.ens(),
        resolver=ens_deployer.publicResolver(),
        name_wrapper=ens_deployer.nameWrapper(),
    )

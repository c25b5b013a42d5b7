import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

from ape.contracts import ContractInstance
from eth_typing import ABI, ChecksumAddress
from eth_utils import to_checksum_address, to_hex

from deployment.utils import _load_json

ChainId = int
ContractName = str


STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """Records a single contract deployment on a single chain."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: str
    block_number: int
    deployer: str
    args: List[Any]


def normalize_args(args: Sequence[Any]) -> List[Any]:
    """Returns constructor arguments in their JSON-serializable registry form."""
    normalized = list()
    for value in args:
        if isinstance(value, (list, tuple)):
            normalized.append(normalize_args(value))
        elif isinstance(value, (bytes, bytearray)):
            normalized.append(to_hex(value))
        elif isinstance(value, str) and value.startswith("0x") and len(value) == 42:
            normalized.append(to_checksum_address(value))
        else:
            normalized.append(value)
    return normalized


def _to_hex_str(value: Any) -> str:
    return value if isinstance(value, str) else to_hex(value)


def _get_abi(contract_instance: ContractInstance) -> ABI:
    """Returns the ABI of a contract instance."""
    contract_abi = list()
    for entry in contract_instance.contract_type.abi:
        contract_abi.append(entry.model_dump(by_alias=True, mode="json"))
    return contract_abi


def get_entry(contract_instance: ContractInstance, args: Sequence[Any]) -> RegistryEntry:
    """Builds the registry entry of a freshly deployed contract instance."""
    receipt = contract_instance.receipt
    entry = RegistryEntry(
        chain_id=receipt.chain_id,
        name=contract_instance.contract_type.name,
        address=to_checksum_address(contract_instance.address),
        abi=_get_abi(contract_instance),
        tx_hash=_to_hex_str(receipt.txn_hash),
        block_number=receipt.block_number,
        deployer=receipt.transaction.sender,
        args=normalize_args(args),
    )
    return entry


def read_registry(filepath: Path) -> List[RegistryEntry]:
    data = _load_json(filepath)
    registry_entries = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            registry_entry = RegistryEntry(
                chain_id=int(chain_id),
                name=contract_name,
                address=artifacts["address"],
                abi=artifacts["abi"],
                tx_hash=artifacts["tx_hash"],
                block_number=artifacts["block_number"],
                deployer=artifacts["deployer"],
                args=artifacts.get("args", []),
            )
            registry_entries.append(registry_entry)
    return registry_entries


def write_registry(entries: Iterable[RegistryEntry], filepath: Path) -> Path:
    """
    Writes deployment records to a registry file.

    Entries replace any existing record with the same chain ID and contract name;
    all other existing records are kept.
    """
    entries = list(entries)
    if not entries:
        print("No entries provided.")
        return filepath

    data = defaultdict(dict)
    if filepath.exists():
        for chain_id, chain_entries in _load_json(filepath).items():
            data[chain_id].update(chain_entries)

    for entry in entries:
        entry_abi = list(entry.abi)
        entry_abi.sort(key=lambda d: (d["type"], d.get("name", "")))

        data[str(entry.chain_id)][entry.name] = {
            "address": entry.address,
            "abi": entry_abi,
            "tx_hash": entry.tx_hash,
            "block_number": int(entry.block_number),
            "deployer": entry.deployer,
            "args": list(entry.args),
        }

    # Sort to enforce a common order
    ordered = {
        chain_id: dict(sorted(data[chain_id].items())) for chain_id in sorted(data, key=int)
    }

    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(ordered, file, **STANDARD_REGISTRY_JSON_FORMAT)

    return filepath


class DeploymentRegistry:
    """
    Deployment records of a single chain, keyed by contract name.

    When a filepath is given, existing records are loaded from it and
    every new record is written back immediately.
    """

    def __init__(self, chain_id: ChainId, filepath: Optional[Path] = None):
        self.chain_id = chain_id
        self.filepath = filepath
        self._entries: Dict[ContractName, RegistryEntry] = dict()
        if filepath is not None and filepath.exists():
            for entry in read_registry(filepath):
                if entry.chain_id == chain_id:
                    self._entries[entry.name] = entry

    def __contains__(self, name: ContractName) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: ContractName) -> Optional[RegistryEntry]:
        return self._entries.get(name)

    def find(self, name: ContractName, args: Sequence[Any]) -> Optional[RegistryEntry]:
        """Returns the record for name if it was deployed with the same arguments."""
        entry = self._entries.get(name)
        if entry is None or list(entry.args) != normalize_args(args):
            return None
        return entry

    def record(self, entry: RegistryEntry) -> None:
        if entry.chain_id != self.chain_id:
            raise ValueError(
                f"Cannot record {entry.name} for chain {entry.chain_id} "
                f"in the registry of chain {self.chain_id}"
            )
        self._entries[entry.name] = entry
        if self.filepath is not None:
            write_registry(entries=[entry], filepath=self.filepath)

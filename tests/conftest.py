import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

# Configure isolated SQLite database and registry settings before app imports
_temp_dir = Path(tempfile.mkdtemp(prefix="erc8004-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_temp_dir / 'test.db'}")
os.environ.setdefault("ERC8004_NETWORK", "arbitrum-sepolia")
os.environ.setdefault("ERC8004_RPC_URL", "http://127.0.0.1:8545")

from eth_account import Account  # noqa: E402
from hexbytes import HexBytes  # noqa: E402
from web3 import Web3  # noqa: E402

from erc8004_agent.abi import AGENT_REGISTERED_TOPIC  # noqa: E402
from erc8004_agent.constants import NETWORKS, NULL_ADDRESS  # noqa: E402
from erc8004_agent.models import LogEntry, TransactionReceipt, to_hex  # noqa: E402

SEPOLIA_REGISTRY = NETWORKS["arbitrum-sepolia"].registry_address


class FakeRegistryChain:
    """
    In-memory registry contract behind the public and wallet client interfaces.

    ``record_shape`` selects how ``getAgent`` values come back: ``"structured"``
    (a dict keyed by struct field) or ``"positional"`` (a plain tuple).
    """

    def __init__(self, account=None, *, record_shape: str = "structured"):
        self.account = account
        self.record_shape = record_shape
        self.emit_registered_event = True
        self.revert_writes = False
        self.write_error: Optional[Exception] = None
        self.read_error: Optional[Exception] = None
        self.raw_agent_override: Any = None

        self.agents: Dict[str, Dict[str, Any]] = {}
        self.owners: Dict[str, str] = {}
        self.receipts: Dict[str, TransactionReceipt] = {}
        self.reads: List[tuple] = []
        self.writes: List[tuple] = []
        self._tx_count = 0

    @property
    def address(self) -> Optional[str]:
        return self.account.address if self.account is not None else None

    # -- read client ---------------------------------------------------
    async def read_contract(self, address: str, abi, function_name: str, args: Sequence[Any] = ()):
        self.reads.append((address, function_name, tuple(args)))
        if self.read_error is not None:
            raise self.read_error

        if function_name == "isAgentRegistered":
            return Web3.to_checksum_address(args[0]) in self.owners
        if function_name == "getAgentByOwner":
            agent_id = self.owners.get(Web3.to_checksum_address(args[0]))
            return HexBytes(agent_id) if agent_id else HexBytes(b"\x00" * 32)
        if function_name == "getAgent":
            if self.raw_agent_override is not None:
                return self.raw_agent_override
            return self._agent_value(to_hex(args[0]))
        raise AssertionError(f"Unexpected read {function_name}")

    def _agent_value(self, agent_id: str):
        agent = self.agents.get(agent_id) or {
            "owner": NULL_ADDRESS,
            "name": "",
            "version": "",
            "capabilities": [],
            "stake": 0,
            "reputation": 0,
            "isActive": False,
            "registeredAt": 0,
        }
        if self.record_shape == "positional":
            return (
                agent["owner"],
                agent["name"],
                agent["version"],
                list(agent["capabilities"]),
                agent["stake"],
                agent["reputation"],
                agent["isActive"],
                agent["registeredAt"],
            )
        return dict(agent, capabilities=list(agent["capabilities"]))

    # -- wallet client -------------------------------------------------
    async def write_contract(
        self,
        address: str,
        abi,
        function_name: str,
        args: Sequence[Any] = (),
        *,
        value: int = 0,
    ) -> str:
        self.writes.append((address, function_name, tuple(args), value))
        if self.write_error is not None:
            raise self.write_error

        self._tx_count += 1
        tx_hash = to_hex(Web3.keccak(text=f"tx-{self._tx_count}"))
        logs: List[LogEntry] = []
        if not self.revert_writes:
            logs = self._apply(address, function_name, list(args), value)

        self.receipts[tx_hash] = TransactionReceipt(
            tx_hash=tx_hash,
            status=0 if self.revert_writes else 1,
            block_number=self._tx_count,
            gas_used=21_000,
            logs=tuple(logs),
        )
        return tx_hash

    async def wait_for_transaction_receipt(self, tx_hash: str) -> TransactionReceipt:
        return self.receipts[tx_hash]

    def _apply(self, address: str, function_name: str, args: List[Any], value: int) -> List[LogEntry]:
        sender = self.account.address
        if function_name == "registerAgent":
            name, version, capabilities = args
            agent_id = to_hex(Web3.keccak(text=f"{sender}:{name}:{self._tx_count}"))
            self.agents[agent_id] = {
                "owner": sender,
                "name": name,
                "version": version,
                "capabilities": list(capabilities),
                "stake": value,
                "reputation": 0,
                "isActive": True,
                "registeredAt": 1_700_000_000 + self._tx_count,
            }
            self.owners[sender] = agent_id
            if not self.emit_registered_event:
                return []
            return [
                LogEntry(
                    address=address,
                    topics=(
                        AGENT_REGISTERED_TOPIC,
                        HexBytes(agent_id),
                        HexBytes(b"\x00" * 12 + bytes(HexBytes(sender))),
                    ),
                    data=b"",
                )
            ]

        agent = self.agents[to_hex(args[0])]
        if function_name == "updateCapabilities":
            agent["capabilities"] = list(args[1])
        elif function_name == "stake":
            agent["stake"] += value
        elif function_name == "withdraw":
            agent["stake"] -= args[1]
        elif function_name == "deactivateAgent":
            agent["isActive"] = False
        elif function_name == "reactivateAgent":
            agent["isActive"] = True
        else:
            raise AssertionError(f"Unexpected write {function_name}")
        return []

    def seed_agent(self, owner: str, **fields: Any) -> str:
        """Place a registered agent on the fake chain and return its id."""
        owner = Web3.to_checksum_address(owner)
        agent_id = to_hex(Web3.keccak(text=f"seed:{owner}"))
        self.agents[agent_id] = {
            "owner": owner,
            "name": "SeedAgent",
            "version": "1.0.0",
            "capabilities": ["text-generation"],
            "stake": 10**16,
            "reputation": 50,
            "isActive": True,
            "registeredAt": 1_700_000_000,
            **fields,
        }
        self.owners[owner] = agent_id
        return agent_id


@pytest.fixture(scope="session", autouse=True)
def _prepare_database():
    """Create all tables in the isolated SQLite database."""
    from erc8004_agent.database import Base, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def account():
    return Account.create()


@pytest.fixture
def chain(account) -> FakeRegistryChain:
    return FakeRegistryChain(account)


@pytest.fixture
def positional_chain(account) -> FakeRegistryChain:
    return FakeRegistryChain(account, record_shape="positional")


@pytest.fixture
def unsigned_chain() -> FakeRegistryChain:
    """Chain client with no signer attached."""
    return FakeRegistryChain()


@pytest.fixture
def registry_address() -> str:
    return SEPOLIA_REGISTRY

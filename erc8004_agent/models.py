"""Typed records exchanged by the registry client."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from hexbytes import HexBytes


def to_hex(value: Any) -> str:
    """Render bytes-like or hex-string values as a lowercase 0x-prefixed string."""
    return "0x" + bytes(HexBytes(value)).hex()


@dataclass(frozen=True)
class AgentRecord:
    """Canonical view of one registered agent."""

    agent_id: str
    owner: str
    name: str
    version: str
    capabilities: List[str]
    stake: int
    reputation: int
    is_active: bool
    registered_at: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary using the contract's field names."""
        return {
            "agentId": self.agent_id,
            "owner": self.owner,
            "name": self.name,
            "version": self.version,
            "capabilities": list(self.capabilities),
            # uint256 values exceed JSON's safe integer range.
            "stake": str(self.stake),
            "reputation": str(self.reputation),
            "isActive": self.is_active,
            "registeredAt": self.registered_at,
        }


@dataclass(frozen=True)
class RegistrationStatus:
    """Registration state of one owner; ``agent_info`` is set iff registered."""

    is_registered: bool
    agent_info: Optional[AgentRecord] = None

    def __post_init__(self) -> None:
        if self.is_registered != (self.agent_info is not None):
            raise ValueError("agent_info must be present exactly when is_registered is True")

    @classmethod
    def unregistered(cls) -> "RegistrationStatus":
        return cls(is_registered=False)

    @classmethod
    def registered(cls, record: AgentRecord) -> "RegistrationStatus":
        return cls(is_registered=True, agent_info=record)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"isRegistered": self.is_registered}
        if self.agent_info is not None:
            data["agentInfo"] = self.agent_info.to_dict()
        return data


class TransactionStatus(str, Enum):
    """Lifecycle of one logical registry action."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class TransactionState:
    """Snapshot of the tracker slot."""

    status: TransactionStatus = TransactionStatus.IDLE
    tx_hash: Optional[str] = None
    error: Optional[BaseException] = None

    @classmethod
    def idle(cls) -> "TransactionState":
        return cls()

    @classmethod
    def pending(cls, tx_hash: Optional[str] = None) -> "TransactionState":
        return cls(status=TransactionStatus.PENDING, tx_hash=tx_hash)

    @classmethod
    def success(cls, tx_hash: str) -> "TransactionState":
        return cls(status=TransactionStatus.SUCCESS, tx_hash=tx_hash)

    @classmethod
    def failed(cls, error: BaseException) -> "TransactionState":
        return cls(status=TransactionStatus.ERROR, error=error)

    @property
    def is_settled(self) -> bool:
        return self.status in (TransactionStatus.SUCCESS, TransactionStatus.ERROR)


@dataclass(frozen=True)
class TransactionResult:
    """Outcome of a confirmed write; ``agent_id`` is only set by registration."""

    tx_hash: str
    agent_id: Optional[str] = None


@dataclass
class AgentMetadata:
    """Registration input describing the agent."""

    name: str
    version: str
    capabilities: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LogEntry:
    """One log emitted while executing a transaction."""

    address: Optional[str]
    topics: Tuple[HexBytes, ...]
    data: bytes = b""

    @classmethod
    def from_web3(cls, raw: Any) -> "LogEntry":
        return cls(
            address=raw.get("address"),
            topics=tuple(HexBytes(topic) for topic in raw.get("topics", ())),
            data=bytes(HexBytes(raw.get("data") or b"")),
        )


@dataclass(frozen=True)
class TransactionReceipt:
    """Inclusion record of a mined transaction."""

    tx_hash: str
    status: int
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    logs: Tuple[LogEntry, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @classmethod
    def from_web3(cls, raw: Any) -> "TransactionReceipt":
        """Build from a web3.py ``TxReceipt`` (an ``AttributeDict``)."""
        return cls(
            tx_hash=to_hex(raw["transactionHash"]),
            status=int(raw.get("status", 0)),
            block_number=raw.get("blockNumber"),
            gas_used=raw.get("gasUsed"),
            logs=tuple(LogEntry.from_web3(log) for log in raw.get("logs", ())),
        )

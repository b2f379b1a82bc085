"""
Normalisation of ``getAgent`` return values.

Depending on the web3.py version and contract options, a struct return value
arrives either as a structured value (a mapping, or a named tuple produced with
``decode_tuples=True``) or as a plain positional tuple. ``tag_record`` classifies
the raw value once; ``decode_agent_record`` then handles each tag explicitly.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Sequence, Tuple

from web3 import Web3

from ..errors import DecodeAmbiguityError
from ..models import AgentRecord, to_hex

# Field order of the Agent struct, as declared in the registry ABI.
AGENT_FIELDS: Tuple[str, ...] = (
    "owner",
    "name",
    "version",
    "capabilities",
    "stake",
    "reputation",
    "isActive",
    "registeredAt",
)
STAKE_INDEX = AGENT_FIELDS.index("stake")


class RecordShape(str, Enum):
    STRUCTURED = "structured"
    POSITIONAL = "positional"
    UNKNOWN = "unknown"


def tag_record(raw: Any) -> Tuple[RecordShape, Any]:
    """Classify a raw return value and return it with its shape tag.

    Structured values are returned as a plain ``dict`` so both mapping and
    named tuple inputs share one branch.
    """
    if isinstance(raw, Mapping):
        return RecordShape.STRUCTURED, dict(raw)
    if isinstance(raw, tuple) and hasattr(raw, "_fields"):
        return RecordShape.STRUCTURED, dict(zip(raw._fields, raw))
    if isinstance(raw, (list, tuple)):
        return RecordShape.POSITIONAL, list(raw)
    return RecordShape.UNKNOWN, raw


def _fields_from_structured(data: Dict[str, Any]) -> Sequence[Any]:
    missing = [name for name in AGENT_FIELDS if name not in data]
    if missing:
        raise DecodeAmbiguityError(f"Agent struct is missing fields: {', '.join(missing)}")
    return [data[name] for name in AGENT_FIELDS]


def _fields_from_positional(values: Sequence[Any]) -> Sequence[Any]:
    if len(values) != len(AGENT_FIELDS):
        raise DecodeAmbiguityError(
            f"Agent tuple has {len(values)} elements, expected {len(AGENT_FIELDS)}"
        )
    return values


def _ordered_fields(raw: Any) -> Sequence[Any]:
    shape, payload = tag_record(raw)
    if shape is RecordShape.STRUCTURED:
        return _fields_from_structured(payload)
    if shape is RecordShape.POSITIONAL:
        return _fields_from_positional(payload)
    raise DecodeAmbiguityError(f"Unexpected agent data format: {type(raw).__name__}")


def _as_uint(value: Any, field_name: str) -> int:
    # bool is an int subclass but never a valid uint256 here.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DecodeAmbiguityError(f"{field_name} is not an unsigned integer: {value!r}")
    return value


def decode_agent_record(agent_id: Any, raw: Any) -> AgentRecord:
    """
    Build an ``AgentRecord`` from a ``getAgent`` return value.

    Args:
        agent_id: The bytes32 identifier the record was fetched with.
        raw: Structured or positional struct value.

    Raises:
        DecodeAmbiguityError: If the value has neither shape or a field has the wrong type.
    """
    owner, name, version, capabilities, stake, reputation, is_active, registered_at = _ordered_fields(raw)

    if not isinstance(owner, str) or not Web3.is_address(owner):
        raise DecodeAmbiguityError(f"owner is not an address: {owner!r}")
    if not isinstance(name, str) or not isinstance(version, str):
        raise DecodeAmbiguityError("name and version must be strings")
    if isinstance(capabilities, (str, bytes)) or not isinstance(capabilities, Sequence):
        raise DecodeAmbiguityError(f"capabilities is not a sequence: {capabilities!r}")
    if not isinstance(is_active, bool):
        raise DecodeAmbiguityError(f"isActive is not a boolean: {is_active!r}")

    return AgentRecord(
        agent_id=to_hex(agent_id),
        owner=Web3.to_checksum_address(owner),
        name=name,
        version=version,
        capabilities=[str(capability) for capability in capabilities],
        stake=_as_uint(stake, "stake"),
        reputation=_as_uint(reputation, "reputation"),
        is_active=is_active,
        registered_at=_as_uint(registered_at, "registeredAt"),
    )


def decode_stake(raw: Any) -> int:
    """Extract only the stake field from a ``getAgent`` return value."""
    return _as_uint(_ordered_fields(raw)[STAKE_INDEX], "stake")

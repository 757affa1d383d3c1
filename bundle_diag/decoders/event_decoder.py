"""Decoding of EntryPoint event logs."""
from typing import Any, Optional
from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, is_hex, to_checksum_address, to_hex

from ..models.schemas import KnownEvent, LogEntry, OperationExecuted, OperationReverted
from .signatures import (
    POST_OP_REVERT_REASON,
    USER_OPERATION_EVENT,
    USER_OPERATION_REVERT_REASON,
    Signature,
    lookup_event,
)


class LogDecodeError(ValueError):
    """A log matched a known event but its topics or data do not decode."""


def _to_bytes(value: str) -> bytes:
    if not isinstance(value, str) or not is_hex(value) or len(value) % 2:
        raise LogDecodeError(f"Invalid hex: {value!r}")
    return decode_hex(value)


def _normalize(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return to_checksum_address(value)
    if abi_type.startswith("bytes"):
        return to_hex(value)
    return value


def decode_event_args(sig: Signature, log: LogEntry) -> dict[str, Any]:
    """Decode indexed topics and data of a log into named arguments."""
    indexed = sig.indexed_inputs
    topics = log.topics[1:]
    if len(topics) != len(indexed):
        raise LogDecodeError(
            f"{sig.name} expects {len(indexed)} indexed topics, got {len(topics)}"
        )

    args: dict[str, Any] = {}
    try:
        for param, topic in zip(indexed, topics):
            (value,) = decode([param.type], _to_bytes(topic))
            args[param.name] = _normalize(param.type, value)

        data_inputs = sig.data_inputs
        values = decode([p.type for p in data_inputs], _to_bytes(log.data))
        for param, value in zip(data_inputs, values):
            args[param.name] = _normalize(param.type, value)
    except (DecodingError, ValueError) as e:
        raise LogDecodeError(f"{sig.name}: {e}") from e

    return args


def decode_log(log: LogEntry) -> Optional[KnownEvent]:
    """
    Classify a log as a known EntryPoint event.

    Returns None for logs whose topic0 is not in the catalog. Raises
    LogDecodeError when a known event's payload is malformed.
    """
    if not log.topics:
        return None

    sig = lookup_event(log.topics[0])
    if sig is None:
        return None

    args = decode_event_args(sig, log)

    if sig is USER_OPERATION_EVENT:
        return OperationExecuted(
            sender=args["sender"],
            paymaster=args["paymaster"],
            success=args["success"],
            nonce=args["nonce"],
            operation_hash=args["userOpHash"],
            gas_cost=args["actualGasCost"],
            gas_used=args["actualGasUsed"],
        )

    if sig in (USER_OPERATION_REVERT_REASON, POST_OP_REVERT_REASON):
        return OperationReverted(
            sender=args["sender"],
            nonce=args["nonce"],
            operation_hash=args["userOpHash"],
            revert_payload=args["revertReason"],
            phase="postOp" if sig is POST_OP_REVERT_REASON else "execution",
        )

    return None

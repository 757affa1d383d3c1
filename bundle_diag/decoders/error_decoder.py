"""Error decoding for transaction reverts."""
import logging
from typing import Optional
from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, is_hex, to_hex

from ..diagnostics.sink import DiagnosticSink, NullSink
from ..models.schemas import (
    DecodedError,
    DecodeOutcome,
    DecodeResult,
    ExecuteFailure,
    FailedOperation,
    GenericMessage,
    PanicCode,
    Unrecognized,
)
from .signatures import (
    ERROR_STRING,
    EXECUTE_ERROR,
    FAILED_OP,
    PANIC,
    Signature,
    describe_panic,
    extract_selector,
    lookup_error,
)

logger = logging.getLogger(__name__)


class MalformedPayload(ValueError):
    """Revert data is not valid hex or its fields do not decode."""


def _payload_bytes(error_data: str) -> bytes:
    """Bytes after the selector."""
    return decode_hex(error_data)[4:]


def _decode_fields(sig: Signature, error_data: str) -> DecodedError:
    """Decode the arguments of a matched error without recursing."""
    types = [p.type for p in sig.inputs]
    try:
        values = decode(types, _payload_bytes(error_data))
    except (DecodingError, ValueError) as e:
        raise MalformedPayload(f"{sig.text}: {e}") from e

    if sig is ERROR_STRING:
        return GenericMessage(message=values[0])
    if sig is PANIC:
        return PanicCode(code=values[0], description=describe_panic(values[0]))
    if sig is EXECUTE_ERROR:
        return ExecuteFailure(index=values[0], inner=to_hex(values[1]))
    if sig is FAILED_OP:
        return FailedOperation(op_index=values[0], reason=values[1])
    raise MalformedPayload(f"No decoder for {sig.text}")


def describe_error(error: DecodedError) -> str:
    """One-line text for a decoded error."""
    if isinstance(error, GenericMessage):
        return f"Error message={error.message!r}"
    if isinstance(error, PanicCode):
        return f"Panic code={error.code} ({error.description})"
    if isinstance(error, ExecuteFailure):
        return f"ExecuteError index={error.index} error={error.inner}"
    if isinstance(error, FailedOperation):
        return f"FailedOp opIndex={error.op_index} reason={error.reason!r}"
    return f"Unrecognized selector={error.selector}"


def _is_hex_data(error_data: Optional[str]) -> bool:
    return (
        isinstance(error_data, str)
        and error_data.startswith("0x")
        and len(error_data) % 2 == 0
        and is_hex(error_data)
    )


def _decode_inner(inner: str) -> tuple[Optional[DecodedError], str]:
    """Single decode pass over the payload nested in an ExecuteError."""
    selector = extract_selector(inner) or inner
    if not _is_hex_data(inner):
        return None, f"Inner selector: {selector}"

    sig = lookup_error(inner)
    if sig is None:
        return None, f"Inner selector: {selector}"

    try:
        nested = _decode_fields(sig, inner)
    except MalformedPayload as e:
        logger.debug(f"Inner payload did not decode: {e}")
        return None, f"Inner selector: {selector}"

    return nested, f"Inner decoded error: {describe_error(nested)}"


def decode_revert(
    error_data: Optional[str],
    sink: Optional[DiagnosticSink] = None,
) -> DecodeResult:
    """
    Decode revert data against the signature catalog.

    ExecuteError payloads get one more decode pass over their inner bytes;
    anything nested deeper is reported but not decoded.

    Args:
        error_data: 0x-prefixed hex revert data
        sink: Receives each diagnostic line as it is produced

    Returns:
        DecodeResult with the outcome, decoded error and emitted lines
    """
    sink = sink or NullSink()
    lines: list[str] = []

    def emit(line: str) -> None:
        lines.append(line)
        sink.emit(line)

    if not _is_hex_data(error_data):
        return DecodeResult(outcome=DecodeOutcome.MALFORMED)

    if len(error_data) < 10:
        emit(f"No decodable revert payload ({error_data})")
        return DecodeResult(outcome=DecodeOutcome.EMPTY, lines=lines)

    sig = lookup_error(error_data)
    if sig is None:
        return DecodeResult(
            outcome=DecodeOutcome.SELECTOR_MISMATCH,
            error=Unrecognized(selector=extract_selector(error_data)),
        )

    try:
        decoded = _decode_fields(sig, error_data)
    except MalformedPayload as e:
        logger.debug(f"Revert data did not decode: {e}")
        return DecodeResult(outcome=DecodeOutcome.MALFORMED)

    if isinstance(decoded, ExecuteFailure):
        emit(f"Decoded ExecuteError: index={decoded.index}")
        emit(f"Inner revert data: {decoded.inner}")

        if decoded.inner == "0x":
            emit("Inner revert data is empty (target reverted without reason).")
        else:
            nested, line = _decode_inner(decoded.inner)
            emit(line)
            if nested is not None:
                decoded = decoded.model_copy(update={"nested": nested})
    else:
        emit(f"Decoded {describe_error(decoded)}")

    return DecodeResult(outcome=DecodeOutcome.DECODED, error=decoded, lines=lines)

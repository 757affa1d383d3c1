"""Known error and event signatures with their selectors."""
from typing import NamedTuple, Optional
from eth_utils import keccak, to_hex


class Param(NamedTuple):
    name: str
    type: str
    indexed: bool = False


class Signature(NamedTuple):
    """One catalog entry: an ABI error or event."""

    name: str
    kind: str  # "error" or "event"
    inputs: tuple[Param, ...]

    @property
    def text(self) -> str:
        """Canonical signature, e.g. Error(string)."""
        return f"{self.name}({','.join(p.type for p in self.inputs)})"

    @property
    def topic(self) -> str:
        """Full keccak hash of the signature (topic0 for events)."""
        return to_hex(keccak(text=self.text))

    @property
    def selector(self) -> str:
        """First 4 bytes of the signature hash."""
        return self.topic[:10]

    @property
    def indexed_inputs(self) -> tuple[Param, ...]:
        return tuple(p for p in self.inputs if p.indexed)

    @property
    def data_inputs(self) -> tuple[Param, ...]:
        return tuple(p for p in self.inputs if not p.indexed)


ERROR_STRING = Signature("Error", "error", (Param("message", "string"),))
PANIC = Signature("Panic", "error", (Param("code", "uint256"),))
EXECUTE_ERROR = Signature(
    "ExecuteError",
    "error",
    (Param("index", "uint256"), Param("error", "bytes")),
)
FAILED_OP = Signature(
    "FailedOp",
    "error",
    (Param("opIndex", "uint256"), Param("reason", "string")),
)

USER_OPERATION_EVENT = Signature(
    "UserOperationEvent",
    "event",
    (
        Param("userOpHash", "bytes32", True),
        Param("sender", "address", True),
        Param("paymaster", "address", True),
        Param("nonce", "uint256"),
        Param("success", "bool"),
        Param("actualGasCost", "uint256"),
        Param("actualGasUsed", "uint256"),
    ),
)
USER_OPERATION_REVERT_REASON = Signature(
    "UserOperationRevertReason",
    "event",
    (
        Param("userOpHash", "bytes32", True),
        Param("sender", "address", True),
        Param("nonce", "uint256"),
        Param("revertReason", "bytes"),
    ),
)
POST_OP_REVERT_REASON = Signature(
    "PostOpRevertReason",
    "event",
    (
        Param("userOpHash", "bytes32", True),
        Param("sender", "address", True),
        Param("nonce", "uint256"),
        Param("revertReason", "bytes"),
    ),
)

CATALOG: tuple[Signature, ...] = (
    ERROR_STRING,
    PANIC,
    EXECUTE_ERROR,
    FAILED_OP,
    USER_OPERATION_EVENT,
    USER_OPERATION_REVERT_REASON,
    POST_OP_REVERT_REASON,
)

_BY_SELECTOR = {sig.selector: sig for sig in CATALOG}
_EVENTS_BY_TOPIC = {sig.topic: sig for sig in CATALOG if sig.kind == "event"}

# Panic codes mapping
PANIC_CODES = {
    0x00: "Generic compiler panic",
    0x01: "Assertion failed",
    0x11: "Arithmetic overflow/underflow",
    0x12: "Division by zero",
    0x21: "Invalid enum value",
    0x22: "Invalid storage byte array encoding",
    0x31: "Pop on empty array",
    0x32: "Array index out of bounds",
    0x41: "Memory allocation failed",
    0x51: "Zero-initialized function pointer",
}


def extract_selector(data: Optional[str]) -> Optional[str]:
    """Extract the 4-byte selector from hex data, lowercased."""
    if not data or not isinstance(data, str) or len(data) < 10:
        return None

    if not data.startswith(("0x", "0X")):
        data = f"0x{data}"

    return data[:10].lower()


def lookup_selector(selector: Optional[str]) -> Optional[Signature]:
    """Find any catalog entry by 4-byte selector."""
    if not selector:
        return None
    return _BY_SELECTOR.get(selector.lower())


def lookup_error(data: Optional[str]) -> Optional[Signature]:
    """Find the error entry matching the selector of revert data."""
    sig = lookup_selector(extract_selector(data))
    if sig is None or sig.kind != "error":
        return None
    return sig


def lookup_event(topic0: Optional[str]) -> Optional[Signature]:
    """Find the event entry whose topic hash equals topic0."""
    if not topic0 or not isinstance(topic0, str):
        return None
    return _EVENTS_BY_TOPIC.get(topic0.lower())


def describe_panic(code: int) -> str:
    return PANIC_CODES.get(code, f"Panic({code})")

"""Pydantic models for decoded errors, event logs and bundle diagnoses."""
from enum import Enum
from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_quantity(value: Any) -> int:
    """Parse a JSON-RPC quantity (hex string or int) into an int."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
    raise ValueError(f"Invalid quantity: {value!r}")


# Decoded errors
class GenericMessage(BaseModel):
    """Error(string) revert."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["generic_message"] = "generic_message"
    message: str


class PanicCode(BaseModel):
    """Panic(uint256) revert."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["panic_code"] = "panic_code"
    code: int
    description: str


class FailedOperation(BaseModel):
    """EntryPoint FailedOp(uint256,string) revert."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["failed_operation"] = "failed_operation"
    op_index: int
    reason: str


class Unrecognized(BaseModel):
    """Payload whose selector is not in the catalog."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["unrecognized"] = "unrecognized"
    selector: str


class ExecuteFailure(BaseModel):
    """ExecuteError(uint256,bytes) revert from a batch call."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["execute_failure"] = "execute_failure"
    index: int
    inner: str
    nested: Optional[
        Union[GenericMessage, PanicCode, FailedOperation, "ExecuteFailure", Unrecognized]
    ] = None


ExecuteFailure.model_rebuild()

DecodedError = Union[GenericMessage, PanicCode, ExecuteFailure, FailedOperation, Unrecognized]


class DecodeOutcome(str, Enum):
    """How a decode attempt ended."""
    DECODED = "decoded"
    EMPTY = "empty"
    SELECTOR_MISMATCH = "selector_mismatch"
    MALFORMED = "malformed"
    EXTRACTION_MISS = "extraction_miss"


class DecodeResult(BaseModel):
    """Result of decoding one revert payload."""
    outcome: DecodeOutcome
    error: Optional[DecodedError] = None
    lines: list[str] = Field(default_factory=list)

    @property
    def decoded(self) -> bool:
        return self.outcome == DecodeOutcome.DECODED


class ErrorDiagnosis(BaseModel):
    """Diagnosis of a raw error raised by a submission call."""
    revert_data: Optional[str] = None
    result: DecodeResult
    hints: list[str] = Field(default_factory=list)


# Receipts
class LogEntry(BaseModel):
    """Event log as returned in a transaction receipt."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    address: str
    topics: list[str] = Field(default_factory=list)
    data: str = "0x"


class Receipt(BaseModel):
    """Transaction receipt fields used for bundle diagnosis."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    transaction_hash: Optional[str] = Field(None, alias="transactionHash")
    status: bool
    block_number: int = Field(..., alias="blockNumber")
    logs: list[LogEntry] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> bool:
        if isinstance(value, str) and value in ("success", "reverted"):
            return value == "success"
        return parse_quantity(value) == 1

    @field_validator("block_number", mode="before")
    @classmethod
    def _parse_block_number(cls, value: Any) -> int:
        return parse_quantity(value)

    @classmethod
    def from_rpc(cls, payload: dict) -> "Receipt":
        """Build from an eth_getTransactionReceipt result."""
        return cls.model_validate(payload)


# Protocol events
class OperationExecuted(BaseModel):
    """UserOperationEvent: one operation of a bundle completed."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["operation_executed"] = "operation_executed"
    sender: str
    paymaster: str
    success: bool
    nonce: int
    operation_hash: str
    gas_cost: int
    gas_used: int


class OperationReverted(BaseModel):
    """UserOperationRevertReason / PostOpRevertReason."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["operation_reverted"] = "operation_reverted"
    sender: str
    nonce: int
    operation_hash: str
    revert_payload: str
    phase: Literal["execution", "postOp"] = "execution"


KnownEvent = Union[OperationExecuted, OperationReverted]


class OperationSummary(BaseModel):
    """Last operation seen in a bundle."""
    model_config = ConfigDict(frozen=True)

    sender: str
    success: bool
    nonce: str
    operation_hash: str


class BundleDiagnosis(BaseModel):
    """Outcome of scanning one bundle receipt."""
    saw_relevant_event: bool = False
    last_operation: Optional[OperationSummary] = None
    lines: list[str] = Field(default_factory=list)

    @property
    def operation_failed(self) -> bool:
        """Bundle landed but its last operation did not succeed."""
        return self.last_operation is not None and not self.last_operation.success


# API
class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    timestamp: int
    entry_point: str
    signatures: int


class DecodeRevertRequest(BaseModel):
    """Request to decode a revert payload."""
    data: str = Field(..., min_length=2)

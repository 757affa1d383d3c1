"""Shared builders for revert payloads, logs and receipts."""
import pytest
from eth_abi import encode
from eth_utils import to_hex

from bundle_diag.decoders.signatures import (
    ERROR_STRING,
    EXECUTE_ERROR,
    PANIC,
    USER_OPERATION_EVENT,
    USER_OPERATION_REVERT_REASON,
    Signature,
)

ENTRY_POINT = "0x4337084D9E255Ff0702461CF8895CE9E3b5Ff108"
SENDER = "0x1111111111111111111111111111111111111111"
PAYMASTER = "0x0000000000000000000000000000000000000000"
OP_HASH = "0x" + "ab" * 32


def encode_error(sig: Signature, *values) -> str:
    return sig.selector + encode([p.type for p in sig.inputs], list(values)).hex()


def address_topic(address: str) -> str:
    return "0x" + "00" * 12 + address[2:].lower()


@pytest.fixture
def error_message():
    def build(message: str) -> str:
        return encode_error(ERROR_STRING, message)
    return build


@pytest.fixture
def panic():
    def build(code: int) -> str:
        return encode_error(PANIC, code)
    return build


@pytest.fixture
def execute_error():
    def build(index: int, inner: str) -> str:
        return encode_error(EXECUTE_ERROR, index, bytes.fromhex(inner[2:]))
    return build


@pytest.fixture
def user_op_event_log():
    def build(success: bool, nonce: int = 0, address: str = ENTRY_POINT,
              sender: str = SENDER, op_hash: str = OP_HASH) -> dict:
        data = encode(
            ["uint256", "bool", "uint256", "uint256"],
            [nonce, success, 21000 * 10**9, 150000],
        )
        return {
            "address": address,
            "topics": [
                USER_OPERATION_EVENT.topic,
                op_hash,
                address_topic(sender),
                address_topic(PAYMASTER),
            ],
            "data": to_hex(data),
        }
    return build


@pytest.fixture
def revert_reason_log():
    def build(revert_reason: str, nonce: int = 0, address: str = ENTRY_POINT) -> dict:
        data = encode(["uint256", "bytes"], [nonce, bytes.fromhex(revert_reason[2:])])
        return {
            "address": address,
            "topics": [
                USER_OPERATION_REVERT_REASON.topic,
                OP_HASH,
                address_topic(SENDER),
            ],
            "data": to_hex(data),
        }
    return build


@pytest.fixture
def rpc_receipt():
    def build(logs: list[dict], status: str = "0x1") -> dict:
        return {
            "transactionHash": "0x" + "cd" * 32,
            "status": status,
            "blockNumber": "0x1a4",
            "gasUsed": "0x5208",
            "logs": logs,
        }
    return build

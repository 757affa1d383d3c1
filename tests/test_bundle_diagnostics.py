"""Tests for bundle receipt diagnosis."""
import json

import httpx
import pytest
from eth_utils import to_checksum_address

from bundle_diag.diagnostics.sink import CollectingSink
from bundle_diag.models.schemas import Receipt
from bundle_diag.pipelines.bundle_diagnostics import (
    MISSING_EVENTS_NOTE,
    diagnose_bundle_tx,
    diagnose_receipt,
)
from bundle_diag.providers.rpc_client import RPCClient, RPCError

from conftest import ENTRY_POINT, OP_HASH, SENDER

OTHER_CONTRACT = "0x2222222222222222222222222222222222222222"


def _diagnose(raw_receipt: dict, entry_point: str = ENTRY_POINT):
    sink = CollectingSink()
    diagnosis = diagnose_receipt(Receipt.from_rpc(raw_receipt), entry_point, sink)
    return diagnosis, sink.lines


def test_single_successful_operation(rpc_receipt, user_op_event_log):
    diagnosis, lines = _diagnose(rpc_receipt([user_op_event_log(success=True, nonce=9)]))

    assert diagnosis.saw_relevant_event is True
    assert diagnosis.last_operation.success is True
    assert diagnosis.last_operation.nonce == "9"
    assert diagnosis.last_operation.sender == to_checksum_address(SENDER)
    assert diagnosis.last_operation.operation_hash == OP_HASH
    assert diagnosis.operation_failed is False
    assert lines[:3] == [
        f"Bundle tx 0x{'cd' * 32}",
        "status=success block=420",
        f"EntryPoint({ENTRY_POINT}) logs: 1",
    ]
    assert lines[3].startswith("UserOperationEvent sender=")
    assert "success=true nonce=9" in lines[3]
    assert "actualGasCost=21000000000000 actualGasUsed=150000" in lines[3]
    assert MISSING_EVENTS_NOTE not in lines
    assert diagnosis.lines == lines


def test_last_operation_event_wins(rpc_receipt, user_op_event_log):
    logs = [
        user_op_event_log(success=True, nonce=1),
        user_op_event_log(success=False, nonce=2),
    ]
    diagnosis, _ = _diagnose(rpc_receipt(logs))

    assert diagnosis.last_operation.success is False
    assert diagnosis.last_operation.nonce == "2"
    assert diagnosis.operation_failed is True


def test_address_filter_is_case_insensitive(rpc_receipt, user_op_event_log):
    log = user_op_event_log(success=True, address=ENTRY_POINT.lower())
    diagnosis, _ = _diagnose(rpc_receipt([log]), entry_point=ENTRY_POINT.upper().replace("0X", "0x"))

    assert diagnosis.saw_relevant_event is True


def test_logs_from_other_contracts(rpc_receipt, user_op_event_log):
    logs = [user_op_event_log(success=True, address=OTHER_CONTRACT)] * 2
    diagnosis, lines = _diagnose(rpc_receipt(logs))

    assert diagnosis.saw_relevant_event is False
    assert diagnosis.last_operation is None
    assert lines.count(MISSING_EVENTS_NOTE) == 1
    assert f"EntryPoint({ENTRY_POINT}) logs: 0" in lines


def test_revert_reason_is_decoded(rpc_receipt, user_op_event_log, revert_reason_log,
                                  execute_error, error_message):
    reason = execute_error(0, error_message("STF"))
    logs = [revert_reason_log(reason, nonce=4), user_op_event_log(success=False, nonce=4)]
    diagnosis, lines = _diagnose(rpc_receipt(logs))

    assert diagnosis.operation_failed is True
    assert lines[3] == (
        f"UserOperationRevertReason sender={to_checksum_address(SENDER)} "
        f"nonce=4 userOpHash={OP_HASH}"
    )
    assert lines[4] == f"revertReason: {reason}"
    assert lines[5] == "Decoded ExecuteError: index=0"
    assert "Inner decoded error: Error message='STF'" in lines


def test_bad_log_does_not_stop_scan(rpc_receipt, user_op_event_log):
    broken = user_op_event_log(success=True, nonce=1)
    broken["data"] = "0x1234"
    logs = [broken, user_op_event_log(success=False, nonce=2)]
    diagnosis, _ = _diagnose(rpc_receipt(logs))

    assert diagnosis.last_operation.nonce == "2"


def test_only_undecodable_logs_emit_note(rpc_receipt):
    logs = [{"address": ENTRY_POINT, "topics": ["0x" + "99" * 32], "data": "0x"}]
    diagnosis, lines = _diagnose(rpc_receipt(logs, status="0x0"))

    assert "status=reverted block=420" in lines
    assert lines[-1] == MISSING_EVENTS_NOTE
    assert diagnosis.last_operation is None


def _client(handler) -> RPCClient:
    return RPCClient("http://rpc.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_diagnose_bundle_tx_fetches_receipt(rpc_receipt, user_op_event_log):
    tx_hash = "0x" + "cd" * 32
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        requests.append(body)
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": body["id"],
                  "result": rpc_receipt([user_op_event_log(success=False)])},
        )

    sink = CollectingSink()
    diagnosis = await diagnose_bundle_tx(_client(handler), tx_hash, ENTRY_POINT, sink)

    assert requests[0]["method"] == "eth_getTransactionReceipt"
    assert requests[0]["params"] == [tx_hash]
    assert diagnosis.operation_failed is True
    assert sink.lines == diagnosis.lines


@pytest.mark.asyncio
async def test_diagnose_bundle_tx_propagates_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": 1,
                  "error": {"code": -32000, "message": "header not found"}},
        )

    with pytest.raises(RPCError) as exc_info:
        await diagnose_bundle_tx(_client(handler), "0x" + "00" * 32, ENTRY_POINT)

    assert exc_info.value.code == -32000
    assert exc_info.value.message == "header not found"

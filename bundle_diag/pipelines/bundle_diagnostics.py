"""Bundle transaction diagnosis from EntryPoint receipt logs."""
import logging
from typing import Optional

from ..config import config
from ..decoders.error_decoder import decode_revert
from ..decoders.event_decoder import LogDecodeError, decode_log
from ..diagnostics.sink import DiagnosticSink, LoggingSink, TeeSink, CollectingSink
from ..models.schemas import (
    BundleDiagnosis,
    OperationExecuted,
    OperationReverted,
    OperationSummary,
    Receipt,
)
from ..providers.rpc_client import RPCClient

logger = logging.getLogger(__name__)

MISSING_EVENTS_NOTE = (
    "No UserOperationEvent found in this bundle tx. It may not be an "
    "EntryPoint v0.8 bundle, or RPC did not return logs."
)


def diagnose_receipt(
    receipt: Receipt,
    entry_point: Optional[str] = None,
    sink: Optional[DiagnosticSink] = None,
) -> BundleDiagnosis:
    """
    Scan a bundle receipt for EntryPoint operation events.

    Args:
        receipt: Receipt of the bundle transaction
        entry_point: EntryPoint address whose logs are decoded
        sink: Receives each diagnostic line

    Returns:
        BundleDiagnosis; the last UserOperationEvent seen wins
    """
    entry_point = entry_point or config.entry_point_address
    collected = CollectingSink()
    out = TeeSink([collected, sink or LoggingSink()])
    diagnosis = BundleDiagnosis()

    out.emit(f"Bundle tx {receipt.transaction_hash}")
    out.emit(
        f"status={'success' if receipt.status else 'reverted'} "
        f"block={receipt.block_number}"
    )

    ep_logs = [
        log for log in receipt.logs
        if log.address.lower() == entry_point.lower()
    ]
    out.emit(f"EntryPoint({entry_point}) logs: {len(ep_logs)}")

    decoded_any = False
    for log in ep_logs:
        try:
            event = decode_log(log)
        except LogDecodeError as e:
            logger.debug(f"Skipping undecodable EntryPoint log: {e}")
            continue

        if isinstance(event, OperationExecuted):
            decoded_any = True
            diagnosis.saw_relevant_event = True
            diagnosis.last_operation = OperationSummary(
                sender=event.sender,
                success=event.success,
                nonce=str(event.nonce),
                operation_hash=event.operation_hash,
            )
            out.emit(
                f"UserOperationEvent sender={event.sender} "
                f"success={str(event.success).lower()} "
                f"nonce={event.nonce} "
                f"paymaster={event.paymaster} "
                f"actualGasCost={event.gas_cost} "
                f"actualGasUsed={event.gas_used} "
                f"userOpHash={event.operation_hash}"
            )

        elif isinstance(event, OperationReverted):
            decoded_any = True
            name = (
                "PostOpRevertReason" if event.phase == "postOp"
                else "UserOperationRevertReason"
            )
            out.emit(
                f"{name} sender={event.sender} nonce={event.nonce} "
                f"userOpHash={event.operation_hash}"
            )
            out.emit(f"revertReason: {event.revert_payload}")
            decode_revert(event.revert_payload, out)

    if not decoded_any:
        out.emit(MISSING_EVENTS_NOTE)

    diagnosis.lines = collected.lines
    return diagnosis


async def diagnose_bundle_tx(
    client: RPCClient,
    tx_hash: str,
    entry_point: Optional[str] = None,
    sink: Optional[DiagnosticSink] = None,
) -> BundleDiagnosis:
    """Fetch a bundle receipt and diagnose it.

    RPC failures propagate to the caller unchanged.
    """
    payload = await client.eth_get_transaction_receipt(tx_hash)
    receipt = Receipt.from_rpc(payload)
    if receipt.transaction_hash is None:
        receipt = receipt.model_copy(update={"transaction_hash": tx_hash})
    return diagnose_receipt(receipt, entry_point=entry_point, sink=sink)

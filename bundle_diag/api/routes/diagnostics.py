"""Diagnosis endpoints."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Path

from ...decoders.error_decoder import decode_revert
from ...diagnostics.sink import LoggingSink
from ...models.schemas import BundleDiagnosis, DecodeResult, DecodeRevertRequest
from ...pipelines.bundle_diagnostics import diagnose_bundle_tx
from ...providers.rpc_client import RPCClient, RPCError, default_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/diagnose", tags=["diagnostics"])

RECEIPT_NOT_FOUND = -32004


def get_rpc_client() -> RPCClient:
    """RPC client dependency."""
    return default_client()


@router.get("/tx/{tx_hash}")
async def diagnose_tx(
    tx_hash: str = Path(..., min_length=66, max_length=66),
    client: RPCClient = Depends(get_rpc_client),
) -> dict:
    """Diagnose a bundle transaction by hash."""
    try:
        diagnosis: BundleDiagnosis = await diagnose_bundle_tx(
            client, tx_hash, sink=LoggingSink(level=logging.DEBUG)
        )
    except RPCError as e:
        logger.error(f"Receipt fetch failed for {tx_hash}: {e}")
        if e.code == RECEIPT_NOT_FOUND:
            raise HTTPException(status_code=404, detail="Transaction receipt not found")
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "tx_hash": tx_hash,
        "saw_relevant_event": diagnosis.saw_relevant_event,
        "last_operation": diagnosis.last_operation,
        "operation_failed": diagnosis.operation_failed,
        "lines": diagnosis.lines,
    }


@router.post("/revert")
async def diagnose_revert(request: DecodeRevertRequest) -> DecodeResult:
    """Decode a revert payload."""
    return decode_revert(request.data)

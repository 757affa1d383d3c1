"""Diagnosis of errors raised while submitting user operations."""
import logging
from typing import Any, Optional

from ..decoders.error_decoder import decode_revert
from ..decoders.revert_extractor import extract_revert_data, resolve_path
from ..diagnostics.sink import DiagnosticSink, LoggingSink
from ..models.schemas import DecodeOutcome, DecodeResult, ErrorDiagnosis

logger = logging.getLogger(__name__)

# Substring in error text -> operator hint
KNOWN_HINTS = {
    "Insufficient Pimlico balance for sponsorship": (
        "Pimlico paymaster sponsorship failed: your Pimlico balance is empty. "
        "Top up your Pimlico account, or run with USE_PAYMASTER=0 and fund "
        "the sender address with ETH to pay gas."
    ),
}


def _error_text(err: Any) -> str:
    parts = [
        resolve_path(err, ("details",)),
        resolve_path(err, ("short_message",)),
        resolve_path(err, ("shortMessage",)),
        resolve_path(err, ("message",)),
    ]
    if isinstance(err, BaseException):
        parts.append(str(err))
    return " ".join(p for p in parts if isinstance(p, str))


def find_hints(err: Any) -> list[str]:
    """Operator hints for known failure messages."""
    text = _error_text(err)
    return [hint for needle, hint in KNOWN_HINTS.items() if needle in text]


def diagnose_error(err: Any, sink: Optional[DiagnosticSink] = None) -> ErrorDiagnosis:
    """Extract, decode and annotate a raw submission error. Never raises."""
    sink = sink or LoggingSink(level=logging.ERROR)

    revert_data = extract_revert_data(err)
    if revert_data is None:
        result = DecodeResult(outcome=DecodeOutcome.EXTRACTION_MISS)
    else:
        result = decode_revert(revert_data, sink)
        if result.outcome in (DecodeOutcome.SELECTOR_MISMATCH, DecodeOutcome.MALFORMED):
            logger.debug(f"Revert data not decoded ({result.outcome.value}): {revert_data}")

    hints = find_hints(err)
    for hint in hints:
        sink.emit(hint)

    return ErrorDiagnosis(revert_data=revert_data, result=result, hints=hints)

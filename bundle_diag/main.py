"""Bundle diagnostics command line entry point.

Usage:
    python -m bundle_diag.main <bundle-tx-hash>
    python -m bundle_diag.main --revert <hex-revert-data>
"""
import asyncio
import logging
import sys
from typing import Optional

from .config import config
from .decoders.error_decoder import decode_revert
from .diagnostics.sink import LoggingSink
from .pipelines.bundle_diagnostics import diagnose_bundle_tx
from .pipelines.error_diagnostics import diagnose_error
from .providers.rpc_client import RPCError, default_client

logger = logging.getLogger(__name__)

USAGE = "Usage: python -m bundle_diag.main <tx-hash> | --revert <hex>"

OPERATION_FAILED_NOTE = (
    "UserOperation failed (bundle tx can still be SUCCESS on-chain). "
    "No state change from the operation occurs in this case."
)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def run_tx(tx_hash: str) -> int:
    """Diagnose one bundle transaction, returning the exit code."""
    sink = LoggingSink()
    client = default_client()

    try:
        diagnosis = await diagnose_bundle_tx(client, tx_hash, sink=sink)
    except RPCError as e:
        logger.error(f"Failed to fetch receipt for {tx_hash}: {e}")
        diagnose_error(e)
        return 1

    if diagnosis.operation_failed:
        sink.emit(OPERATION_FAILED_NOTE)
    return 0


def run_revert(revert_data: str) -> int:
    """Decode a revert payload given on the command line."""
    result = decode_revert(revert_data, LoggingSink())
    if not result.decoded:
        logger.warning(f"Revert data not decoded: {result.outcome.value}")
    return 0


async def main(argv: Optional[list[str]] = None) -> int:
    """Main async entry point."""
    args = sys.argv[1:] if argv is None else argv

    if args and args[0] == "--revert":
        if len(args) < 2:
            logger.error(USAGE)
            return 2
        return run_revert(args[1])

    tx_hash = args[0] if args else config.diag_tx_hash
    if not tx_hash:
        logger.error(USAGE)
        return 2

    return await run_tx(tx_hash)


def cli() -> None:
    """Console script entry point."""
    configure_logging()
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    cli()

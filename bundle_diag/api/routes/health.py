"""Liveness endpoint reporting the decoding setup."""
import time
from fastapi import APIRouter

from ...config import config
from ...decoders.signatures import CATALOG
from ...models.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report the EntryPoint being decoded and the catalog size."""
    return HealthResponse(
        timestamp=int(time.time()),
        entry_point=config.entry_point_address,
        signatures=len(CATALOG),
    )

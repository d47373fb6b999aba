from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from pairwatch.api.deps import get_holder, get_refresh_service
from pairwatch.api.schemas.market import SnapshotResponse
from pairwatch.exceptions import EmptyPayload, TransportError, UnsupportedFormat
from pairwatch.services.refresh import RefreshService
from pairwatch.services.snapshot import SnapshotHolder

router = APIRouter(prefix="/api/market", tags=["market"])

RefreshDep = Annotated[RefreshService, Depends(get_refresh_service)]
HolderDep = Annotated[SnapshotHolder, Depends(get_holder)]


@router.post("/refresh/{source_id}", response_model=SnapshotResponse)
async def refresh_source(source_id: str, service: RefreshDep) -> SnapshotResponse:
    """Fetch one source and make it the current snapshot."""
    try:
        snapshot = await service.refresh(source_id)
    except TransportError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    except (EmptyPayload, UnsupportedFormat) as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return SnapshotResponse.from_snapshot(snapshot)


@router.get("/snapshot", response_model=SnapshotResponse)
async def current_snapshot(holder: HolderDep) -> SnapshotResponse:
    return SnapshotResponse.from_snapshot(holder.current)

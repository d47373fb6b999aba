from typing import Annotated, AsyncIterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from pairwatch.api.deps import get_catalog, get_prober
from pairwatch.api.schemas.sources import ExchangeList, ProbeResponse
from pairwatch.domain.models import ExchangeListing
from pairwatch.exceptions import ExternalServiceError
from pairwatch.infra.exchange.prober import ValidityProber
from pairwatch.services.sources import SourceCatalog

router = APIRouter(prefix="/api/sources", tags=["sources"])

CatalogDep = Annotated[SourceCatalog, Depends(get_catalog)]
ProberDep = Annotated[ValidityProber, Depends(get_prober)]


@router.get("", response_model=ExchangeList)
async def list_exchanges(catalog: CatalogDep) -> ExchangeList:
    try:
        exchanges = await catalog.list_exchanges()
    except ExternalServiceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return ExchangeList(exchanges=exchanges, total=len(exchanges))


@router.get("/valid")
async def list_valid_sources(
    catalog: CatalogDep,
    ids: Optional[str] = Query(None, description="Comma-separated source ids (default: well-known exchanges)"),
) -> StreamingResponse:
    """Probe candidates one by one, streaming one NDJSON progress line per probe."""
    if ids:
        candidates = [ExchangeListing(id=i.strip(), name=i.strip()) for i in ids.split(",") if i.strip()]
    else:
        candidates = list(catalog.default_sources)

    async def _lines() -> AsyncIterator[str]:
        async for progress in catalog.list_valid_sources(candidates):
            yield progress.model_dump_json() + "\n"

    return StreamingResponse(_lines(), media_type="application/x-ndjson")


@router.get("/default", response_model=Optional[ExchangeListing])
async def default_source(catalog: CatalogDep) -> Optional[ExchangeListing]:
    """First well-known exchange that currently probes valid, or null."""
    return await catalog.find_default_source()


@router.get("/{source_id}/probe", response_model=ProbeResponse)
async def probe_source(source_id: str, prober: ProberDep) -> ProbeResponse:
    return ProbeResponse(source_id=source_id, valid=await prober.probe(source_id))

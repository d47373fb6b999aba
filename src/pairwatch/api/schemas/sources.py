from pydantic import BaseModel

from pairwatch.domain.models import ExchangeListing


class ExchangeList(BaseModel):
    exchanges: list[ExchangeListing]
    total: int


class ProbeResponse(BaseModel):
    source_id: str
    valid: bool

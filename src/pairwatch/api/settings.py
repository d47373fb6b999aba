from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from pairwatch.api.deps import get_watchlist
from pairwatch.api.schemas.settings import SettingResponse, SettingValue
from pairwatch.services.watchlist import Watchlist

router = APIRouter(prefix="/api/settings", tags=["settings"])

WatchlistDep = Annotated[Watchlist, Depends(get_watchlist)]


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(key: str, watchlist: WatchlistDep) -> SettingResponse:
    value = await watchlist.get_setting(key)
    if value is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Setting {key!r} not found")
    return SettingResponse(key=key, value=value)


@router.put("/{key}", response_model=SettingResponse)
async def set_setting(key: str, body: SettingValue, watchlist: WatchlistDep) -> SettingResponse:
    await watchlist.set_setting(key, body.value)
    return SettingResponse(key=key, value=body.value)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_setting(key: str, watchlist: WatchlistDep) -> None:
    if not await watchlist.delete_setting(key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Setting {key!r} not found")

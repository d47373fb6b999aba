from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from pairwatch.api.deps import get_watchlist
from pairwatch.api.schemas.favorites import FavoriteCreate, FavoriteList
from pairwatch.domain.models import FavoriteEntry
from pairwatch.services.watchlist import Watchlist

router = APIRouter(prefix="/api/favorites", tags=["favorites"])

WatchlistDep = Annotated[Watchlist, Depends(get_watchlist)]


@router.get("", response_model=FavoriteList)
async def list_favorites(watchlist: WatchlistDep) -> FavoriteList:
    favorites = await watchlist.list_favorites()
    return FavoriteList(favorites=favorites, total=len(favorites))


@router.post("", response_model=FavoriteEntry, status_code=status.HTTP_201_CREATED)
async def add_favorite(body: FavoriteCreate, watchlist: WatchlistDep) -> FavoriteEntry:
    return await watchlist.add_favorite(body.symbol)


@router.post("/cleanup")
async def cleanup_favorites(watchlist: WatchlistDep) -> dict:
    """Remove duplicate and half-empty symbols."""
    return {"removed": await watchlist.cleanup_favorites()}


@router.delete("/{symbol:path}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(symbol: str, watchlist: WatchlistDep) -> None:
    removed = await watchlist.remove_favorite(symbol)
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{symbol} is not a favorite")

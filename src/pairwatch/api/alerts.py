import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from pairwatch.alerts.events import AlertEventBus
from pairwatch.api.deps import get_bus, get_watchlist
from pairwatch.api.schemas.alerts import AlertCreate, AlertCreated, AlertEnabledUpdate, AlertIdentityBody, AlertList
from pairwatch.exceptions import DuplicateAlertError, InvalidAlertError
from pairwatch.services.watchlist import Watchlist

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/alerts", tags=["alerts"])

WatchlistDep = Annotated[Watchlist, Depends(get_watchlist)]


@router.get("", response_model=AlertList)
async def list_alerts(watchlist: WatchlistDep, enabled_only: bool = Query(False)) -> AlertList:
    alerts = await watchlist.list_alerts(enabled_only=enabled_only)
    return AlertList(alerts=alerts, total=len(alerts))


@router.post("", response_model=AlertCreated, status_code=status.HTTP_201_CREATED)
async def create_alert(body: AlertCreate, watchlist: WatchlistDep) -> AlertCreated:
    """Create an alert. would_trigger_immediately warns that it fires on the next evaluation."""
    immediate = watchlist.would_trigger_immediately(body.symbol, body.target_price, body.direction)
    try:
        alert = await watchlist.create_alert(body.symbol, body.target_price, body.direction, body.message)
    except InvalidAlertError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except DuplicateAlertError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return AlertCreated(alert=alert, would_trigger_immediately=immediate)


@router.delete("")
async def clear_alerts(watchlist: WatchlistDep) -> dict:
    return {"removed": await watchlist.clear_alerts()}


@router.post("/delete")
async def delete_alert(body: AlertIdentityBody, watchlist: WatchlistDep) -> dict:
    removed = await watchlist.delete_alert(body.to_alert())
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found")
    return {"removed": removed}


@router.patch("/enabled")
async def set_alert_enabled(body: AlertEnabledUpdate, watchlist: WatchlistDep) -> dict:
    updated = await watchlist.set_alert_enabled(body.to_alert(enabled=body.enabled), body.enabled)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found")
    return {"updated": updated, "enabled": body.enabled}


@router.websocket("/stream")
async def alert_stream(websocket: WebSocket, bus: AlertEventBus = Depends(get_bus)) -> None:
    """Push every AlertTriggered event to the client until it disconnects."""
    await websocket.accept()
    stop_event = asyncio.Event()
    subscription = bus.subscribe(stop_event)
    try:
        async for event in subscription:
            await websocket.send_json(event.model_dump(mode="json"))
    except WebSocketDisconnect:
        logger.debug("Alert stream client disconnected")
    finally:
        stop_event.set()
        subscription.close()

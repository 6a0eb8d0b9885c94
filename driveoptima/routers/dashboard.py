from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse

from driveoptima.config import get_settings
from driveoptima.dashboard import DASHBOARD_HTML
from driveoptima.websocket import manager

router = APIRouter(tags=["dashboard"])


@router.get("/", response_class=HTMLResponse)
async def dashboard():
    """
    Serve the single-page dashboard
    """
    return HTMLResponse(DASHBOARD_HTML)


@router.websocket("/ws")
async def session_updates(websocket: WebSocket):
    """
    Push session changes of the signed-in user to the browser
    """
    user = websocket.cookies.get(get_settings().cookie_name)
    if not user:
        await websocket.close(code=1008)
        return

    await manager.connect(user, websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(user, websocket)

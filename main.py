import logging
import os
import secrets

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import Response

from overlays import config
from overlays.errors import CropOutOfBoundsError, DecodeError, NetworkError, OverlayError
from overlays.models import OverlayRequest
from overlays.pipeline import process_image_overlay

# --- Logging ---
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "You are not authorized to access this resource"

# Pipeline error kinds that are the caller's fault or an upstream failure.
ERROR_STATUS = {
    NetworkError: 502,
    DecodeError: 422,
    CropOutOfBoundsError: 422,
}

# --- App Init ---
app = FastAPI(title="Caption Overlay Service", version="0.1.0")


# --- Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    client_host = request.client.host if request.client else "unknown"
    logger.info("%s %s from %s", request.method, request.url.path, client_host)
    return await call_next(request)


# --- Auth ---
def require_api_key(request: Request) -> None:
    """Check the Authorization header against OVERLAY_API_KEY.

    The header may carry the key bare or as a ``Bearer`` token.
    """
    api_key = os.getenv("OVERLAY_API_KEY", "")
    if not api_key:
        logger.error("OVERLAY_API_KEY is not set; rejecting request.")
        raise HTTPException(status_code=500, detail="An error occurred")
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        header = header[len("bearer "):].strip()
    if not header or not secrets.compare_digest(header.encode(), api_key.encode()):
        raise HTTPException(status_code=401, detail=UNAUTHORIZED_MESSAGE)


# --- Endpoints ---
@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/v1/images/overlays", dependencies=[Depends(require_api_key)])
async def add_image_overlay(body: OverlayRequest):
    """Composite the caption lines onto the base image and return a PNG."""
    try:
        png_bytes = await process_image_overlay(body)
    except OverlayError as e:
        status = ERROR_STATUS.get(type(e), 500)
        raise HTTPException(status_code=status, detail=e.to_dict())
    return Response(content=png_bytes, media_type="image/png")

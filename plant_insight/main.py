import logging
import os
from typing import Any, AsyncIterator, Dict, Optional

from dotenv import load_dotenv
load_dotenv()

import httpx
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from . import __version__
from .errors import ImageTooLargeError, MissingImageError, PlantAnalysisError, UnsupportedImageError
from .models import FailureResult, PlantAnalysis
from .services.analysis import analyze_plant
from .services.gateway import get_gateway_api_key, get_gateway_timeout
from .services.images import to_data_uri

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

app = FastAPI(title="Plant Insight API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=CORS_ALLOW_HEADERS,
)


def get_max_upload_bytes() -> int:
    try:
        return int(os.getenv("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES))
    except ValueError:
        return DEFAULT_MAX_UPLOAD_BYTES


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Per-request client for the AI gateway; overridden in tests."""
    async with httpx.AsyncClient(timeout=get_gateway_timeout()) as client:
        yield client


def _json(content: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


@app.exception_handler(PlantAnalysisError)
async def plant_analysis_error_handler(request: Request, exc: PlantAnalysisError):
    logger.warning("Plant analysis failed on %s: %s (%s)", request.url.path, exc.kind, exc.status_code)
    return _json(exc.to_payload(), status_code=exc.status_code)


@app.get("/healthz")
def healthz():
    return {"status": "ok", "ai_configured": bool(get_gateway_api_key())}


@app.options("/api/analyze-plant")
@app.options("/api/analyze-plant/upload")
def analyze_plant_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


async def _run_analysis(payload: Any, client: httpx.AsyncClient) -> JSONResponse:
    try:
        result = await analyze_plant(payload, client)
    except PlantAnalysisError:
        raise
    except Exception as e:
        logger.exception("Error analyzing plant: %s", e)
        return _json({"error": str(e) or "Unknown error occurred"}, status_code=500)
    return _json(result)


@app.post(
    "/api/analyze-plant",
    responses={200: {"model": PlantAnalysis}, 400: {"model": FailureResult}, 500: {"model": FailureResult}},
)
async def analyze_plant_endpoint(request: Request, client: httpx.AsyncClient = Depends(get_http_client)):
    """Identify the plant in `imageBase64` and return agronomic details.

    Body: {"imageBase64": "data:image/...;base64,...", "acres": 3}
    An unparsable model reply is still a 200 carrying `rawResponse` and `error`.
    """
    try:
        payload = await request.json()
    except Exception as e:
        logger.error("Invalid request body: %s", e)
        return _json({"error": str(e) or "Invalid request body"}, status_code=500)
    return await _run_analysis(payload, client)


@app.post(
    "/api/analyze-plant/upload",
    responses={200: {"model": PlantAnalysis}, 400: {"model": FailureResult}, 413: {"model": FailureResult}},
)
async def analyze_plant_upload(
    file: Optional[UploadFile] = File(None),
    acres: Optional[str] = Form(None),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Multipart variant: the photo arrives as a file and is forwarded as a data URI."""
    if file is None:
        raise MissingImageError()
    content_type = (file.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise UnsupportedImageError()

    contents = await file.read()
    if not contents:
        raise MissingImageError()
    if len(contents) > get_max_upload_bytes():
        raise ImageTooLargeError()

    payload = {"imageBase64": to_data_uri(contents, content_type), "acres": acres}
    return await _run_analysis(payload, client)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

# app/main.py
import logging
import os
from pathlib import Path
from tempfile import mkstemp

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.background import BackgroundTask

from .config import Settings, get_settings
from .errors import InvalidAddress, UpstreamError
from .logging_setup import configure_logging
from .pdf_report.build import build_pdf
from .service import check_wallet
from .sources.chain import ChainDataClient
from .storage.snapshots import SnapshotCache

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="TRON Wallet Check API", version="0.2")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


async def get_chain_client(settings: Settings = Depends(get_settings)):
    # one HTTP client per request, nothing shared across requests
    async with httpx.AsyncClient(timeout=settings.http_timeout) as http:
        yield ChainDataClient(settings, http)


def get_snapshot_cache(settings: Settings = Depends(get_settings)) -> SnapshotCache:
    return SnapshotCache(settings.snapshot_dir, settings.snapshot_ttl_minutes)


@app.exception_handler(InvalidAddress)
async def invalid_address_handler(request: Request, exc: InvalidAddress):
    return JSONResponse(status_code=400, content={"error": f"{exc.message}. Expected a base58 address starting with T."})


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error("upstream failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": f"Upstream provider error ({exc.provider})",
                                                  "details": exc.to_dict()})


@app.api_route("/health", methods=["GET", "HEAD"])
@app.get("/api/health")
async def health(request: Request):
    if request.method == "HEAD":
        return Response(status_code=200)
    return {"ok": True}


async def _summary(address: str, client, settings: Settings, cache: SnapshotCache) -> dict:
    result = await check_wallet(address, client, settings)
    try:
        cache.save(result["address"], result)
    except OSError as e:
        # a failed cache write never fails the summary
        logger.warning("could not cache snapshot for %s: %s", result["address"], e)
    return result


@app.get("/api/wallet/{address}/summary")
@app.get("/api/address/{address}/summary")
async def wallet_summary(address: str, client=Depends(get_chain_client),
                         settings: Settings = Depends(get_settings),
                         cache: SnapshotCache = Depends(get_snapshot_cache)):
    return await _summary(address, client, settings, cache)


async def _address_from_request(request: Request) -> str:
    if request.method == "GET":
        return request.query_params.get("address", "")
    ctype = request.headers.get("content-type", "")
    if "application/json" in ctype:
        try:
            body = await request.json()
        except ValueError:
            return ""
        return body.get("address", "") if isinstance(body, dict) else ""
    if "form" in ctype:
        form = await request.form()
        return str(form.get("address", ""))
    return request.query_params.get("address", "")


@app.api_route("/api/check", methods=["GET", "POST"])
@app.api_route("/check", methods=["GET", "POST"])
async def legacy_check(request: Request, client=Depends(get_chain_client),
                       settings: Settings = Depends(get_settings),
                       cache: SnapshotCache = Depends(get_snapshot_cache)):
    address = await _address_from_request(request)
    return await _summary(address, client, settings, cache)


@app.get("/api/wallet/{address}/report")
@app.get("/report/{address}")
async def report(address: str, client=Depends(get_chain_client),
                 settings: Settings = Depends(get_settings),
                 cache: SnapshotCache = Depends(get_snapshot_cache)):
    snap = cache.load(address)
    if snap is None:
        snap = await _summary(address, client, settings, cache)
    fd, path = mkstemp(suffix=".pdf")
    os.close(fd)
    build_pdf(snap, path)
    try:
        cache.clear(address)
    except OSError as e:
        logger.warning("could not clear snapshot for %s: %s", address, e)
    return FileResponse(path, media_type="application/pdf", filename=f"tron-risk-{address}.pdf",
                        background=BackgroundTask(os.remove, path))


@app.get("/{full_path:path}", include_in_schema=False)
async def frontend(full_path: str, settings: Settings = Depends(get_settings)):
    if full_path.startswith("api/"):
        raise HTTPException(404, detail="Not found")
    root = Path(settings.static_dir).resolve()
    if full_path:
        candidate = (root / full_path).resolve()
        if candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
    index = root / "index.html"
    if index.is_file():
        return FileResponse(index)
    raise HTTPException(404, detail="Frontend not built")

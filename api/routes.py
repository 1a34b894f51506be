"""Price import/export endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from api.config import Settings
from api.dependencies import get_service, get_settings
from ingestion.archive import spooled_upload
from ingestion.csv_ingest import ingest_archive
from ingestion.export import export_archive
from ingestion.models import ResponseStats
from pricedb.exceptions import MalformedArchiveError, SerializationError
from pricedb.service import DatabaseService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v0"
EXPORT_FILENAME = "prices.zip"


async def _ingest_body(
    request: Request, service: DatabaseService, settings: Settings
) -> ResponseStats:
    with spooled_upload(settings.upload_spool_max_bytes) as staged:
        async for chunk in request.stream():
            await run_in_threadpool(staged.write, chunk)
        await run_in_threadpool(staged.seek, 0)
        return await run_in_threadpool(ingest_archive, service, staged)


async def _ingest_form(request: Request, service: DatabaseService) -> ResponseStats:
    async with request.form() as form:
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            upload = next((v for v in form.values() if isinstance(v, UploadFile)), None)
        if upload is None:
            raise MalformedArchiveError("read form", "no file part in multipart body")
        logger.debug("Ingesting multipart upload %s", upload.filename)
        return await run_in_threadpool(ingest_archive, service, upload.file)


def build_prices_router() -> APIRouter:
    """Build the /api/v0/prices router.

    POST accepts a zip archive either as the raw request body or as a file
    part of a multipart form; GET returns the whole table as prices.zip.
    """
    router = APIRouter(prefix=API_PREFIX, tags=["prices"])

    @router.post("/prices", response_model=ResponseStats, response_class=JSONResponse)
    async def upload_prices(
        request: Request,
        service: DatabaseService = Depends(get_service),
        settings: Settings = Depends(get_settings),
    ) -> JSONResponse:
        """Ingest a zipped CSV and report table-wide totals."""
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("multipart/form-data"):
            stats = await _ingest_form(request, service)
        else:
            stats = await _ingest_body(request, service, settings)

        try:
            return JSONResponse(stats.model_dump())
        except ValueError as e:
            # Non-finite totals (NaN/Inf prices) are not valid JSON.
            raise SerializationError("encode json") from e

    @router.get("/prices", response_class=Response)
    def download_prices(service: DatabaseService = Depends(get_service)) -> Response:
        """Download every stored price as data.csv inside prices.zip."""
        archive = export_archive(service)
        return Response(
            content=archive,
            media_type="application/zip",
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    return router

"""
Course Asset Uploads
Thumbnails and promo videos stored in GridFS, served back by path
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse
from motor.motor_asyncio import AsyncIOMotorGridFSBucket
from gridfs.errors import NoFile
from typing import Optional
import logging
import re
import time

from grove.config import PUBLIC_BASE_URL, UPLOAD_MAX_BYTES, UPLOAD_CHUNK_BYTES
from grove.courses.dependencies import get_bucket

router = APIRouter(tags=["Uploads"])
logger = logging.getLogger(__name__)


def build_storage_path(original_name: str) -> str:
    """public/<epoch millis>-<name with whitespace replaced>"""
    safe_name = re.sub(r"\s", "_", original_name or "upload")
    return f"public/{int(time.time() * 1000)}-{safe_name}"


@router.post("/upload")
async def upload_asset(
    file: Optional[UploadFile] = File(None),
    bucket: AsyncIOMotorGridFSBucket = Depends(get_bucket)
):
    if file is None:
        return JSONResponse(status_code=400, content={"error": "No file uploaded"})

    # Read in chunks so an oversized upload is refused early
    data = bytearray()
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        data.extend(chunk)
        if len(data) > UPLOAD_MAX_BYTES:
            return JSONResponse(status_code=413, content={"error": "File too large"})

    file_path = build_storage_path(file.filename)
    content_type = file.content_type or "application/octet-stream"

    try:
        await bucket.upload_from_stream(
            file_path,
            bytes(data),
            metadata={"contentType": content_type}
        )
    except Exception as e:
        logger.exception("Upload error")
        return JSONResponse(status_code=500, content={"error": str(e)})

    logger.info("Stored %s (%d bytes)", file_path, len(data))
    return {"url": f"{PUBLIC_BASE_URL}/api/files/{file_path}"}


@router.get("/files/{file_path:path}")
async def download_asset(
    file_path: str,
    bucket: AsyncIOMotorGridFSBucket = Depends(get_bucket)
):
    try:
        grid_out = await bucket.open_download_stream_by_name(file_path)
    except NoFile:
        return JSONResponse(status_code=404, content={"error": "File not found"})

    metadata = grid_out.metadata or {}

    async def iter_chunks():
        while True:
            chunk = await grid_out.readchunk()
            if not chunk:
                break
            yield chunk

    return StreamingResponse(
        iter_chunks(),
        media_type=metadata.get("contentType", "application/octet-stream")
    )

"""
FastAPI Routes for favfav Server
"""
from typing import Dict, Optional
import asyncio
import threading

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from loguru import logger
from starlette.datastructures import UploadFile

from bundle.assembler import generate_bundle
from config import settings
from errors import (
    BuildCancelledError,
    DecodeError,
    EncodeError,
    FaviconError,
    InvalidOptionsError,
    NoSourceError,
)
from ico.ico_encoder import encode_ico, read_ico_directory
from imaging.source_image import SourceImage, load_source
from models import BuildMode, PlatformOptions
from planning.asset_plan import ANDROID_SIZES, APPLE_SIZES, CORE_SIZES, WINDOWS_SIZES

# Create router
router = APIRouter()

SIZE_FIELD_PREFIX = "size-"
ICO_FIELD_PREFIX = "ico-png-"


# ============================================================================
# Helpers
# ============================================================================


def _http_error(error: FaviconError) -> HTTPException:
    """Translate a pipeline error into an HTTP failure"""
    if isinstance(error, BuildCancelledError):
        return HTTPException(status_code=504, detail=str(error))
    if isinstance(error, (NoSourceError, InvalidOptionsError, DecodeError, EncodeError)):
        return HTTPException(status_code=400, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def _form_flag(value) -> bool:
    return str(value or "").strip().lower() == "true"


def _form_text(value, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    return default


async def _read_upload(upload: UploadFile, field: str) -> bytes:
    # Read one byte past the limit so oversized uploads never load in full
    data = await upload.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"{field}: upload exceeds {settings.max_upload_size_mb} MB",
        )
    return data


async def _collect_sources(form, mode: BuildMode):
    """Pull the source image(s) for the chosen mode out of the form"""
    if mode is BuildMode.SINGLE_SOURCE:
        upload = form.get("image")
        if not isinstance(upload, UploadFile):
            raise NoSourceError("No image uploaded")
        data = await _read_upload(upload, "image")
        if not data:
            raise NoSourceError("No image uploaded")
        return load_source(data, label=upload.filename or "image")

    sources: Dict[int, SourceImage] = {}
    for key, value in form.multi_items():
        if not key.startswith(SIZE_FIELD_PREFIX) or not isinstance(value, UploadFile):
            continue
        try:
            size = int(key[len(SIZE_FIELD_PREFIX):])
        except ValueError:
            raise InvalidOptionsError(f"Invalid size field: {key}") from None
        data = await _read_upload(value, key)
        if data:
            sources[size] = load_source(data, label=key)

    if not sources:
        raise NoSourceError("No images provided in per-size mode")
    return sources


# ============================================================================
# Health & Info
# ============================================================================


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "max_workers": settings.max_workers}


@router.get("/info")
async def get_info():
    """Get server information"""
    return {
        "server": "favfav Server",
        "version": "1.0.0",
        "sizes": {
            "core": list(CORE_SIZES),
            "apple": list(APPLE_SIZES),
            "android": list(ANDROID_SIZES),
            "windows": list(WINDOWS_SIZES),
        },
        "config": {
            "core_includes_512": settings.core_includes_512,
            "max_upload_size_mb": settings.max_upload_size_mb,
            "build_timeout_seconds": settings.build_timeout_seconds,
        },
    }


# ============================================================================
# Generation
# ============================================================================


@router.post("/generate-favicon")
async def generate_favicon(request: Request):
    """Build the full favicon ZIP from uploaded image(s)"""
    try:
        async with request.form() as form:
            mode = BuildMode.parse(form.get("mode") or BuildMode.SINGLE_SOURCE)
            sources = await _collect_sources(form, mode)

            core_512 = form.get("coreIncludes512")
            options = PlatformOptions(
                include_apple=_form_flag(form.get("includeApple")),
                include_android=_form_flag(form.get("includeAndroid")),
                include_windows=_form_flag(form.get("includeWindows")),
                app_name=_form_text(form.get("appName"), settings.default_app_name),
                short_name=_form_text(form.get("shortName"), settings.default_short_name),
                theme_color=_form_text(form.get("themeColor"), settings.default_theme_color),
                core_includes_512=settings.core_includes_512 if core_512 is None else _form_flag(core_512),
            )
    except FaviconError as e:
        logger.warning(f"Rejected favicon request: {e}")
        raise _http_error(e)

    cancel_event = threading.Event()
    loop = asyncio.get_event_loop()
    build = loop.run_in_executor(None, generate_bundle, mode, sources, options, cancel_event)

    try:
        bundle = await asyncio.wait_for(build, timeout=settings.build_timeout_seconds)
    except asyncio.TimeoutError:
        cancel_event.set()
        logger.error(f"⏱️  Favicon build exceeded {settings.build_timeout_seconds}s")
        raise HTTPException(status_code=504, detail="Favicon build timed out")
    except FaviconError as e:
        raise _http_error(e)
    except Exception as e:
        logger.error(f"Favicon generation error: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return Response(
        content=bundle.archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{settings.archive_filename}"'},
    )


@router.post("/generate-ico")
async def generate_ico(request: Request):
    """Pack every ico-png-* upload, in form order, into one favicon.ico"""
    images = []
    async with request.form() as form:
        for key, value in form.multi_items():
            if key.startswith(ICO_FIELD_PREFIX) and isinstance(value, UploadFile):
                images.append(await _read_upload(value, key))

    if not images:
        raise HTTPException(status_code=400, detail="No PNGs provided for ICO generation.")

    try:
        ico = encode_ico(images)
    except FaviconError as e:
        logger.warning(f"ICO generation rejected: {e}")
        raise _http_error(e)

    return Response(content=ico, media_type="image/x-icon")


@router.post("/inspect-ico")
async def inspect_ico(request: Request):
    """List the directory entries of an uploaded .ico"""
    async with request.form() as form:
        upload: Optional[UploadFile] = form.get("file")
        if not isinstance(upload, UploadFile):
            raise HTTPException(status_code=400, detail="No ICO file uploaded")
        data = await _read_upload(upload, "file")

    try:
        entries = read_ico_directory(data)
    except FaviconError as e:
        raise _http_error(e)

    return {
        "count": len(entries),
        "images": [
            {"width": e.width, "height": e.height, "bit_count": e.bit_count, "size": e.size, "offset": e.offset}
            for e in entries
        ],
    }

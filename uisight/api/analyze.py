"""POST /api/analyze — full pipeline analysis of one screenshot."""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import time
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from uisight.config import Settings
from uisight.dependencies import get_settings
from uisight.engine.analyzer import context_to_result
from uisight.engine.context import AnalysisContext
from uisight.engine.pipeline import create_pipeline
from uisight.engine.pixels import PixelBuffer
from uisight.models.requests import AnalyzeRequest
from uisight.models.responses import AnalyzeResponse
from uisight.utils.image_io import ImageDecodeError, decode_image

router = APIRouter()


_SENTINEL = object()  # marks end of queue


def decode_payload(image: str, settings: Settings) -> PixelBuffer:
    """Base64 (or ``data:image/...;base64,`` URL) → PixelBuffer.

    Raises ImageDecodeError for bad base64 as well as undecodable images.
    """
    if image.startswith("data:"):
        _, _, image = image.partition(",")
    try:
        raw = base64.b64decode(image, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"invalid base64 payload: {e}") from e
    return decode_image(raw, max_bytes=settings.max_image_bytes, max_pixels=settings.max_image_pixels)


def run_pipeline(ctx: AnalysisContext) -> AnalysisContext:
    create_pipeline(ctx.config).run(ctx)
    return ctx


def _response(ctx: AnalysisContext, start: float) -> AnalyzeResponse:
    result = context_to_result(ctx)
    ctx.release()
    elapsed = (time.perf_counter() - start) * 1000
    return AnalyzeResponse(
        result=result,
        processing_time_ms=round(elapsed, 1),
        transforms_completed=len(ctx.completed_transforms),
        transforms_failed=len(ctx.errors),
        errors=ctx.errors,
    )


async def _stream_analyze(req: AnalyzeRequest, settings: Settings) -> AsyncGenerator[str, None]:
    """Drive pipeline.run_streaming() in a thread, yielding SSE events as they arrive."""
    start = time.perf_counter()
    loop = asyncio.get_running_loop()

    try:
        pixels = await loop.run_in_executor(None, decode_payload, req.image, settings)
    except ImageDecodeError as e:
        data = json.dumps({"type": "error", "message": str(e)})
        yield f"event: error\ndata: {data}\n\n"
        return

    ctx = AnalysisContext(pixels=pixels, options=req.options)
    pipeline = create_pipeline(ctx.config)
    queue: asyncio.Queue = asyncio.Queue()

    def _run_pipeline() -> None:
        """Sync pipeline in thread — pushes progress dicts onto the async queue."""
        try:
            for progress in pipeline.run_streaming(ctx):
                loop.call_soon_threadsafe(queue.put_nowait, progress)
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    # Start pipeline in a thread so the event loop stays free to flush SSE
    loop.run_in_executor(None, _run_pipeline)

    while True:
        item = await queue.get()
        if item is _SENTINEL:
            break
        yield f"event: progress\ndata: {json.dumps(item)}\n\n"

    response = _response(ctx, start)
    yield f"event: result\ndata: {response.model_dump_json()}\n\n"

    yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"


@router.post("/analyze/stream")
async def analyze_stream(
    req: AnalyzeRequest,
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    return StreamingResponse(
        _stream_analyze(req, settings),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    req: AnalyzeRequest,
    settings: Settings = Depends(get_settings),
) -> AnalyzeResponse:
    start = time.perf_counter()

    loop = asyncio.get_running_loop()
    try:
        pixels = await loop.run_in_executor(None, decode_payload, req.image, settings)
    except ImageDecodeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    # CPU-bound; keep the event loop free for other requests.
    ctx = AnalysisContext(pixels=pixels, options=req.options)
    await loop.run_in_executor(None, run_pipeline, ctx)
    return _response(ctx, start)

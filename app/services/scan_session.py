# app/services/scan_session.py
"""
Scan session — one camera acquisition that ends in at most one decoded payload.

The frame source is an async context manager yielding frames (a browser
upload stream, a cv2 capture wrapped in a thread, a test fixture). The
decoder turns one frame into text, or None when no code is visible.

The source is released as soon as a payload is accepted, when cancel() is
called (even while the source is blocked waiting for a frame), and on any
error or teardown — so later frames can never produce a second proposal for
the same session.

The HTTP API does not use this: browsers decode on the client and post the
text to /scan. ScanSession is the hook for server-attached cameras, e.g. a
kiosk process that wraps its capture device as the frame source and feeds
the returned payload into scan_classifier.classify().
"""

import asyncio
from typing import Any, AsyncContextManager, Callable, Optional
from app.errors import DecodeError, ResourceUnavailable
from app.schemas.identity import IdentityPayload
from app.services.identity_codec import decode_payload
from app.utils.logger import get_logger

logger = get_logger(__name__)

IDLE = "idle"
SCANNING = "scanning"
DECODED = "decoded"
CANCELLED = "cancelled"
FAILED = "failed"


class ScanSession:

    def __init__(self, source: AsyncContextManager, decoder: Callable[[Any], Optional[str]]):
        self._source = source
        self._decoder = decoder
        self._stream = None
        self._cancelled = asyncio.Event()
        self.status = IDLE
        self.rejected = 0           # frames with a code that was not a person payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self._release()
        return False

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    async def _acquire(self):
        try:
            self._stream = await self._source.__aenter__()
        except (OSError, RuntimeError) as e:
            self.status = FAILED
            logger.warning(f"[Scan] Camera unavailable: {e}")
            raise ResourceUnavailable(f"Camera unavailable: {e}") from e

    async def _release(self):
        if self._stream is None:
            return
        self._stream = None
        try:
            await self._source.__aexit__(None, None, None)
        finally:
            logger.debug("[Scan] Camera released")

    def cancel(self):
        """Stop scanning; run() returns None and nothing is recorded."""
        self._cancelled.set()

    async def _next_frame(self, frames):
        """Next frame, or None once cancel() fires while the source is still waiting."""
        if self._cancelled.is_set():
            return None
        pending = asyncio.ensure_future(frames.__anext__())
        cancelled = asyncio.ensure_future(self._cancelled.wait())
        try:
            done, _ = await asyncio.wait({pending, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
        if pending not in done:
            pending.cancel()
            await asyncio.wait({pending})
            return None
        return pending.result()

    async def run(self) -> Optional[IdentityPayload]:
        if self.status != IDLE:
            raise RuntimeError(f"Scan session already {self.status}")
        if self._cancelled.is_set():
            self.status = CANCELLED
            return None
        await self._acquire()
        self.status = SCANNING
        frames = self._stream.__aiter__()
        try:
            while True:
                try:
                    frame = await self._next_frame(frames)
                except StopAsyncIteration:
                    break
                if self._cancelled.is_set():
                    break
                text = self._decoder(frame)
                if not text:
                    continue
                try:
                    payload = decode_payload(text)
                except DecodeError as e:
                    self.rejected += 1
                    logger.info(f"[Scan] Ignored code ({e.reason}), still scanning")
                    continue
                self.status = DECODED
                logger.info(f"[Scan] Detected {payload.name} ({payload.id})")
                return payload
        except Exception:
            self.status = FAILED
            raise
        finally:
            await self._release()

        # Cancelled, or the source ran dry without a usable code.
        self.status = CANCELLED
        return None

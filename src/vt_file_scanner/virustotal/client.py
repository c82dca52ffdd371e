"""VirusTotal v3 API client for file scanning.

VirusTotal uses a submit-then-poll pattern:
1. Upload a file via multipart/form-data POST to /files
2. Poll /analyses/{id} with the returned analysis ID until status is "completed"
3. Convert the engine counters into a ScanVerdict

Auth is the ``x-apikey`` header, and responses are JSON.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import aiohttp

from vt_file_scanner.config import ScannerConfig
from vt_file_scanner.exceptions import ConfigurationError, ScanTimeoutError, VirusTotalError
from vt_file_scanner.utils.file_detection import detect_mime_type
from vt_file_scanner.verdicts import ScanVerdict, verdict_from_analysis
from vt_file_scanner.virustotal.json_parser import parse_analysis_response, parse_upload_response
from vt_file_scanner.virustotal.models import AnalysisResult, UploadResult

logger = logging.getLogger("vt_file_scanner.virustotal")

PendingCallback = Callable[[AnalysisResult], None]


class VirusTotalClient:
    """Client for the VirusTotal v3 files and analyses endpoints.

    Handles file upload, analysis polling, and response normalization.
    """

    def __init__(self, config: ScannerConfig) -> None:
        config.validate()
        self._config = config
        self._files_url = config.files_url
        self._analyses_url = config.analyses_url
        self._api_key = config.api_key
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"x-apikey": self._api_key, "accept": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self._config.request_timeout),
            )
        return self._session

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def upload_file_async(
        self,
        file: str | Path | bytes,
        filename: str | None = None,
    ) -> UploadResult:
        """Upload a file to VirusTotal for analysis.

        Args:
            file: File path, Path object, or raw bytes.
            filename: Optional filename override (used as-is when passing bytes).

        Returns:
            UploadResult carrying the analysis ID to poll.
        """
        if isinstance(file, (str, Path)):
            file_path = Path(file)
            if not file_path.exists():
                raise VirusTotalError(f"File not found: {file_path}")
            if not file_path.is_file():
                raise VirusTotalError(f"Not a file: {file_path}")
            try:
                file_bytes = file_path.read_bytes()
            except OSError as e:
                raise VirusTotalError(f"Cannot read file: {file_path}: {e}") from e
            resolved_filename = filename or file_path.name
        elif isinstance(file, bytes):
            file_bytes = file
            resolved_filename = filename or "upload"
        else:
            raise VirusTotalError(f"Unsupported file type: {type(file)}")

        session = await self._get_session()
        data = aiohttp.FormData()
        data.add_field(
            "file",
            file_bytes,
            filename=resolved_filename,
            content_type=detect_mime_type(file_bytes, resolved_filename),
        )

        logger.info(
            "Uploading file to VirusTotal: %s (%d bytes)", resolved_filename, len(file_bytes)
        )

        try:
            async with session.post(self._files_url, data=data) as resp:
                body = await resp.text(errors="replace")
                if resp.status != 200:
                    raise VirusTotalError(
                        f"VirusTotal upload failed with HTTP {resp.status}",
                        status_code=resp.status,
                        details={"response_body": body[:500]},
                    )
        except aiohttp.ClientError as e:
            raise VirusTotalError(f"VirusTotal HTTP error during upload: {e}") from e
        except asyncio.TimeoutError as e:
            raise VirusTotalError(
                f"VirusTotal upload timed out after {self._config.request_timeout}s"
            ) from e

        result = parse_upload_response(body)
        result.filename = resolved_filename
        result.size = len(file_bytes)
        return result

    async def get_analysis_async(self, analysis_id: str) -> AnalysisResult:
        """Fetch the current state of a previously submitted analysis.

        Args:
            analysis_id: The ID returned by upload_file_async.

        Returns:
            AnalysisResult with the status and (once available) engine counters.
        """
        if not analysis_id:
            raise VirusTotalError("Invalid analysis ID: empty")

        session = await self._get_session()
        url = f"{self._analyses_url}/{analysis_id}"
        logger.debug("Polling VirusTotal analysis: %s", analysis_id)

        try:
            async with session.get(url) as resp:
                body = await resp.text(errors="replace")
                if resp.status != 200:
                    raise VirusTotalError(
                        f"VirusTotal analysis request failed with HTTP {resp.status}",
                        status_code=resp.status,
                        details={"response_body": body[:500]},
                    )
        except aiohttp.ClientError as e:
            raise VirusTotalError(f"VirusTotal HTTP error during analysis poll: {e}") from e
        except asyncio.TimeoutError as e:
            raise VirusTotalError(
                f"VirusTotal analysis request timed out after {self._config.request_timeout}s"
            ) from e

        return parse_analysis_response(body, analysis_id)

    async def wait_for_analysis_async(
        self,
        analysis_id: str,
        poll_interval: float | None = None,
        max_wait: float | None = None,
        on_pending: PendingCallback | None = None,
    ) -> ScanVerdict:
        """Poll an analysis at a fixed interval until it completes.

        Any failed poll aborts the wait; only a non-completed status is retried.

        Args:
            analysis_id: The ID returned by upload_file_async.
            poll_interval: Seconds between polls (default: config value).
            max_wait: Give up after this many seconds (default: config value,
                which is None, meaning wait indefinitely).
            on_pending: Called with each non-completed AnalysisResult before sleeping.

        Returns:
            ScanVerdict for the completed analysis.

        Raises:
            ConfigurationError: If the poll interval is not positive.
            ScanTimeoutError: If max_wait is set and the analysis is still queued.
        """
        interval = self._config.poll_interval if poll_interval is None else poll_interval
        if interval <= 0:
            raise ConfigurationError(
                f"Invalid poll interval {interval}: must be a positive number of seconds"
            )
        timeout = max_wait if max_wait is not None else self._config.max_wait
        start_time = time.monotonic()

        while True:
            elapsed = time.monotonic() - start_time
            if timeout is not None and elapsed > timeout:
                raise ScanTimeoutError(
                    f"VirusTotal analysis still pending after {elapsed:.0f}s for {analysis_id}",
                    elapsed_seconds=elapsed,
                    details={"analysis_id": analysis_id},
                )

            result = await self.get_analysis_async(analysis_id)

            if result.is_completed:
                duration_ms = int((time.monotonic() - start_time) * 1000)
                logger.info(
                    "VirusTotal analysis completed: %s (%.1fs)",
                    analysis_id,
                    duration_ms / 1000,
                )
                return verdict_from_analysis(
                    result,
                    raw_response=result.raw,
                    duration_ms=duration_ms,
                )

            logger.debug(
                "Analysis %s is %r, waiting %ss...", analysis_id, result.status, interval
            )
            if on_pending is not None:
                on_pending(result)
            await asyncio.sleep(interval)

    async def scan_file_async(
        self,
        file: str | Path | bytes,
        filename: str | None = None,
        poll_interval: float | None = None,
        max_wait: float | None = None,
        on_pending: PendingCallback | None = None,
    ) -> ScanVerdict:
        """Upload a file and poll until the analysis completes.

        This is the high-level method most callers should use.

        Args:
            file: File path, Path object, or raw bytes.
            filename: Optional filename override.
            poll_interval: Seconds between polls (default: config value).
            max_wait: Max seconds to wait for the analysis (default: config value).
            on_pending: Called with each non-completed AnalysisResult.

        Returns:
            ScanVerdict with the engine counters.
        """
        upload = await self.upload_file_async(file, filename)
        logger.info("File uploaded successfully. Analysis ID: %s", upload.analysis_id)
        return await self.wait_for_analysis_async(
            upload.analysis_id,
            poll_interval=poll_interval,
            max_wait=max_wait,
            on_pending=on_pending,
        )

    # ------------------------------------------------------------------
    # Sync wrappers
    # ------------------------------------------------------------------

    def upload_file(
        self,
        file: str | Path | bytes,
        filename: str | None = None,
    ) -> UploadResult:
        """Synchronous wrapper for upload_file_async."""
        return _run_async(self._oneshot(self.upload_file_async(file, filename)))

    def get_analysis(self, analysis_id: str) -> AnalysisResult:
        """Synchronous wrapper for get_analysis_async."""
        return _run_async(self._oneshot(self.get_analysis_async(analysis_id)))

    def wait_for_analysis(
        self,
        analysis_id: str,
        poll_interval: float | None = None,
        max_wait: float | None = None,
        on_pending: PendingCallback | None = None,
    ) -> ScanVerdict:
        """Synchronous wrapper for wait_for_analysis_async."""
        return _run_async(
            self._oneshot(
                self.wait_for_analysis_async(analysis_id, poll_interval, max_wait, on_pending)
            )
        )

    def scan_file(
        self,
        file: str | Path | bytes,
        filename: str | None = None,
        poll_interval: float | None = None,
        max_wait: float | None = None,
        on_pending: PendingCallback | None = None,
    ) -> ScanVerdict:
        """Synchronous wrapper for scan_file_async."""
        return _run_async(
            self._oneshot(
                self.scan_file_async(file, filename, poll_interval, max_wait, on_pending)
            )
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _oneshot(self, coro: Any) -> Any:
        # Each sync call gets its own event loop, so the session can't outlive it.
        try:
            return await coro
        finally:
            await self.close()

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> VirusTotalClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"VirusTotalClient(base_url={self._config.base_url!r})"


def _run_async(coro: Any) -> Any:
    """Run an async coroutine from synchronous code."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        # Already inside an event loop, so run on a fresh one in a worker thread
        import concurrent.futures

        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()
    else:
        return asyncio.run(coro)

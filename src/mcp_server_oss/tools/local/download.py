"""
HTTP download into a local directory.

A single 301/302 redirect hop is followed; the redirect target must answer
200. The whole transfer runs under a fixed wall-clock limit, and a failed or
timed-out transfer never leaves a partial file behind.
"""
from __future__ import annotations

import socket
import threading
import time
from collections.abc import Callable
from pathlib import Path
from urllib.parse import unquote, urljoin, urlsplit

import requests
from urllib3.exceptions import ReadTimeoutError

from mcp_server_oss.core.errors import (
    DestinationExistsError,
    DownloadError,
    DownloadTimeoutError,
    InvalidPathError,
)
from mcp_server_oss.core.observability import get_logger

from .models import DownloadResult

DEFAULT_TIMEOUT = 60.0
CHUNK_SIZE = 64 * 1024
REDIRECT_STATUSES = (301, 302)

logger = get_logger("oss-mcp.local.download")


def file_name_from_url(url: str) -> str:
    """Last path segment of ``url``, or ``download_<epoch ms>`` if there is none."""
    name = Path(unquote(urlsplit(url).path)).name
    return name or f"download_{int(time.time() * 1000)}"


def _validate_file_name(file_name: str) -> None:
    if file_name in ("", ".", "..") or Path(file_name).name != file_name:
        raise InvalidPathError(
            f"File name must not contain a directory part: {file_name}",
            file_name=file_name,
        )


def _prepare_target(target_dir: str, file_name: str) -> Path:
    _validate_file_name(file_name)
    directory = Path(target_dir).expanduser()
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
        logger.info("Created directory", directory=str(directory))
    if not directory.is_dir():
        raise InvalidPathError(f"Path is not a directory: {target_dir}", path=target_dir)

    target = directory / file_name
    if target.exists():
        raise DestinationExistsError(str(target))
    return target


def _open(session: requests.Session, url: str, timeout: float) -> requests.Response:
    try:
        return session.get(url, stream=True, allow_redirects=False, timeout=timeout)
    except requests.Timeout as e:
        raise DownloadTimeoutError(f"Download timed out ({timeout:g}s): {url}", url=url) from e
    except requests.RequestException as e:
        raise DownloadError(f"Download failed: {e}", url=url) from e


def _is_read_timeout(error: requests.RequestException) -> bool:
    # iter_content re-raises urllib3's ReadTimeoutError as a ConnectionError
    return isinstance(error, requests.Timeout) or bool(
        error.args and isinstance(error.args[0], ReadTimeoutError)
    )


class _Watchdog:
    """Shuts the response socket down once the wall-clock budget is spent.

    A per-read socket timeout cannot catch a server that keeps sending a
    byte at a time; shutting the socket down wakes the blocked read.
    """

    def __init__(self, response: requests.Response, delay: float) -> None:
        self.fired = threading.Event()
        self._response = response
        self._timer = threading.Timer(max(0.0, delay), self._expire)
        self._timer.daemon = True

    def __enter__(self) -> _Watchdog:
        self._timer.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._timer.cancel()

    def _expire(self) -> None:
        self.fired.set()
        connection = getattr(self._response.raw, "connection", None)
        sock = getattr(connection, "sock", None)
        if sock is None:
            self._response.close()
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            # The reader closed the socket first
            logger.debug("Socket already closed at deadline", error=str(e))


def _write_body(
    response: requests.Response,
    target: Path,
    deadline: float,
    timeout: float,
    clock: Callable[[], float],
) -> int:
    try:
        fh = target.open("xb")
    except FileExistsError as e:
        raise DestinationExistsError(str(target)) from e

    timed_out = DownloadTimeoutError(f"Download timed out ({timeout:g}s)", url=response.url)
    size = 0
    try:
        with fh, _Watchdog(response, deadline - clock()) as watchdog:
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if watchdog.fired.is_set() or clock() > deadline:
                        raise timed_out
                    if chunk:
                        fh.write(chunk)
                        size += len(chunk)
            except requests.RequestException as e:
                if watchdog.fired.is_set() or _is_read_timeout(e):
                    raise timed_out from e
                raise DownloadError(f"Download failed: {e}", url=response.url) from e
            except (OSError, ValueError) as e:
                # Raw socket errors from a read the watchdog interrupted
                if watchdog.fired.is_set():
                    raise timed_out from e
                raise
            # A shut-down socket can look like a clean end of a body without length
            if watchdog.fired.is_set():
                raise timed_out
    except BaseException:
        target.unlink(missing_ok=True)
        raise
    return size


def download_file(
    url: str,
    target_dir: str,
    file_name: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> DownloadResult:
    """Download ``url`` into ``target_dir`` and return the saved path and size.

    Raises:
        InvalidPathError: target_dir exists and is not a directory, or
            file_name has a directory part
        DestinationExistsError: the target file already exists
        DownloadError: connection failure or a non-200 final status
        DownloadTimeoutError: the transfer exceeded ``timeout`` seconds
    """
    target = _prepare_target(target_dir, file_name or file_name_from_url(url))
    owns_session = session is None
    session = session or requests.Session()
    deadline = clock() + timeout
    final_url = url

    try:
        response = _open(session, url, timeout)
        try:
            if response.status_code in REDIRECT_STATUSES and response.headers.get("Location"):
                final_url = urljoin(url, response.headers["Location"])
                logger.info("Following redirect", url=url, location=final_url)
                response.close()
                response = _open(session, final_url, timeout)

            if response.status_code != 200:
                raise DownloadError(
                    f"Download failed, HTTP status code: {response.status_code}",
                    url=final_url,
                    status=response.status_code,
                )

            size = _write_body(response, target, deadline, timeout, clock)
        finally:
            response.close()
    finally:
        if owns_session:
            session.close()

    logger.info("Downloaded file", url=url, path=str(target), size=size)
    return DownloadResult(url=url, final_url=final_url, path=str(target), size=size)

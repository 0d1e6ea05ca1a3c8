"""Acquire CZML document arrays from URLs, strings and files.

Every public function here returns a :class:`LoadResult`; failures are values,
never exceptions. Only ``asyncio.CancelledError`` escapes, as asyncio requires.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import (
    IO,
    Any,
    AsyncIterator,
    Iterable,
    List,
    Optional,
    Sequence,
    Union,
)

import httpx

from ..document import LoadResult, is_document_packet
from ..errors import (
    NOT_AN_ARRAY,
    NOT_TEXT,
    UNKNOWN_LOAD_ERROR,
    err_all_sources_failed,
    err_content_type,
    err_http_status,
    err_read_failed,
)
from .config import LoaderConfig
from .config_loader import get_loader_config

logger = logging.getLogger(__name__)

FileInput = Union[str, os.PathLike, IO[Any]]


@asynccontextmanager
async def _client_scope(
    client: Optional[httpx.AsyncClient], config: Optional[LoaderConfig]
) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    cfg = config or get_loader_config()
    owned = cfg.build_client()
    try:
        yield owned
    finally:
        await owned.aclose()


def _accepts_content_type(content_type: str) -> bool:
    return "application/json" in content_type or "text/" in content_type


def _failure(error: str, source: str) -> LoadResult:
    logger.warning("Failed to load CZML from %s: %s", source, error)
    return LoadResult.fail(error, source)


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def load_from_string(text: Union[str, bytes], source: str = "string") -> LoadResult:
    """Parse ``text`` as a CZML document array."""

    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError) as exc:
        return _failure(str(exc) or "Invalid JSON", source)

    if not isinstance(data, list):
        return _failure(NOT_AN_ARRAY, source)

    logger.debug("Parsed %d packets from %s", len(data), source)
    return LoadResult.ok(data, source)


async def _fetch(client: httpx.AsyncClient, url: str) -> LoadResult:
    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        return _failure(str(exc) or UNKNOWN_LOAD_ERROR, url)

    if not response.is_success:
        return _failure(
            err_http_status(response.status_code, response.reason_phrase), url
        )

    content_type = response.headers.get("content-type")
    if content_type and not _accepts_content_type(content_type):
        return _failure(err_content_type(content_type), url)

    result = load_from_string(response.text, url)
    if result.success:
        logger.info("Loaded %d packets from %s", len(result.data or []), url)
    return result


async def load_from_url(
    url: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[LoaderConfig] = None,
) -> LoadResult:
    """GET ``url`` and parse the body as a CZML document array."""

    async with _client_scope(client, config) as http:
        return await _fetch(http, url)


def _file_source(file: FileInput) -> str:
    if isinstance(file, (str, os.PathLike)):
        return Path(file).name
    name = getattr(file, "name", None)
    if isinstance(name, str) and name:
        return Path(name).name
    return "file"


def _read_contents(file: FileInput) -> Any:
    if isinstance(file, (str, os.PathLike)):
        return Path(file).read_bytes()
    return file.read()


async def load_from_file(file: FileInput) -> LoadResult:
    """Read a path or file-like object in a worker thread, then parse it."""

    source = _file_source(file)
    try:
        contents = await asyncio.to_thread(_read_contents, file)
    except UnicodeDecodeError:
        return _failure(NOT_TEXT, source)
    except (OSError, ValueError) as exc:
        return _failure(err_read_failed(exc), source)

    if isinstance(contents, (bytes, bytearray)):
        try:
            contents = bytes(contents).decode("utf-8-sig")
        except UnicodeDecodeError:
            return _failure(NOT_TEXT, source)
    if not isinstance(contents, str):
        return _failure(NOT_TEXT, source)

    return load_from_string(contents, source)


def merge_results(results: Sequence[LoadResult], source: str) -> LoadResult:
    """Combine per-source results into one document array.

    The first document packet (in input order) is kept and placed first; later
    document packets are dropped. Entity packets keep their input order.
    Failed sources are left out of a successful merge.
    """

    failures: List[str] = []
    entity_packets: List[Any] = []
    document_packet: Optional[dict] = None

    for result in results:
        if not result.success:
            failures.append(f"{result.source}: {result.error}")
            continue
        for packet in result.data or []:
            if not isinstance(packet, dict) or "id" not in packet:
                continue
            if is_document_packet(packet):
                if document_packet is None:
                    document_packet = packet
            else:
                entity_packets.append(packet)

    if len(failures) == len(results):
        return _failure(err_all_sources_failed(failures), source)

    if failures:
        logger.warning(
            "Merged %d of %d sources; dropped: %s",
            len(results) - len(failures),
            len(results),
            "; ".join(failures),
        )

    merged: List[Any] = []
    if document_packet is not None:
        merged.append(document_packet)
    merged.extend(entity_packets)
    return LoadResult.ok(merged, source)


async def load_and_merge(
    urls: Iterable[str],
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[LoaderConfig] = None,
) -> LoadResult:
    """Fetch every URL concurrently and merge the successful documents."""

    url_list = list(urls)
    async with _client_scope(client, config) as http:
        results = await asyncio.gather(*(_fetch(http, url) for url in url_list))
    return merge_results(results, ", ".join(url_list))

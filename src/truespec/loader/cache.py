"""Remote document fetching with an on-disk cache.

Cached copies live at `<cache_dir>/<sha256 of the URL>.cache` and are
reused while younger than the configured freshness window.
"""

import hashlib
import logging
import time
from pathlib import Path

import requests

from truespec.config import FetchOptions
from truespec.errors import DocumentLoadError

logger = logging.getLogger(__name__)


def cache_path(url: str, cache_dir: Path) -> Path:
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
    return cache_dir / f"{digest}.cache"


def _read_fresh(path: Path, ttl_seconds: int) -> str | None:
    try:
        age = time.time() - path.stat().st_mtime
    except OSError:
        return None
    if age >= ttl_seconds:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable cache file %s: %s", path, e)
        return None


def _write_cache(path: Path, url: str, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.warning("Could not cache %s: %s", url, e)


def fetch_remote(url: str, options: FetchOptions | None = None) -> str:
    """Return the body of a remote document, from cache when fresh.

    Failing to write the cache is logged and does not fail the fetch.
    """
    options = options or FetchOptions()
    path = cache_path(url, options.cache_dir)

    if not options.no_store:
        cached = _read_fresh(path, options.ttl_seconds)
        if cached is not None:
            logger.debug("Cache hit for %s (%s)", url, path.name)
            return cached

    logger.debug("Fetching %s", url)
    try:
        response = requests.get(url, headers=options.request_headers(), timeout=options.timeout)
    except requests.RequestException as e:
        raise DocumentLoadError(url, str(e)) from e
    if not 200 <= response.status_code < 300:
        raise DocumentLoadError(url, f"HTTP {response.status_code}")

    try:
        text = response.text
    except (LookupError, UnicodeDecodeError) as e:
        raise DocumentLoadError(url, f"cannot decode response body: {e}") from e
    if not options.no_store:
        _write_cache(path, url, text)
    return text

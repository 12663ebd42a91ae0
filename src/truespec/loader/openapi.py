"""OpenAPI / Swagger document loader.

Reads a YAML or JSON document from a local path or URL and returns it
fully dereferenced, ready for comparison.
"""

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import yaml

from truespec.config import FetchOptions
from truespec.errors import DocumentLoadError
from truespec.loader.cache import fetch_remote
from truespec.loader.refs import dereference

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http", "https")


def to_uri(source: str | Path) -> str:
    """Normalize a path or URL into an absolute URI."""
    text = str(source)
    scheme = urlparse(text).scheme
    if scheme in REMOTE_SCHEMES or scheme == "file":
        return text
    # one-letter schemes are Windows drive letters
    if scheme and len(scheme) > 1:
        raise DocumentLoadError(text, f"unsupported URL scheme '{scheme}'")
    return Path(text).resolve().as_uri()


def read_source(uri: str, options: FetchOptions) -> str:
    parsed = urlparse(uri)
    if parsed.scheme in REMOTE_SCHEMES:
        return fetch_remote(uri, options)
    if parsed.scheme == "file":
        path = Path(unquote(parsed.path))
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise DocumentLoadError(str(path), e.strerror or str(e)) from e
        except UnicodeDecodeError as e:
            raise DocumentLoadError(str(path), f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
    raise DocumentLoadError(uri, f"unsupported URL scheme '{parsed.scheme}'")


def parse_document(text: str, source: str) -> dict:
    """Parse YAML or JSON text; the root must be a mapping."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(source, f"invalid YAML/JSON: {e}") from e
    if not isinstance(data, dict):
        raise DocumentLoadError(source, "document root is not a mapping")
    return data


def load_document(source: str | Path, options: FetchOptions | None = None) -> dict:
    """Load and dereference an OpenAPI document from a path or URL."""
    options = options or FetchOptions()
    uri = to_uri(source)
    logger.debug("Loading %s", uri)

    def fetch(ref_uri: str) -> dict:
        return parse_document(read_source(ref_uri, options), ref_uri)

    document = fetch(uri)
    if "openapi" not in document and "swagger" not in document:
        logger.warning("%s does not declare an openapi or swagger version", source)
    return dereference(document, uri, fetch)

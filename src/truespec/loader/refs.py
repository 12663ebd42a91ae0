"""In-place $ref dereferencing.

Each reference node is replaced by the node it points to, so a recursive
schema becomes a cyclic object graph instead of an infinite expansion.
"""

import logging
from typing import Any, Callable
from urllib.parse import unquote, urldefrag, urljoin

from truespec.errors import RefResolutionError

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Any]


def _decode_pointer_token(token: str) -> str:
    # RFC 6901 escaping
    return unquote(token).replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, pointer: str, ref: str) -> Any:
    """Return the node at a JSON Pointer fragment ("" means the whole document)."""
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        raise RefResolutionError(ref, f"unsupported fragment '{pointer}'")

    node = document
    for raw in pointer[1:].split("/"):
        token = _decode_pointer_token(raw)
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise RefResolutionError(ref, f"'{token}' not found")
    return node


class RefResolver:
    """Dereferences documents, loading external ones through `fetch`.

    `fetch(uri)` returns the parsed document at an absolute URI. Every
    external document is loaded once per resolver.
    """

    def __init__(self, fetch: Fetch | None = None):
        self._fetch = fetch
        self._documents: dict[str, Any] = {}
        self._walked: set[int] = set()

    def dereference(self, document: Any, uri: str) -> Any:
        self._documents[uri] = document
        if _is_ref(document):
            document, uri = self._follow(document, uri)
        return self._walk(document, uri)

    def _walk(self, node: Any, uri: str) -> Any:
        if isinstance(node, dict):
            if id(node) in self._walked:
                return node
            self._walked.add(id(node))
            for key, value in list(node.items()):
                node[key] = self._resolve(value, uri)
        elif isinstance(node, list):
            if id(node) in self._walked:
                return node
            self._walked.add(id(node))
            for i, value in enumerate(node):
                node[i] = self._resolve(value, uri)
        return node

    def _resolve(self, value: Any, uri: str) -> Any:
        if not _is_ref(value):
            return self._walk(value, uri)
        target, target_uri = self._follow(value, uri)
        return self._walk(target, target_uri)

    def _follow(self, node: dict, uri: str) -> tuple[Any, str]:
        seen: set[str] = set()
        while _is_ref(node):
            ref = node["$ref"]
            absolute = urljoin(uri, ref)
            if absolute in seen:
                raise RefResolutionError(ref, "reference loop without a schema in between")
            seen.add(absolute)
            doc_uri, fragment = urldefrag(absolute)
            node = resolve_pointer(self._document(doc_uri or uri, ref), fragment, ref)
            uri = doc_uri or uri
        return node, uri

    def _document(self, uri: str, ref: str) -> Any:
        if uri not in self._documents:
            if self._fetch is None:
                raise RefResolutionError(ref, "external references are not enabled")
            logger.debug("Loading referenced document %s", uri)
            self._documents[uri] = self._fetch(uri)
        return self._documents[uri]


def _is_ref(node: Any) -> bool:
    return isinstance(node, dict) and isinstance(node.get("$ref"), str)


def dereference(document: Any, uri: str, fetch: Fetch | None = None) -> Any:
    """Replace every $ref in `document` with its target, in place."""
    return RefResolver(fetch).dereference(document, uri)

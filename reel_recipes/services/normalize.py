from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

_DEFAULT_PORTS = {"http": 80, "https": 443}


def _normalize_netloc(scheme: str, netloc: str, port: int | None) -> str:
    userinfo, sep, hostport = netloc.rpartition("@")
    host = hostport.lower()
    if port is not None and _DEFAULT_PORTS.get(scheme) == port:
        host = host.rsplit(":", 1)[0]
    return f"{userinfo}{sep}{host}"


def normalize_url(raw_url: str) -> str:
    """Return the cache key for a video URL.

    Query string and fragment are dropped so tracking variants of the same
    video collapse to one key. Input that does not parse as an absolute URL
    comes back trimmed and otherwise unchanged.
    """
    candidate = raw_url.strip()
    try:
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError:
        return candidate

    if not parts.scheme or not parts.netloc or parts.hostname is None:
        return candidate

    scheme = parts.scheme.lower()
    netloc = _normalize_netloc(scheme, parts.netloc, port)
    path = parts.path
    if not path and scheme in _DEFAULT_PORTS:
        path = "/"
    return urlunsplit((scheme, netloc, path, "", ""))

"""URL parsing utilities."""

from urllib.parse import urlsplit

import tldextract

# Offline extractor: use the bundled public-suffix snapshot, never fetch it at runtime.
_extract = tldextract.TLDExtract(suffix_list_urls=())


def get_domain(url: str) -> str:
    """
    Return the registered (root) domain from a URL, stripping subdomains.
    Examples:
        https://example.com/path          -> example.com
        https://policies.google.com/terms -> google.com
        https://sub.example.co.uk:443/    -> example.co.uk
    """
    ext = _extract(url)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return ext.domain or ""


def get_hostname(url: str | None) -> str:
    """Full hostname of *url* (``shop.example.com``), or ``"unknown"`` when absent or unparsable."""
    if not url:
        return "unknown"
    try:
        host = urlsplit(url if "://" in url else f"https://{url}").hostname
    except ValueError:
        return "unknown"
    return host or "unknown"


def cache_identity(url: str) -> str:
    """Normalized request identity for caching: registered domain plus lower-cased path."""
    parts = urlsplit(url.strip() if "://" in url else f"https://{url.strip()}")
    path = parts.path.rstrip("/").lower() or "/"
    return f"{get_domain(url) or parts.hostname or 'unknown'}{path}"

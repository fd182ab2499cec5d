"""Application utilities."""

from policycheck.utils.fetch_page import FetchedPage, fetch_and_extract, html_to_text
from policycheck.utils.url_utils import cache_identity, get_domain, get_hostname

__all__ = ["cache_identity", "fetch_and_extract", "FetchedPage", "get_domain", "get_hostname", "html_to_text"]

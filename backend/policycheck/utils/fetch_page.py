"""Fetch collaborator: download a policy page and reduce it to plain text + title."""

import hashlib
import logging
import re

import httpx
from bs4 import BeautifulSoup
from playwright.async_api import async_playwright
from pydantic import BaseModel

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; PolicyCheckBot/1.0; +https://policycheck.tools)"


class FetchedPage(BaseModel):
    title: str
    text: str
    content_hash: str
    approx_length: int


def html_to_text(html: str) -> tuple[str, str]:
    """
    Extract (title, plain text) from HTML: strip tags and normalize whitespace.
    Removes script, style, and other non-visible elements.
    """
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text(strip=True) if soup.title else ""

    for tag in soup(["script", "style", "noscript", "iframe", "svg", "nav", "footer"]):
        tag.decompose()

    text = soup.get_text(separator=" ", strip=True)
    text = re.sub(r"\s+", " ", text.replace("\u00a0", " "))
    return title, text.strip()


async def fetch_and_extract(url: str, *, use_browser: bool = False, timeout: float = 10.0) -> FetchedPage:
    """
    Download the page at *url* and return its title, normalized text, a
    ``sha256:`` content hash and the text length.

    If use_browser is True, uses a headless Chromium browser so JavaScript-
    rendered content is included. Otherwise uses a plain HTTP request.

    Raises httpx.HTTPError on HTTP errors when use_browser is False.
    Raises playwright-specific errors when use_browser is True.
    """
    if use_browser:
        raw = await _fetch_with_browser(url, timeout)
    else:
        raw = await _fetch_with_httpx(url, timeout)

    title, text = html_to_text(raw)
    logger.info("Fetched %s: %d chars (title=%r)", url, len(text), title)
    return FetchedPage(
        title=title,
        text=text,
        content_hash="sha256:" + hashlib.sha256(text.encode("utf-8")).hexdigest(),
        approx_length=len(text),
    )


async def _fetch_with_httpx(url: str, timeout: float) -> str:
    headers = {"User-Agent": USER_AGENT, "Accept": "text/html,application/xhtml+xml,text/plain"}
    async with httpx.AsyncClient(follow_redirects=True, timeout=timeout, headers=headers) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response.text


async def _fetch_with_browser(url: str, timeout: float) -> str:
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            page = await browser.new_page(user_agent=USER_AGENT)
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout * 1000)
            try:
                await page.wait_for_load_state("networkidle", timeout=timeout * 1000)
            except Exception:
                logger.debug("networkidle timed out for %s, proceeding with current content", url)
            return await page.content()
        finally:
            await browser.close()

"""Page fetching and text extraction for brief generation."""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from .config import config
from .errors import FetchError, InputValidationError

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
TRUNCATION_MARKER = "..."


def validate_url(url: str) -> str:
    """Check that ``url`` is an absolute http(s) URL.

    Raises:
        InputValidationError: If the URL is empty or malformed.
    """
    if not url or not isinstance(url, str):
        raise InputValidationError("URL is required and must be a string")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InputValidationError(f"Invalid URL format: {e}") from e

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InputValidationError(f"Invalid URL format: {url}")
    return url


def extract_text(html: str, max_length: Optional[int] = None) -> str:
    """Convert raw HTML into bounded plain text.

    Script and style content is dropped. Text is taken from the first
    non-empty ``<article>``, then ``<main>``, then ``<body>``; whitespace runs
    collapse to single spaces. Output longer than ``max_length`` is cut and
    ends with ``...``.
    """
    if max_length is None:
        max_length = config.max_text_length
    soup = BeautifulSoup(html or "", "html.parser")

    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    text = ""
    for candidate in (soup.find("article"), soup.find("main"), soup.body, soup):
        if candidate is None:
            continue
        text = _WHITESPACE_RE.sub(" ", candidate.get_text(" ")).strip()
        if text:
            break

    if len(text) > max_length:
        logger.debug(f"Truncating extracted text from {len(text)} to {max_length} chars")
        return text[:max_length] + TRUNCATION_MARKER
    return text


def fetch_page(url: str, session: Optional[requests.Session] = None) -> str:
    """Fetch a page and return its HTML.

    Args:
        url: Absolute URL to fetch.
        session: Optional requests session (used for connection reuse and tests).

    Returns:
        The response body as text.

    Raises:
        FetchError: On network failure or a non-2xx status.
    """
    http = session or requests
    logger.info(f"Fetching content from {url}")

    try:
        response = http.get(
            url,
            headers={"User-Agent": config.user_agent},
            timeout=config.fetch_timeout,
        )
    except requests.RequestException as e:
        logger.error(f"Error fetching {url}: {e}")
        raise FetchError(f"Failed to fetch URL: {e}") from e

    if not 200 <= response.status_code < 300:
        logger.error(f"Fetching {url} returned {response.status_code}")
        raise FetchError(
            f"Failed to fetch URL: {response.status_code} {response.reason or ''}".rstrip()
        )

    return response.text

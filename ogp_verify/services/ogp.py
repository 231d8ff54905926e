"""
OGP engine: fetches a page, extracts its Open Graph tags, validates them and
projects them onto each platform's preview limits.
"""

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Dict
from urllib.parse import urlparse

import aiohttp
import lxml.html
from lxml import etree

from ogp_verify.core.config import config
from ogp_verify.core.errors import InvalidTargetURL, OGPFetchError
from ogp_verify.core.models import (
    PLATFORM_LIMITS,
    OGPData,
    PlatformPreview,
    PlatformPreviews,
    ValidationChecks,
    ValidationResult,
    VerificationResponse,
)

log = logging.getLogger(__name__)

OG_PROPERTIES = {
    "og:title": "title",
    "og:description": "description",
    "og:image": "image",
    "og:url": "url",
    "og:type": "type",
    "og:site_name": "site_name",
    "og:image:width": "image_width",
    "og:image:height": "image_height",
    "og:image:alt": "image_alt",
}

PRIVATE_HOST_RE = re.compile(r"^(10\.|172\.(1[6-9]|2[0-9]|3[01])\.|192\.168\.|127\.|::1|localhost)")
XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")


def is_private_host(host: str) -> bool:
    return bool(PRIVATE_HOST_RE.match(host))


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_ogp_tags(html: str) -> OGPData:
    """
    Extract og:* meta tags from an HTML document.

    Args:
        html: Raw page markup

    Returns:
        OGPData with empty strings for tags that were not found
    """
    # lxml refuses str input that carries an encoding declaration
    html = XML_DECLARATION_RE.sub("", html or "", count=1)
    if not html.strip():
        return OGPData()
    try:
        doc = lxml.html.document_fromstring(html)
    except (etree.ParserError, ValueError) as e:
        log.warning(f"Could not parse HTML: {e}")
        return OGPData()

    values: Dict[str, str] = {}
    for meta in doc.iter("meta"):
        field = OG_PROPERTIES.get(meta.get("property", ""))
        if field:
            values[field] = meta.get("content", "")
    return OGPData(**values)


def validate_ogp_data(data: OGPData) -> ValidationResult:
    """
    Check that the tags a preview needs are present and well formed.

    Missing tags only produce warnings. A present but malformed image URL is
    an error and makes the result invalid.
    """
    warnings = []
    errors = []

    if not data.title:
        warnings.append("Missing og:title tag")
    if not data.description:
        warnings.append("Missing og:description tag")
    if not data.image:
        warnings.append("Missing og:image tag")

    image_valid = False
    if data.image:
        image_valid = _is_http_url(data.image)
        if not image_valid:
            errors.append("Invalid image URL")

    return ValidationResult(
        is_valid=not errors,
        warnings=warnings,
        errors=errors,
        checks=ValidationChecks(
            has_title=bool(data.title),
            has_description=bool(data.description),
            has_image=bool(data.image),
            image_valid=image_valid,
            url_valid=bool(data.url) and _is_http_url(data.url),
        ),
    )


def build_preview(data: OGPData, platform: str) -> PlatformPreview:
    """Project OGP data onto one platform's display limits."""
    label, max_title_len, max_desc_len = PLATFORM_LIMITS[platform]
    title = truncate(data.title, max_title_len)
    description = truncate(data.description, max_desc_len)

    warnings = []
    if len(data.title) > max_title_len:
        warnings.append(f"Title exceeds {label} limit ({max_title_len} characters)")
    if len(data.description) > max_desc_len:
        warnings.append(f"Description exceeds {label} limit ({max_desc_len} characters)")

    return PlatformPreview(
        platform=platform,
        title=title,
        description=description,
        image=data.image,
        is_valid=True,
        warnings=warnings,
        title_length=len(title),
        desc_length=len(description),
        max_title_len=max_title_len,
        max_desc_len=max_desc_len,
    )


def build_previews(data: OGPData) -> PlatformPreviews:
    return PlatformPreviews(
        twitter=build_preview(data, "twitter"),
        facebook=build_preview(data, "facebook"),
        discord=build_preview(data, "discord"),
    )


class OGPService:
    """
    Fetches a target page and builds the full verification report for it.
    """

    def __init__(self, allow_private_hosts: bool = config.ALLOW_PRIVATE_HOSTS):
        self.allow_private_hosts = allow_private_hosts
        self.timeout = aiohttp.ClientTimeout(total=config.FETCH_TIMEOUT)
        self.headers = {"User-Agent": config.USER_AGENT}

    def _check_target(self, url: str) -> None:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise InvalidTargetURL(f"invalid URL: {url}")
        if not self.allow_private_hosts and is_private_host(parsed.hostname):
            raise InvalidTargetURL("private IP addresses are not allowed")

    async def fetch_html(self, url: str) -> str:
        """
        Download the target page.

        Raises:
            InvalidTargetURL: the URL is malformed or private
            OGPFetchError: the page could not be retrieved
        """
        self._check_target(url)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout, headers=self.headers) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        log.error(f"Fetching {url} returned status {response.status}")
                        raise OGPFetchError(f"HTTP error: {response.status}")
                    return await response.text(errors="replace")
        except asyncio.TimeoutError as e:
            log.error(f"Timeout fetching {url}")
            raise OGPFetchError("failed to fetch URL: timeout") from e
        except aiohttp.ClientError as e:
            log.error(f"Error fetching {url}: {e}")
            raise OGPFetchError(f"failed to fetch URL: {e}") from e

    async def verify(self, url: str) -> VerificationResponse:
        """Fetch url and build its OGP report."""
        html = await self.fetch_html(url)
        ogp_data = parse_ogp_tags(html)
        log.info(f"Extracted OGP data for {url}: {ogp_data.model_dump()}")

        return VerificationResponse(
            url=url,
            ogp_data=ogp_data,
            validation=validate_ogp_data(ogp_data),
            previews=build_previews(ogp_data),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

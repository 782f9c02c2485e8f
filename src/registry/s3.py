"""S3 bucket listing client (ListObjectsV2 over plain HTTPS GET)."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple, Union

from constants import Constants
from errors import DecodeAnomaly, PaginationLimitExceeded
from common.http_client import safe_get
from common.logging_utils import compact, extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectRecord:
    """One listed storage object."""
    key: str
    last_modified: Optional[datetime]
    checksum_tag: str
    size_bytes: int
    storage_class: str


@dataclass(frozen=True)
class ListingPage:
    """A single decoded ListObjectsV2 response."""
    items: Tuple[ObjectRecord, ...] = ()
    is_truncated: bool = False
    next_continuation_token: str = ""
    name: str = ""
    key_count: int = 0
    max_keys: int = 0
    continuation_token: str = ""
    prefix: str = ""


def _local(tag: str) -> str:
    """Drop an ElementTree ``{namespace}`` prefix from a tag."""
    return tag.rsplit("}", 1)[-1]


def _child_text(elem: ET.Element) -> Dict[str, str]:
    """Map local child tag -> stripped text for the direct children of ``elem``."""
    out: Dict[str, str] = {}
    for child in elem:
        if len(child):
            continue
        out[_local(child.tag)] = (child.text or "").strip()
    return out


def _parse_int(fields: Dict[str, str], name: str) -> int:
    raw = fields.get(name, "")
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        raise DecodeAnomaly(f"Invalid integer for {name}: {raw!r}") from exc


def _parse_bool(fields: Dict[str, str], name: str) -> bool:
    raw = fields.get(name, "").lower()
    if raw in ("", "false", "0"):
        return False
    if raw in ("true", "1"):
        return True
    raise DecodeAnomaly(f"Invalid boolean for {name}: {raw!r}")


def _parse_timestamp(raw: str) -> Optional[datetime]:
    """Parse an S3 ISO-8601 timestamp (``2023-04-12T18:03:11.000Z``) into UTC."""
    if not raw:
        return None
    text = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise DecodeAnomaly(f"Invalid timestamp for LastModified: {raw!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _decode_object(elem: ET.Element) -> ObjectRecord:
    fields = _child_text(elem)
    return ObjectRecord(
        key=fields.get("Key", ""),
        last_modified=_parse_timestamp(fields.get("LastModified", "")),
        checksum_tag=fields.get("ETag", ""),
        size_bytes=_parse_int(fields, "Size"),
        storage_class=fields.get("StorageClass", ""),
    )


def decode_page(text: Union[str, bytes]) -> ListingPage:
    """Decode a ListObjectsV2 XML body.

    Both namespaced (real S3) and bare documents are accepted. Missing
    elements default to zero values.

    Raises:
        DecodeAnomaly: If the body is not well-formed XML, is not a
            ListBucketResult document, or carries unparsable field values.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise DecodeAnomaly(f"Malformed listing body: {exc}") from exc

    if _local(root.tag) != "ListBucketResult":
        raise DecodeAnomaly(f"Unexpected listing root element: {_local(root.tag)}")

    fields = _child_text(root)
    items = tuple(
        _decode_object(child) for child in root if _local(child.tag) == "Contents"
    )
    return ListingPage(
        items=items,
        is_truncated=_parse_bool(fields, "IsTruncated"),
        next_continuation_token=fields.get("NextContinuationToken", ""),
        name=fields.get("Name", ""),
        key_count=_parse_int(fields, "KeyCount"),
        max_keys=_parse_int(fields, "MaxKeys"),
        continuation_token=fields.get("ContinuationToken", ""),
        prefix=fields.get("Prefix", ""),
    )


def fetch_page(bucket_name: str, params: Dict[str, str]) -> ListingPage:
    """Issue one listing request and decode its body."""
    url = Constants.LISTING_URL_TEMPLATE.format(bucket=bucket_name)
    query = {"list-type": "2"}
    query.update(params)
    res = safe_get(url, context="s3", params=query)
    return decode_page(res.content)


def list_objects(
    bucket_name: str,
    prefix: str,
    *,
    max_pages: int = Constants.LISTING_MAX_PAGES,
    strict: bool = True,
) -> List[ObjectRecord]:
    """List every object under ``prefix``, following continuation tokens.

    Args:
        bucket_name: Bucket to list.
        prefix: Key prefix filter.
        max_pages: Upper bound on requests issued before giving up.
        strict: When False, an undecodable page is logged and treated as an
            empty final page instead of aborting the listing.

    Returns:
        Objects from all pages, in request order.

    Raises:
        NetworkError: On any transport or HTTP failure.
        DecodeAnomaly: On an undecodable page (strict mode) or a truncated
            page without a continuation token.
        PaginationLimitExceeded: When more than ``max_pages`` pages are needed.
    """
    out: List[ObjectRecord] = []
    params: Dict[str, str] = {"prefix": prefix}
    target = safe_url(Constants.LISTING_URL_TEMPLATE.format(bucket=bucket_name))
    pages = 0

    with Timer() as timer:
        while True:
            if pages >= max_pages:
                logger.error(
                    "Listing exceeded page bound",
                    extra=extra_context(
                        event="listing_aborted",
                        component="s3",
                        outcome="page_limit",
                        target=target,
                        pages=pages
                    )
                )
                raise PaginationLimitExceeded(max_pages)
            pages += 1

            try:
                page = fetch_page(bucket_name, params)
            except DecodeAnomaly as exc:
                if strict:
                    raise
                logger.warning(
                    "Treating undecodable listing page %d as empty: %s",
                    pages,
                    compact(str(exc)),
                )
                page = ListingPage()

            out.extend(page.items)
            if is_debug_enabled(logger):
                logger.debug(
                    "Listing page decoded",
                    extra=extra_context(
                        event="listing_page",
                        component="s3",
                        target=target,
                        page=pages,
                        item_count=len(page.items),
                        truncated=page.is_truncated
                    )
                )

            if not page.is_truncated:
                break
            if not page.next_continuation_token:
                raise DecodeAnomaly(
                    f"Listing page {pages} is truncated but has no continuation token"
                )
            params["continuation-token"] = page.next_continuation_token

    logger.info(
        "Listed %d objects under %s/%s in %d page(s)",
        len(out),
        bucket_name,
        prefix,
        pages,
        extra=extra_context(
            event="listing_complete",
            component="s3",
            duration_ms=timer.duration_ms()
        )
    )
    return out

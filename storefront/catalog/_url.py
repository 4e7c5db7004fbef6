"""
Product id extraction from pasted marketplace links.
"""

from __future__ import annotations

import re

_MARKETPLACE = re.compile(r"taobao\.com|tmall\.com", re.IGNORECASE)
_QUERY_ID = re.compile(r"[?&]id=(\d+)", re.IGNORECASE)
_PATH_ID = re.compile(r"/item/(\d+)", re.IGNORECASE)
_HTTP = re.compile(r"^https?://", re.IGNORECASE)
_EMBEDDED_URL = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)


def extract_product_id(text: str) -> str | None:
    """
    Product id from a taobao/tmall URL, or None.

        extract_product_id("https://item.taobao.com/item.htm?id=123")  # "123"
        extract_product_id("http://world.taobao.com/item/456.htm")     # "456"
    """
    if not _MARKETPLACE.search(text):
        return None
    if m := _QUERY_ID.search(text):
        return m.group(1)
    if m := _PATH_ID.search(text):
        return m.group(1)
    return None


def extract_url(text: str) -> str:
    """First http(s) URL inside share text, or the text itself."""
    m = _EMBEDDED_URL.search(text)
    return m.group(0) if m else text.strip()


def is_url(text: str) -> bool:
    return bool(_HTTP.search(text) or _MARKETPLACE.search(text))


__all__ = ("extract_product_id", "extract_url", "is_url")

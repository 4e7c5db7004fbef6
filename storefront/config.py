"""
Settings — connection and behaviour configuration.

    settings = Settings.from_env().with_timeout(seconds=5)
    client = MarketplaceClient(settings, http)

Immutable: every `with_*` returns a new Settings.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import timedelta


# ═══════════════════════════════════════════════════════════════════════════════
# Settings
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Storefront settings.

    api_key is sent with every marketplace call; customer-scoped calls also
    carry a bearer token obtained elsewhere.
    """

    api_url: str = "http://localhost:3000"
    api_prefix: str = "/api/v1/taobao"
    api_key: str = ""
    language: str = "en"
    timeout: timedelta = timedelta(seconds=10)
    catalog_cache_size: int = 256
    catalog_ttl: timedelta | None = timedelta(minutes=5)
    order_ttl: timedelta = timedelta(hours=1)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = "STOREFRONT_",
    ) -> Settings:
        """
        Read settings from environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        settings = cls()

        if url := env.get(f"{prefix}API_URL"):
            settings = settings.with_api_url(url)
        if key := env.get(f"{prefix}API_KEY"):
            settings = settings.with_api_key(key)
        if language := env.get(f"{prefix}LANGUAGE"):
            settings = replace(settings, language=language)
        if timeout := env.get(f"{prefix}TIMEOUT_SECONDS"):
            settings = settings.with_timeout(seconds=float(timeout))
        if size := env.get(f"{prefix}CATALOG_CACHE_SIZE"):
            settings = settings.with_catalog_cache_size(int(size))
        if ttl := env.get(f"{prefix}CATALOG_TTL_SECONDS"):
            settings = settings.with_catalog_ttl(seconds=float(ttl))
        if ttl := env.get(f"{prefix}ORDER_TTL_SECONDS"):
            settings = settings.with_order_ttl(seconds=float(ttl))

        return settings

    def with_api_url(self, url: str) -> Settings:
        return replace(self, api_url=url.rstrip("/"))

    def with_api_key(self, key: str) -> Settings:
        return replace(self, api_key=key)

    def with_timeout(
        self,
        *,
        seconds: float | None = None,
        delta: timedelta | None = None,
    ) -> Settings:
        """
        Set request timeout.

        Example:
            .with_timeout(seconds=5)
            .with_timeout(delta=timedelta(milliseconds=500))
        """
        timeout = delta if delta is not None else timedelta(seconds=seconds or 10)
        return replace(self, timeout=timeout)

    def with_catalog_cache_size(self, size: int) -> Settings:
        if size < 1:
            raise ValueError("catalog cache size must be positive")
        return replace(self, catalog_cache_size=size)

    def with_catalog_ttl(
        self,
        *,
        seconds: float | None = None,
        delta: timedelta | None = None,
    ) -> Settings:
        """How long a cached product (and its stock) is trusted. 0 or None: until evicted."""
        if delta is None and seconds:
            delta = timedelta(seconds=seconds)
        return replace(self, catalog_ttl=delta or None)

    def with_order_ttl(
        self,
        *,
        seconds: float | None = None,
        delta: timedelta | None = None,
    ) -> Settings:
        ttl = delta if delta is not None else timedelta(seconds=seconds or 0)
        if ttl <= timedelta(0):
            raise ValueError("order ttl must be positive")
        return replace(self, order_ttl=ttl)

    @property
    def base_url(self) -> str:
        return f"{self.api_url}{self.api_prefix}"

    def headers(self, bearer: str | None = None) -> dict[str, str]:
        """Request headers; pass bearer for customer-scoped calls."""
        headers = {"X-API-Key": self.api_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers


__all__ = ("Settings",)

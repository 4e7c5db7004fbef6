"""
Credentials carried by storefront calls: an API key on every request and a
bearer token naming the customer on customer-scoped ones.
"""

from __future__ import annotations

import hmac
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from storefront._types import CustomerId


@dataclass(frozen=True, slots=True)
class Principal:
    """Who is calling. customer is None on routes that are not customer-scoped."""

    customer: CustomerId | None = None


class Guard(Protocol):
    def check_api_key(self, key: str) -> bool: ...

    def customer_for(self, token: str) -> CustomerId | None: ...


class StaticGuard:
    """
    One API key and a fixed table of bearer tokens to customers.

    A token missing from the table is rejected; with an empty table no
    customer-scoped route can be reached.
    """

    def __init__(self, api_key: str, tokens: Mapping[str, CustomerId]) -> None:
        if not api_key:
            raise ValueError("api_key must not be empty")
        self._api_key = api_key
        self._tokens = dict(tokens)

    def check_api_key(self, key: str) -> bool:
        return hmac.compare_digest(key.encode(), self._api_key.encode())

    def customer_for(self, token: str) -> CustomerId | None:
        if not token:
            return None
        return self._tokens.get(token)


def bearer_token(authorization: str | None) -> str | None:
    if authorization is None:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


__all__ = (
    "Principal",
    "Guard",
    "StaticGuard",
    "bearer_token",
)

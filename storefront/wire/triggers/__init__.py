"""
Triggers — describe how endpoints are exposed (e.g., HTTP routes).

    from storefront.wire.triggers.http import HTTPRouteTrigger, customer_route

    public = HTTPRouteTrigger("GET", "/products/{item_id}")
    cart = customer_route("GET", "/cart")
"""

from storefront.wire.triggers import http


__all__ = ("http",)

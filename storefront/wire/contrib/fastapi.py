"""
FastAPI integration for storefront.wire.

    from storefront.wire.contrib import fastapi
    # fapp = fastapi.from_application(app)
"""

from storefront.wire.contrib._fastapi import (
    Unauthorized,
    add_endpoint_to_app,
    authenticator,
    compile_to_fastapi_route,
    from_application,
    status_of,
)

__all__ = (
    "Unauthorized",
    "add_endpoint_to_app",
    "authenticator",
    "compile_to_fastapi_route",
    "from_application",
    "status_of",
)

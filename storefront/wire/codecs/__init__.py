"""
Codecs — convert transport payloads to domain ops and back.

    from storefront.wire.codecs import RequestResponseCodec

    # class AddToCartIn(BaseModel): implements to_domain()
    # class CartOut(Envelope[CartBody]): implements from_domain()
    # codec = RequestResponseCodec(AddToCartIn, CartOut)
"""

from storefront.wire.codecs.rrc import (
    RequestResponseCodec,
    ToDomain,
    FromDomain,
)
from storefront.wire.codecs.envelope import Envelope

__all__ = (
    "RequestResponseCodec",
    "ToDomain",
    "FromDomain",
    "Envelope",
)

from typing import Self

from storefront.wire._auth import Guard
from storefront.wire._endpoint import Endpoint


class Application:
    def __init__(self, guard: Guard, title: str = "storefront") -> None:
        self.guard = guard
        self.title = title
        self.endpoints: list[Endpoint] = []

    def mount(self, *endps: Endpoint) -> Self:
        self.endpoints.extend(endps)
        return self


def application(guard: Guard, title: str = "storefront") -> Application:
    return Application(guard, title)

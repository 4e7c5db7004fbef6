from dataclasses import dataclass, field
from typing import Literal


type Method = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]
type Path = str
type Header = str
type Headers = frozenset[str]

API_KEY: Header = "X-API-Key"
AUTHORIZATION: Header = "Authorization"


@dataclass(frozen=True, slots=True)
class HTTPRouteTrigger:
    """
    An HTTP route. headers lists the credentials the route demands:
    API_KEY for every call, AUTHORIZATION for customer-scoped ones.
    """

    method: Method
    path: Path
    headers: Headers = field(default_factory=lambda: frozenset({API_KEY}))

    @property
    def customer_scoped(self) -> bool:
        return AUTHORIZATION in self.headers


def customer_route(method: Method, path: Path) -> HTTPRouteTrigger:
    return HTTPRouteTrigger(method, path, frozenset({API_KEY, AUTHORIZATION}))

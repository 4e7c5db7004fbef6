from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from kungfu import Result

from storefront.ops import Op


class ToDomain[DomainT](Protocol):
    def to_domain(self) -> DomainT: ...


class FromDomain[DomainT](Protocol):
    @classmethod
    def from_domain(cls, dom: DomainT) -> "FromDomain[DomainT]": ...


@dataclass(frozen=True, slots=True)
class RequestResponseCodec:
    request: type[ToDomain[Any]]
    response: type[FromDomain[Result[Any, Any]]]

    if TYPE_CHECKING:

        def __init__[T, E](
            self,
            request: type[ToDomain[Op[T, E]]],
            response: type[FromDomain[Result[T, E]]],
        ) -> None: ...

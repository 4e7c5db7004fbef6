import inspect
import logging
from typing import Annotated, Any, TypeGuard

import fastapi
from fastapi.responses import JSONResponse
from kungfu import Result, Ok, Error

from storefront.errors import NotFoundError, TransportError, ValidationError
from storefront.ops import Op, Runner
from storefront.wire._app import Application
from storefront.wire._auth import Guard, Principal, bearer_token
from storefront.wire._endpoint import Endpoint
from storefront.wire._types import Exposure
from storefront.wire.codecs.envelope import Envelope
from storefront.wire.codecs.rrc import RequestResponseCodec
from storefront.wire.triggers.http import HTTPRouteTrigger, Path

logger = logging.getLogger(__name__)


class Unauthorized(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def is_http(exposure: Exposure) -> TypeGuard[tuple[HTTPRouteTrigger, RequestResponseCodec]]:
    trigger, codec = exposure
    return isinstance(trigger, HTTPRouteTrigger) and isinstance(codec, RequestResponseCodec)


def status_of(result: Result[Any, Any]) -> int:
    match result:
        case Ok(_):
            return 200
        case Error(ValidationError()):
            return 400
        case Error(NotFoundError()):
            return 404
        case Error(TransportError()):
            return 502
        case _:
            return 500


def authenticator(guard: Guard, trigger: HTTPRouteTrigger) -> Any:
    """FastAPI dependency enforcing the credentials trigger.headers demands."""

    async def authenticate(
        x_api_key: Annotated[str | None, fastapi.Header()] = None,
        authorization: Annotated[str | None, fastapi.Header()] = None,
    ) -> Principal:
        if x_api_key is None or not guard.check_api_key(x_api_key):
            raise Unauthorized("missing or invalid API key")
        if not trigger.customer_scoped:
            return Principal()

        token = bearer_token(authorization)
        customer = guard.customer_for(token) if token is not None else None
        if customer is None:
            raise Unauthorized("missing or invalid bearer token")
        return Principal(customer)

    return authenticate


def compile_to_fastapi_route(
    endp: Endpoint,
    guard: Guard,
) -> list[tuple[str, Path, Any]]:  # (method, path, route_func)
    routes: list[tuple[str, Path, Any]] = []

    for exposure in endp.exposures:
        if not is_http(exposure):
            continue
        trigger, codec = exposure

        def make_handler(
            req_cls: type[Any],
            resp_cls: type[Any],
            runner: Runner,
            trigger: HTTPRouteTrigger,
        ) -> Any:
            async def _route_handler(principal: Principal, req: Any = None) -> JSONResponse:
                domain_op: Op[Any, Any] = (req if req is not None else req_cls()).to_domain()
                result = await runner.run(domain_op, principal)
                body = resp_cls.from_domain(result)
                return JSONResponse(status_code=status_of(result), content=body.model_dump(mode="json"))

            params = [
                inspect.Parameter(
                    "principal",
                    inspect.Parameter.POSITIONAL_OR_KEYWORD,
                    annotation=Annotated[Principal, fastapi.Depends(authenticator(guard, trigger))],
                )
            ]
            # models without fields are built on the spot
            if getattr(req_cls, "model_fields", None):
                source = fastapi.Query() if trigger.method == "GET" else fastapi.Body()
                params.append(
                    inspect.Parameter(
                        "req",
                        inspect.Parameter.POSITIONAL_OR_KEYWORD,
                        annotation=Annotated[req_cls, source],
                    )
                )

            _route_handler.__signature__ = inspect.Signature(params, return_annotation=JSONResponse)  # type: ignore[attr-defined]
            _route_handler.__name__ = f"{trigger.method.lower()}_{req_cls.__name__}"
            return _route_handler

        handler = make_handler(codec.request, codec.response, endp.runner, trigger)
        routes.append((trigger.method.upper(), trigger.path, handler))

    return routes


def add_endpoint_to_app(app: fastapi.FastAPI, endp: Endpoint, guard: Guard) -> None:
    for method, path, handler in compile_to_fastapi_route(endp, guard):
        app.add_api_route(path, handler, methods=[method], response_model=None)
        logger.debug("mounted %s %s", method, path)


async def _unauthorized(request: fastapi.Request, exc: Exception) -> JSONResponse:
    message = exc.message if isinstance(exc, Unauthorized) else "unauthorized"
    return JSONResponse(status_code=401, content=Envelope.fail(message).model_dump(mode="json"))


def from_application(app: Application) -> fastapi.FastAPI:
    f_app = fastapi.FastAPI(title=app.title)
    f_app.add_exception_handler(Unauthorized, _unauthorized)

    for endp in app.endpoints:
        add_endpoint_to_app(f_app, endp, app.guard)

    return f_app

from dataclasses import dataclass

import pytest
from kungfu import Ok, Error, Result

from storefront import ops as O
from storefront.errors import NotFoundError, ValidationError


@dataclass(frozen=True, slots=True)
class Greet(O.Returning[str, ValidationError]):
    name: str


@dataclass(frozen=True, slots=True)
class Shout(O.Returning[str, ValidationError]):
    text: str


@dataclass(frozen=True, slots=True)
class Greeting:
    word: str


@dataclass(frozen=True, slots=True)
class Caller:
    name: str


async def greet(req: Greet, greeting: Greeting, caller: Caller) -> Result[str, ValidationError]:
    if not req.name:
        return Error(ValidationError("name required"))
    return Ok(f"{greeting.word}, {req.name} (from {caller.name})")


async def shout(req: Shout) -> Result[str, ValidationError]:
    return Ok(req.text.upper())


@pytest.fixture
def runner() -> O.Runner:
    return O.ops().on(Greet, greet).on(Shout, shout).compile().inject(Greeting, Greeting("Hello"))


async def test_dependencies_resolved_by_type(runner):
    assert await runner.run(Greet("Ada"), Caller("test")) == Ok("Hello, Ada (from test)")
    assert await runner.run(Greet(""), Caller("test")) == Error(ValidationError("name required"))


async def test_call_is_lazy(runner):
    pending = runner(Shout("quiet"))

    assert await pending == Ok("QUIET")
    assert await pending == Ok("QUIET")


async def test_unknown_operation(runner):
    @dataclass(frozen=True, slots=True)
    class Whisper(O.Returning[str, ValidationError]):
        text: str

    assert await runner.run(Whisper("psst")) == Error(NotFoundError("operation", "Whisper"))


async def test_missing_dependency_raises(runner):
    with pytest.raises(LookupError):
        await runner.run(Greet("Ada"))


def test_operations_listed(runner):
    assert set(runner.operations) == {Greet, Shout}


def test_later_registration_wins():
    async def other(req: Shout) -> Result[str, ValidationError]:
        return Ok("other")

    runner = O.ops().on(Shout, shout).on(Shout, other).compile()

    assert runner.operations == (Shout,)


def test_handler_must_annotate_parameters():
    async def loose(req: Shout, extra) -> Result[str, ValidationError]:
        return Ok("")

    with pytest.raises(TypeError):
        O.ops().on(Shout, loose).compile()


def test_handler_must_accept_its_operation():
    with pytest.raises(TypeError):
        O.ops().on(Greet, shout).compile()

"""
Sequence factories, the lifting operation, and the traversal plumbing shared by every
combinator.

A sequence factory is a zero-argument callable that returns a fresh async iterator each
time it is called. The iterator is the cursor of a single traversal: ``__anext__`` is
"try get next" and ``aclose`` is "close/cancel". Combinators never hold cursors between
calls, so invoking a factory twice gives two independent traversals of the same data.
"""
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, TypeVar, Union

from lazily.util import is_async_iterable, is_iterable, resolve

T = TypeVar("T")

SequenceFactory = Callable[[], AsyncIterator[T]]


@dataclass(frozen=True)
class Completed:
    """The traversal ran until the source was exhausted."""


@dataclass(frozen=True)
class StoppedEarly:
    """An exit stage stopped the traversal. ``result`` is the payload given to that stage."""

    result: Any = None


Outcome = Union[Completed, StoppedEarly]


class _OutcomeSlot:
    __slots__ = ("outcome",)

    def __init__(self):
        self.outcome = Completed()


@asynccontextmanager
async def opened(iterator):
    """Close iterator (if it supports aclose) once the block exits, however it exits."""
    try:
        yield iterator
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


_current_slot: ContextVar = ContextVar("lazily_outcome_slot", default=None)


def report_stop(result=None):
    """
    Record that an exit stage stopped the traversal currently driven by a terminal operation.
    Outside of a terminal driver (plain ``async for``) there is nobody to report to and the
    call is a no-op.
    """
    slot = _current_slot.get()
    if slot is not None:
        slot.outcome = StoppedEarly(result)


@asynccontextmanager
async def driven(factory):
    """
    Open one traversal of factory on behalf of a terminal operation. Yields the cursor and the
    outcome slot exit stages report into; the cursor is closed on the way out, whether the
    driver finished, returned early or raised.
    """
    slot = _OutcomeSlot()
    token = _current_slot.set(slot)
    try:
        async with opened(factory()) as it:
            yield it, slot
    finally:
        _current_slot.reset(token)


def cursor(factory):
    """
    Open one traversal of an upstream factory from inside a combinator. The returned async
    context manager closes the upstream cursor as soon as the combinator stops pulling.
    """
    return opened(factory())


def isolated(factory):
    """
    Factory over the same values as factory whose exit stages report into a private slot, for
    nested traversals (flat_map children, the leading half of concat) whose early stop does not
    end the enclosing traversal. The private slot is installed only while a value is being
    pulled, never while the value is handed downstream.
    """

    async def traverse():
        slot = _OutcomeSlot()
        async with opened(factory()) as it:
            while True:
                token = _current_slot.set(slot)
                try:
                    item = await anext(it)
                except StopAsyncIteration:
                    return
                finally:
                    _current_slot.reset(token)
                yield item

    return traverse


async def _iterate_async(source):
    async with opened(aiter(source)) as it:
        async for item in it:
            yield await resolve(item)


async def _iterate_sync(source):
    it = iter(source)
    try:
        for item in it:
            yield await resolve(item)
    finally:
        close = getattr(it, "close", None)
        if close is not None:
            close()


def of(source) -> SequenceFactory:
    """
    Lift source into a sequence factory. Accepts a Seq (its factory is reused), any async
    iterable, or any sync iterable. Pending elements are awaited and their resolved value is
    yielded in source order.

    Restartability follows the source: lists, tuples, ranges, Seq and reusable file sources
    can be traversed any number of times; generator objects, async generator objects and
    lists of bare coroutines can be drained only once.

    :param source: values to lift
    :return: sequence factory over source
    """
    from lazily.pipeline import Seq

    if isinstance(source, Seq):
        return source.factory
    if is_async_iterable(source):
        return lambda: _iterate_async(source)
    if is_iterable(source):
        return lambda: _iterate_sync(source)
    raise TypeError(f"Cannot create a sequence from {type(source).__name__}")


sequence = of


async def _empty():
    return
    yield


def empty() -> SequenceFactory:
    """Factory that yields nothing and never touches any source."""
    return _empty

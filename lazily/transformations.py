"""
Lazy combinators. Each function takes one or two sequence factories and returns a new
factory; nothing is pulled from upstream until the returned factory's cursor is iterated.

Every callback receives ``(value, index, source)`` where ``index`` is the 0-based position of
``value`` in the upstream factory ``source``. The callback may return a plain value or an
awaitable.
"""
from lazily.base import cursor, empty, isolated, of, report_stop
from lazily.logger import get_logger
from lazily.util import resolve

logger = get_logger()


def map(factory, fn):
    """
    Yield fn(value, index, factory) for every upstream value.
    :param factory: upstream sequence factory
    :param fn: transform
    :return: sequence factory
    """

    async def mapped():
        async with cursor(factory) as it:
            index = 0
            async for item in it:
                yield await resolve(fn(item, index, factory))
                index += 1

    return mapped


def filter(factory, fn):
    """
    Yield the upstream values for which fn(value, index, factory) is truthy. index is the
    position in the upstream sequence, not in the filtered output.
    :param factory: upstream sequence factory
    :param fn: predicate
    :return: sequence factory
    """

    async def filtered():
        async with cursor(factory) as it:
            index = 0
            async for item in it:
                if await resolve(fn(item, index, factory)):
                    yield item
                index += 1

    return filtered


def flat_map(factory, fn):
    """
    For every upstream value compute a child sequence with fn(value, index, factory) and
    yield all of its elements before pulling the next upstream value. The child may be a Seq,
    a sync iterable or an async iterable, or an awaitable resolving to one of those. An exit
    stage inside a child ends that child only.
    :param factory: upstream sequence factory
    :param fn: function returning the child sequence
    :return: sequence factory
    """

    async def flattened():
        async with cursor(factory) as it:
            index = 0
            async for item in it:
                child = await resolve(fn(item, index, factory))
                async with cursor(isolated(of(child))) as child_it:
                    async for child_item in child_it:
                        yield child_item
                index += 1

    return flattened


def concat(factory, other):
    """
    Yield every value of factory, then every value of other. An exit stage that stops factory
    only ends the first half; the traversal carries on with other.
    :param factory: first sequence factory
    :param other: second sequence factory
    :return: sequence factory
    """

    async def concatenated():
        async with cursor(isolated(factory)) as it:
            async for item in it:
                yield item
        async with cursor(other) as it:
            async for item in it:
                yield item

    return concatenated


def slice(factory, begin, end=None):
    """
    Yield the values whose index satisfies begin <= index < end, or index >= begin when end is
    None. Upstream is not pulled past index end - 1. Bounds that select nothing (end <= begin,
    negative begin or end) give an empty sequence and upstream is never opened.
    :param factory: upstream sequence factory
    :param begin: first index to yield
    :param end: index to stop at, exclusive
    :return: sequence factory
    """
    if begin < 0 or (end is not None and (end < 0 or end <= begin)):
        return empty()

    async def sliced():
        async with cursor(factory) as it:
            index = 0
            async for item in it:
                if index >= begin:
                    yield item
                index += 1
                if index == end:
                    return

    return sliced


def _exit_stage(factory, fn, result, include_trigger):
    async def exiting():
        async with cursor(factory) as it:
            index = 0
            async for item in it:
                if await resolve(fn(item, index, factory)):
                    logger.d("exit triggered at index %d", index)
                    if include_trigger:
                        yield item
                    report_stop(result)
                    return
                yield item
                index += 1

    return exiting


def exit(factory, fn, result=None):
    """
    Yield upstream values until fn(value, index, factory) is truthy for one of them, then stop
    without yielding it. The enclosing for_each/drain reports StoppedEarly(result).
    :param factory: upstream sequence factory
    :param fn: stop condition
    :param result: payload reported to the driver
    :return: sequence factory
    """
    return _exit_stage(factory, fn, result, include_trigger=False)


def exit_after(factory, fn, result=None):
    """
    Like exit(), but the value that triggered the stop is yielded before stopping.
    :param factory: upstream sequence factory
    :param fn: stop condition
    :param result: payload reported to the driver
    :return: sequence factory
    """
    return _exit_stage(factory, fn, result, include_trigger=True)


flatMap = flat_map
exitAfter = exit_after

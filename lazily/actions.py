"""
Operations that drive a sequence factory: folds, searches, boolean tests, materialization,
and the two materializing reorderings (sort, reverse). Every driver opens exactly one
traversal and closes it as soon as it has its answer, so short-circuiting operations never
pull past the deciding element.
"""
from functools import cmp_to_key

from lazily.base import driven
from lazily.logger import get_logger
from lazily.transformations import filter
from lazily.util import resolve, strict_equal

logger = get_logger()


async def reduce(factory, fn, initial_value, fn_short_circuit=None):
    """
    Left fold: acc = fn(acc, value, index, factory). When fn_short_circuit is given it is
    checked after every step with the same arguments and a truthy result returns the current
    accumulator without pulling another value.
    :param factory: sequence factory
    :param fn: reducer
    :param initial_value: seed, may be awaitable
    :param fn_short_circuit: optional stop test
    :return: accumulated value
    """
    acc = await resolve(initial_value)
    async with driven(factory) as (it, _):
        index = 0
        async for item in it:
            acc = await resolve(fn(acc, item, index, factory))
            if fn_short_circuit is not None and await resolve(
                fn_short_circuit(acc, item, index, factory)
            ):
                return acc
            index += 1
    return acc


async def to_array(factory):
    """
    Drain factory into a list.
    :param factory: sequence factory
    :return: list of every yielded value, in order
    """
    results = []
    async with driven(factory) as (it, _):
        async for item in it:
            results.append(item)
    return results


async def for_each(factory, fn=None):
    """
    Drive a full traversal, calling fn(value, index, factory) for every value when fn is given.
    :param factory: sequence factory
    :param fn: optional per-value callback
    :return: StoppedEarly(result) if an exit stage stopped the traversal, else Completed()
    """
    async with driven(factory) as (it, slot):
        index = 0
        async for item in it:
            if fn is not None:
                await resolve(fn(item, index, factory))
            index += 1
    return slot.outcome


async def drain(factory):
    return await for_each(factory)


def sort(factory, compare_fn=None):
    """
    Sequence of the values of factory ordered by the three-way comparator compare_fn
    (negative, zero, positive), or by natural ordering when it is None. The sort is stable.
    The upstream is materialized once per traversal, when the first value is requested.
    :param factory: sequence factory
    :param compare_fn: comparator
    :return: sequence factory
    """

    async def ordered():
        items = await to_array(factory)
        logger.d("sort materialized %d items", len(items))
        if compare_fn is None:
            items.sort()
        else:
            items.sort(key=cmp_to_key(compare_fn))
        for item in items:
            yield item

    return ordered


def reverse(factory):
    """
    Sequence of the values of factory, last to first. Materializes the upstream once per
    traversal.
    :param factory: sequence factory
    :return: sequence factory
    """

    async def reversed_():
        items = await to_array(factory)
        logger.d("reverse materialized %d items", len(items))
        for item in reversed(items):
            yield item

    return reversed_


async def find(factory, fn, default=None):
    """
    First value for which fn(value, index, factory) is truthy.
    :param factory: sequence factory
    :param fn: predicate
    :param default: returned when nothing matches
    :return: matching value or default
    """
    async with driven(factory) as (it, _):
        index = 0
        async for item in it:
            if await resolve(fn(item, index, factory)):
                return item
            index += 1
    return default


async def first(factory, predicate=None, default=None):
    """
    First value, or first value matching predicate.
    :param factory: sequence factory
    :param predicate: optional predicate
    :param default: returned for an empty sequence or no match
    :return: value or default
    """
    source = filter(factory, predicate) if predicate is not None else factory
    async with driven(source) as (it, _):
        async for item in it:
            return item
    return default


async def last(factory, predicate=None, default=None):
    """
    Last value, or last value matching predicate. Always drains the whole sequence.
    :param factory: sequence factory
    :param predicate: optional predicate
    :param default: returned for an empty sequence or no match
    :return: value or default
    """
    source = filter(factory, predicate) if predicate is not None else factory
    result = default
    async with driven(source) as (it, _):
        async for item in it:
            result = item
    return result


async def some(factory, fn):
    """True as soon as fn(value, index, factory) is truthy for a value; False otherwise."""
    async with driven(factory) as (it, _):
        index = 0
        async for item in it:
            if await resolve(fn(item, index, factory)):
                return True
            index += 1
    return False


async def every(factory, fn):
    """False as soon as fn(value, index, factory) is falsy for a value; True otherwise."""
    async with driven(factory) as (it, _):
        index = 0
        async for item in it:
            if not await resolve(fn(item, index, factory)):
                return False
            index += 1
    return True


async def includes(factory, value):
    return await some(factory, lambda item, *_: strict_equal(item, value))

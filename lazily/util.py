import inspect
import collections.abc


def is_primitive(val):
    """
    Checks if the passed value is a primitive type. Primitives are never unpacked into a
    sequence, even when they are technically iterable (str, bytes).

    >>> is_primitive(1)
    True

    >>> is_primitive("abc")
    True

    >>> is_primitive([])
    False

    :param val: value to check
    :return: True if value is a primitive, else False
    """
    return isinstance(val, (str, bool, float, complex, bytes, int))


def is_iterable(val):
    """
    Check if val is a synchronous iterable.

    >>> is_iterable([1, 2])
    True
    >>> is_iterable(1)
    False

    :param val: value to check
    :return: True if val implements __iter__
    """
    return isinstance(val, collections.abc.Iterable)


def is_async_iterable(val):
    """
    Check if val implements the async iteration protocol (async generators, Seq, and any
    object defining __aiter__).

    :param val: value to check
    :return: True if val implements __aiter__
    """
    return isinstance(val, collections.abc.AsyncIterable)


def is_sequence_source(val):
    """
    Check if val can be lifted into a sequence as-is: any sync or async iterable that is not
    a primitive.
    :param val: value to check
    :return: True if val is a liftable source
    """
    if is_primitive(val):
        return False
    return is_async_iterable(val) or is_iterable(val)


async def resolve(value):
    """
    Await value if it is pending (coroutine, Future, Task or any awaitable), otherwise return
    it unchanged. Every callback result and every source element goes through here so that
    sync and async callers are treated uniformly.
    :param value: value or awaitable
    :return: resolved value
    """
    if inspect.isawaitable(value):
        return await value
    return value


def strict_equal(left, right):
    """
    Identity-or-equality check used by includes(). Booleans only match booleans, so True does
    not match 1; int and float still compare by value.

    >>> strict_equal(1, 1.0)
    True
    >>> strict_equal(1, True)
    False

    :param left: first value
    :param right: second value
    :return: True if left and right are the same object or equal values of compatible types
    """
    if left is right:
        return True
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


"""
The Seq class: an immutable handle on one sequence factory with the combinators exposed as
chainable methods. Lazy methods return a new Seq; terminal methods are coroutines.
"""
from lazily import actions, transformations
from lazily.base import of


class Seq(object):
    """
    Seq is a wrapper around a sequence factory. Every traversal (``async for``, or any terminal
    method) calls the factory once and walks the values it produces; the Seq itself holds no
    iteration state and can be traversed again as long as its source is restartable.

    Breaking out of ``async for`` leaves the cursor open until it is garbage collected. To close
    the source as soon as the loop exits, iterate under ``contextlib.aclosing``:

        async with aclosing(aiter(s)) as it:
            async for value in it:
                if done(value):
                    break

    Example:

        doubled = await Seq.of([1, 2, 3]).map(lambda x, *_: x * 2).to_array()
    """

    __slots__ = ("_factory",)

    def __init__(self, factory):
        """
        Wrap a sequence factory. Use Seq.of() to lift plain iterables and async iterables.
        :param factory: zero-argument callable returning a fresh async iterator
        """
        if not callable(factory):
            raise TypeError(f"Seq expects a sequence factory, got {type(factory).__name__}")
        object.__setattr__(self, "_factory", factory)

    def __setattr__(self, key, value):
        raise AttributeError("Seq is immutable")

    @classmethod
    def of(cls, source):
        """
        Lift a Seq, async iterable or iterable into a Seq.
        :param source: values to lift
        :return: Seq over source
        """
        if isinstance(source, cls):
            return source
        return cls(of(source))

    @property
    def factory(self):
        return self._factory

    def __aiter__(self):
        return self._factory()

    def __repr__(self):
        return f"Seq({self._factory!r})"

    def _wrap(self, factory):
        return Seq(factory)

    # lazy

    def concat(self, other):
        """
        Values of this sequence followed by the values of other.
        :param other: Seq or any source accepted by Seq.of
        :return: concatenated Seq
        """
        return self._wrap(transformations.concat(self._factory, of(other)))

    def map(self, fn):
        return self._wrap(transformations.map(self._factory, fn))

    def filter(self, fn):
        return self._wrap(transformations.filter(self._factory, fn))

    def flat_map(self, fn):
        return self._wrap(transformations.flat_map(self._factory, fn))

    def exit(self, fn, result=None):
        return self._wrap(transformations.exit(self._factory, fn, result))

    def exit_after(self, fn, result=None):
        return self._wrap(transformations.exit_after(self._factory, fn, result))

    def slice(self, begin, end=None):
        return self._wrap(transformations.slice(self._factory, begin, end))

    def sort(self, compare_fn=None):
        return self._wrap(actions.sort(self._factory, compare_fn))

    def reverse(self):
        return self._wrap(actions.reverse(self._factory))

    flatMap = flat_map
    exitAfter = exit_after

    # terminal

    async def reduce(self, fn, initial_value, fn_short_circuit=None):
        return await actions.reduce(self._factory, fn, initial_value, fn_short_circuit)

    async def find(self, fn, default=None):
        return await actions.find(self._factory, fn, default)

    async def first(self, predicate=None, default=None):
        return await actions.first(self._factory, predicate, default)

    async def last(self, predicate=None, default=None):
        return await actions.last(self._factory, predicate, default)

    async def some(self, fn):
        return await actions.some(self._factory, fn)

    async def every(self, fn):
        return await actions.every(self._factory, fn)

    async def includes(self, value):
        return await actions.includes(self._factory, value)

    async def to_array(self):
        return await actions.to_array(self._factory)

    to_list = to_array

    async def for_each(self, fn=None):
        """
        Run the pipeline to its end, calling fn(value, index, source) on each value.
        :param fn: optional callback
        :return: Completed() or StoppedEarly(result) when an exit stage stopped the traversal
        """
        return await actions.for_each(self._factory, fn)

    async def drain(self):
        return await actions.drain(self._factory)

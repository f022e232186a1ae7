"""
Package for building lazy, restartable, async-aware sequence pipelines. Imports the primary
entrypoint at streams.seq, the Seq wrapper, and the free-function combinators that operate
directly on sequence factories.
"""

from lazily.streams import seq
from lazily.pipeline import Seq
from lazily.base import Completed, StoppedEarly, Outcome, of, sequence, empty
from lazily.transformations import (
    map,
    filter,
    flat_map,
    flatMap,
    concat,
    slice,
    exit,
    exit_after,
    exitAfter,
)
from lazily.actions import (
    reduce,
    to_array,
    for_each,
    drain,
    sort,
    reverse,
    find,
    first,
    last,
    some,
    every,
    includes,
)

__license__ = "MIT"
__version__ = "0.1.0"
__status__ = "Development"

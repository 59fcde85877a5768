from __future__ import annotations
import typing
from collections import deque
from itertools import batched
from .._shared import adapt_callback, ensure_positive, wrap_unexpected
from ..types import *

if typing.TYPE_CHECKING:
    from ..iterable_collection import IterableCollection

MakeCollection = Callable[[Iterable[Any]], 'IterableCollection[Any]']

# --- windowing operators: buffer a bounded window, emit collections ---


class ChunkIterable(Generic[T]):
    """consecutive groups of exactly `size` items; the last one may be shorter"""
    def __init__(self, collection: 'IterableCollection[T]', size: int, make_collection: MakeCollection):
        self._collection = collection
        self._size = size
        self._make_collection = make_collection

    def __iter__(self) -> Iterator['IterableCollection[T]']:
        ensure_positive(self._size, "chunk size")
        for batch in batched(self._collection, self._size):
            yield self._make_collection(list(batch))


class ChunkWhileIterable(Generic[T]):
    """
    grows the current chunk while predicate(item, index, current_chunk) holds.
    a false predicate closes the chunk and opens a new one with the item.
    """
    def __init__(self, collection: 'IterableCollection[T]', predicate: Predicate, make_collection: MakeCollection):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._make_collection = make_collection

    def __iter__(self) -> Iterator['IterableCollection[T]']:
        chunk: List[T] = []
        for index, item in enumerate(self._collection):
            if index == 0 or self._predicate(item, index, self._make_collection(chunk)):
                chunk.append(item)
            else:
                yield self._make_collection(chunk)
                chunk = [item]
        if chunk:
            yield self._make_collection(chunk)


class SplitIterable(Generic[T]):
    """
    splits the sequence into exactly `amount` groups as evenly as possible.
    the earliest groups take the remainder, so sizes differ by at most one.
    """
    def __init__(self, collection: 'IterableCollection[T]', amount: int, make_collection: MakeCollection):
        self._collection = collection
        self._amount = amount
        self._make_collection = make_collection

    @wrap_unexpected
    def __iter__(self) -> Iterator['IterableCollection[T]']:
        ensure_positive(self._amount, "split amount")
        items = list(self._collection)
        min_size, rest = divmod(len(items), self._amount)
        start = 0
        for index in range(self._amount):
            end = start + min_size + (1 if index < rest else 0)
            yield self._make_collection(items[start:end])
            start = end


class SlidingIterable(Generic[T]):
    """
    rolling windows of `size` items whose starts move by `step`.
    a trailing partial window is emitted only when no full window already
    reached the end; a source shorter than one window yields nothing.
    """
    def __init__(self, collection: 'IterableCollection[T]', size: int, step: int, make_collection: MakeCollection):
        self._collection = collection
        self._size = size
        self._step = step
        self._make_collection = make_collection

    @wrap_unexpected
    def __iter__(self) -> Iterator['IterableCollection[T]']:
        ensure_positive(self._size, "window size")
        ensure_positive(self._step, "window step")
        window = deque()
        to_skip = 0  # when step > size, items between windows are dropped
        emitted_any, has_fresh = False, False
        for item in self._collection:
            if to_skip:
                to_skip -= 1
                continue
            window.append(item)
            has_fresh = True
            if len(window) == self._size:
                yield self._make_collection(list(window))
                emitted_any, has_fresh = True, False
                dropped = min(self._step, self._size)
                for _ in range(dropped):
                    window.popleft()
                to_skip = self._step - dropped
        if emitted_any and has_fresh and window:
            yield self._make_collection(list(window))


class PartitionIterable(Generic[T]):
    """exactly two groups: the matching items, then the rest"""
    def __init__(self, collection: 'IterableCollection[T]', predicate: Predicate, make_collection: MakeCollection):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._make_collection = make_collection

    def __iter__(self) -> Iterator['IterableCollection[T]']:
        matched, rest = [], []
        for index, item in enumerate(self._collection):
            (matched if self._predicate(item, index, self._collection) else rest).append(item)
        yield self._make_collection(matched)
        yield self._make_collection(rest)


class ReverseIterable(Generic[T]):
    """reads the upstream in bounded chunks and re-threads them back to front"""
    def __init__(self, collection: 'IterableCollection[T]', chunk_size: int):
        self._collection = collection
        self._chunk_size = chunk_size

    @wrap_unexpected
    def __iter__(self) -> Iterator[T]:
        ensure_positive(self._chunk_size, "chunk size")
        chunks = list(batched(self._collection, self._chunk_size))
        for chunk in reversed(chunks):
            yield from reversed(chunk)

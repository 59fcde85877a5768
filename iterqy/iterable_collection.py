from __future__ import annotations

import numpy as np
import pandas as pd

from ._shared import (
    MISSING, adapt_callback, ensure_number, identity, resolve_lazyable, to_iterable, wrap_unexpected,
    wrap_unexpected_call
)
from .errors import (
    EmptyCollectionError,
    ItemNotFoundCollectionError,
    MultipleItemsFoundCollectionError,
    TypeCollectionError,
)
from .iterables import *
from .settings import CollectionSettings
from .types import *


def _always(*_: Any) -> bool:
    return True


class IterableCollection(Generic[T]):
    """
    a lazy, chainable collection over any iterable source.

    every method returning a collection only wraps `self` in a new operator;
    nothing is pulled from the source until the collection is iterated or a
    terminal method (to_list, sum, first, ...) is called. the source is re-read
    from scratch on every enumeration, so one-shot sources such as generators
    should be memoized before being enumerated twice.
    """

    def __init__(self, source: Source[T] = None, settings: Optional[CollectionSettings] = None):
        self._source = source
        self._settings = settings or CollectionSettings()

    @wrap_unexpected
    def __iter__(self) -> Iterator[T]:
        yield from to_iterable(self._source)

    def __repr__(self) -> str:
        return f"IterableCollection(source={type(self._source).__name__})"

    def _make(self, source: Source[U]) -> 'IterableCollection[U]':
        """wrap source in a new collection carrying the same settings"""
        return IterableCollection(source, self._settings)

    @property
    def settings(self) -> CollectionSettings:
        return self._settings

    # --- class level helpers ---

    @classmethod
    def concat(cls, iterables: Iterable[Source[T]], settings: Optional[CollectionSettings] = None) -> 'IterableCollection[T]':
        """concatenate several sources into one collection"""
        return cls(lambda: MergeIterable(*to_iterable(iterables)), settings)

    @classmethod
    def difference_of(cls, iterable_a: Source[T], iterable_b: Source[T],
                      selector: Optional[Mapper] = None) -> 'IterableCollection[T]':
        return cls(iterable_a).difference(iterable_b, selector)

    @classmethod
    def zip_of(cls, iterable_a: Source[T], iterable_b: Source[U]) -> 'IterableCollection[Tuple[T, U]]':
        return cls(iterable_a).zip(iterable_b)

    # --- streaming operators ---

    def entries(self) -> 'IterableCollection[Tuple[int, T]]':
        """(index, item) pairs"""
        return self._make(EntriesIterable(self))

    def keys(self) -> 'IterableCollection[int]':
        return self.entries().map(lambda entry: entry[0])

    def values(self) -> 'IterableCollection[T]':
        return self.entries().map(lambda entry: entry[1])

    def filter(self, predicate: Predicate) -> 'IterableCollection[T]':
        """keep the items for which predicate(item, index, collection) holds"""
        return self._make(FilterIterable(self, predicate))

    def reject(self, predicate: Predicate) -> 'IterableCollection[T]':
        """the exact complement of filter"""
        test = adapt_callback(predicate)
        return self.filter(lambda item, index, collection: not test(item, index, collection))

    def map(self, mapper: Mapper) -> 'IterableCollection[U]':
        """project each item with mapper(item, index, collection)"""
        return self._make(MapIterable(self, mapper))

    def flat_map(self, mapper: Mapper) -> 'IterableCollection[U]':
        """project each item to an iterable and flatten the results one level"""
        return self._make(FlatMapIterable(self, mapper))

    def collapse(self) -> 'IterableCollection[Any]':
        """flatten nested iterables one level"""
        return self._make(CollapseIterable(self))

    def change(self, predicate: Predicate, mapper: Mapper) -> 'IterableCollection[Union[T, U]]':
        """map only the items that match predicate"""
        return self._make(UpdateIterable(self, predicate, mapper))

    def set(self, index: int, value: Union[T, Mapper]) -> 'IterableCollection[T]':
        """
        replace the item at index. a callable value is applied to the current
        item instead of being stored. a negative index leaves the collection as is.
        """
        if index < 0:
            return self
        mapper = value if callable(value) else (lambda _: value)
        return self.change(lambda _, item_index: item_index == index, mapper)

    def page(self, page: int, page_size: int) -> 'IterableCollection[T]':
        """1-based pagination; negative pages count from the end"""
        if page < 0:
            return self.skip(page * page_size).take(page_size)
        return self.skip((page - 1) * page_size).take(page_size)

    def take(self, limit: int) -> 'IterableCollection[T]':
        """first `limit` items, or all but the last `abs(limit)` when negative"""
        return self._make(TakeIterable(self, limit))

    def take_until(self, predicate: Predicate) -> 'IterableCollection[T]':
        """items before the first match, the match itself excluded"""
        return self._make(TakeUntilIterable(self, predicate))

    def take_while(self, predicate: Predicate) -> 'IterableCollection[T]':
        test = adapt_callback(predicate)
        return self.take_until(lambda item, index, collection: not test(item, index, collection))

    def skip(self, offset: int) -> 'IterableCollection[T]':
        """drop the first `offset` items, or keep only the last `abs(offset)` when negative"""
        return self._make(SkipIterable(self, offset))

    def skip_until(self, predicate: Predicate) -> 'IterableCollection[T]':
        """drop items until the first match; the match is the first item kept"""
        return self._make(SkipUntilIterable(self, predicate))

    def skip_while(self, predicate: Predicate) -> 'IterableCollection[T]':
        test = adapt_callback(predicate)
        return self.skip_until(lambda item, index, collection: not test(item, index, collection))

    def nth(self, step: int) -> 'IterableCollection[T]':
        """every step-th item, starting with the first"""
        return self._make(NthIterable(self, step))

    def tap(self, callback: Tap) -> 'IterableCollection[T]':
        """call callback(collection) when enumeration starts, leave the items untouched"""
        return self._make(TapIterable(self, callback))

    def when(self, condition: bool, callback: Modifier) -> 'IterableCollection[Any]':
        """apply callback(collection) only if condition is true"""
        return self._make(WhenIterable(self, lambda: condition, callback))

    def when_not(self, condition: bool, callback: Modifier) -> 'IterableCollection[Any]':
        return self.when(not condition, callback)

    def when_empty(self, callback: Modifier) -> 'IterableCollection[Any]':
        return self._make(WhenIterable(self, self.is_empty, callback))

    def when_not_empty(self, callback: Modifier) -> 'IterableCollection[Any]':
        return self._make(WhenIterable(self, self.is_not_empty, callback))

    def prepend(self, iterable: Source[U]) -> 'IterableCollection[Union[T, U]]':
        return self._make(MergeIterable(iterable, self))

    def append(self, iterable: Source[U]) -> 'IterableCollection[Union[T, U]]':
        return self._make(MergeIterable(self, iterable))

    def insert_before(self, predicate: Predicate, iterable: Source[U]) -> 'IterableCollection[Union[T, U]]':
        """insert items before the first match only"""
        return self._make(InsertBeforeIterable(self, predicate, iterable))

    def insert_after(self, predicate: Predicate, iterable: Source[U]) -> 'IterableCollection[Union[T, U]]':
        """insert items after the first match only"""
        return self._make(InsertAfterIterable(self, predicate, iterable))

    def repeat(self, amount: int) -> 'IterableCollection[T]':
        return self._make(RepeatIterable(self, amount))

    # --- windowing operators ---

    def chunk(self, size: int) -> 'IterableCollection[IterableCollection[T]]':
        """groups of exactly `size` items, the last group may be shorter"""
        return self._make(ChunkIterable(self, size, self._make))

    def chunk_while(self, predicate: Predicate) -> 'IterableCollection[IterableCollection[T]]':
        """
        grow the current chunk while predicate(item, index, current_chunk) holds.
        useful for grouping runs, e.g. `lambda item, _, chunk: chunk.last() == item`.
        """
        return self._make(ChunkWhileIterable(self, predicate, self._make))

    def split(self, amount: int) -> 'IterableCollection[IterableCollection[T]]':
        """exactly `amount` groups, as even as possible, earliest groups larger"""
        return self._make(SplitIterable(self, amount, self._make))

    def partition(self, predicate: Predicate) -> 'IterableCollection[IterableCollection[T]]':
        """two groups: the matches, then the rest"""
        return self._make(PartitionIterable(self, predicate, self._make))

    def sliding(self, size: int, step: Optional[int] = None) -> 'IterableCollection[IterableCollection[T]]':
        """rolling windows of `size` items; the step defaults to size - 1"""
        step = size - 1 if step is None else step
        return self._make(SlidingIterable(self, size, step, self._make))

    def reverse(self, chunk_size: Optional[int] = None) -> 'IterableCollection[T]':
        return self._make(ReverseIterable(self, self._settings.chunk_size if chunk_size is None else chunk_size))

    # --- set and bucket operators ---

    def group_by(self, selector: Optional[Mapper] = None) -> 'IterableCollection[Tuple[Any, IterableCollection[T]]]':
        """(key, collection) pairs in first-seen key order"""
        return self._make(GroupByIterable(self, selector, self._make))

    def count_by(self, selector: Optional[Mapper] = None) -> 'IterableCollection[Tuple[Any, int]]':
        """(key, count) pairs in first-seen key order"""
        return self._make(CountByIterable(self, selector))

    def unique(self, selector: Optional[Mapper] = None) -> 'IterableCollection[T]':
        """first item of every distinct selector value, order preserved"""
        return self._make(UniqueIterable(self, selector))

    def difference(self, iterable: Source[T], selector: Optional[Mapper] = None) -> 'IterableCollection[T]':
        """
        items whose selector value matches no item of `iterable`.
        every item is checked with a linear scan of `iterable`, so any
        selector value that supports == works, hashable or not.
        """
        select = adapt_callback(selector or identity)
        other = self._make(iterable)

        def is_absent(item, index, collection):
            key = select(item, index, collection)
            return not other.some(
                lambda match, match_index, match_collection: select(match, match_index, match_collection) == key
            )

        return self.filter(is_absent)

    def cross_join(self, *iterables: Source[Any]) -> 'IterableCollection[Tuple[Any, ...]]':
        """cartesian product with every given source, as flat tuples"""
        return self._make(CrossJoinIterable(self, iterables))

    def zip(self, iterable: Source[U]) -> 'IterableCollection[Tuple[T, U]]':
        return self._make(ZipIterable(self, iterable))

    def pad_start(self, max_length: int, fill_items: Source[U]) -> 'IterableCollection[Union[T, U]]':
        """prepend repeats of fill_items until the collection is max_length long"""
        return self._make(PadStartIterable(self, max_length, fill_items))

    def pad_end(self, max_length: int, fill_items: Source[U]) -> 'IterableCollection[Union[T, U]]':
        """append repeats of fill_items until the collection is max_length long"""
        return self._make(PadEndIterable(self, max_length, fill_items))

    # --- global operators ---

    def sort(self, comparator: Optional[Comparator[T]] = None) -> 'IterableCollection[T]':
        return self._make(SortIterable(self, comparator))

    def shuffle(self, random_source: Optional[RandomSource] = None) -> 'IterableCollection[T]':
        return self._make(ShuffleIterable(self, random_source or self._settings.random_source))

    def slice(self, start: Optional[int] = None, end: Optional[int] = None) -> 'IterableCollection[T]':
        return self._make(SliceIterable(self, start, end))

    def memoize(self) -> 'IterableCollection[T]':
        """
        cache items as they are first pulled so the result can be enumerated
        repeatedly, even over a generator. still lazy: nothing is pulled until
        the returned collection is iterated.
        """
        return self._make(MemoizedIterable(self))

    # --- terminal: folding ---

    @wrap_unexpected_call
    def pipe(self, callback: Transform[U]) -> U:
        return callback(self)

    @wrap_unexpected_call
    def reduce(self, reducer: Reducer, initial: Any = MISSING) -> Any:
        """
        fold with reducer(accumulator, item, index, collection).
        without an initial value the first item seeds the fold; an empty
        collection then raises TypeCollectionError.
        """
        reduce_fn = adapt_callback(reducer, fallback=2)
        output = initial
        for index, item in enumerate(self):
            if output is MISSING:
                output = item
                continue
            output = reduce_fn(output, item, index, self)
        if output is MISSING:
            raise TypeCollectionError("reduce of an empty collection requires an initial value")
        return output

    def join(self, separator: str = ",") -> str:
        """join string items; any other item type raises TypeCollectionError"""
        parts = []
        for item in self:
            if not isinstance(item, str):
                raise TypeCollectionError(f"item type is invalid, must be a string: {item!r}")
            parts.append(item)
        return separator.join(parts)

    # --- terminal: numeric aggregates ---

    def _numbers(self) -> List[Union[int, float]]:
        values = [ensure_number(item) for item in self]
        if not values:
            raise_empty()
        return values

    def sum(self) -> Union[int, float]:
        return total(self._numbers())

    def average(self) -> float:
        values = self._numbers()
        return sum(values) / len(values)

    def median(self) -> Union[int, float]:
        """the positional middle item, or the mean of the two middle items; does not sort"""
        return middle(self._numbers())

    def min(self) -> Union[int, float]:
        return min(self._numbers())

    def max(self) -> Union[int, float]:
        return max(self._numbers())

    @wrap_unexpected_call
    def percentage(self, predicate: Predicate) -> float:
        """share of matching items, from 0 to 100"""
        test = adapt_callback(predicate)
        part, size = 0, 0
        for index, item in enumerate(self):
            if test(item, index, self):
                part += 1
            size += 1
        if size == 0:
            raise_empty()
        return part * 100 / size

    # --- terminal: queries ---

    @wrap_unexpected_call
    def some(self, predicate: Optional[Predicate] = None) -> bool:
        test = adapt_callback(predicate or _always)
        return any(test(item, index, self) for index, item in enumerate(self))

    @wrap_unexpected_call
    def every(self, predicate: Predicate) -> bool:
        test = adapt_callback(predicate)
        return all(test(item, index, self) for index, item in enumerate(self))

    @wrap_unexpected_call
    def count(self, predicate: Optional[Predicate] = None) -> int:
        test = adapt_callback(predicate or _always)
        return sum(1 for index, item in enumerate(self) if test(item, index, self))

    def size(self) -> int:
        return self.count()

    def is_empty(self) -> bool:
        for _ in self:
            return False
        return True

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    @wrap_unexpected_call
    def search_first(self, predicate: Predicate) -> int:
        """index of the first match, or -1"""
        test = adapt_callback(predicate)
        for index, item in enumerate(self):
            if test(item, index, self):
                return index
        return -1

    @wrap_unexpected_call
    def search_last(self, predicate: Predicate) -> int:
        """index of the last match, or -1"""
        test = adapt_callback(predicate)
        matched_index = -1
        for index, item in enumerate(self):
            if test(item, index, self):
                matched_index = index
        return matched_index

    # --- terminal: item lookup ---

    def first(self, predicate: Optional[Predicate] = None) -> Optional[T]:
        return self.first_or(None, predicate)

    @wrap_unexpected_call
    def first_or(self, default: Lazyable[U], predicate: Optional[Predicate] = None) -> Union[T, U]:
        test = adapt_callback(predicate or _always)
        for index, item in enumerate(self):
            if test(item, index, self):
                return item
        return resolve_lazyable(default)

    def first_or_fail(self, predicate: Optional[Predicate] = None) -> T:
        return self.first_or(raise_not_found, predicate)

    def last(self, predicate: Optional[Predicate] = None) -> Optional[T]:
        return self.last_or(None, predicate)

    @wrap_unexpected_call
    def last_or(self, default: Lazyable[U], predicate: Optional[Predicate] = None) -> Union[T, U]:
        test = adapt_callback(predicate or _always)
        matched = MISSING
        for index, item in enumerate(self):
            if test(item, index, self):
                matched = item
        return resolve_lazyable(default) if matched is MISSING else matched

    def last_or_fail(self, predicate: Optional[Predicate] = None) -> T:
        return self.last_or(raise_not_found, predicate)

    def before(self, predicate: Predicate) -> Optional[T]:
        return self.before_or(None, predicate)

    @wrap_unexpected_call
    def before_or(self, default: Lazyable[U], predicate: Predicate) -> Union[T, U]:
        """the item right before the first match that has a predecessor"""
        test = adapt_callback(predicate)
        previous = MISSING
        for index, item in enumerate(self):
            if test(item, index, self) and previous is not MISSING:
                return previous
            previous = item
        return resolve_lazyable(default)

    def before_or_fail(self, predicate: Predicate) -> T:
        return self.before_or(raise_not_found, predicate)

    def after(self, predicate: Predicate) -> Optional[T]:
        return self.after_or(None, predicate)

    @wrap_unexpected_call
    def after_or(self, default: Lazyable[U], predicate: Predicate) -> Union[T, U]:
        """the item right after the first match"""
        test = adapt_callback(predicate)
        matched = False
        for index, item in enumerate(self):
            if matched:
                return item
            matched = test(item, index, self)
        return resolve_lazyable(default)

    def after_or_fail(self, predicate: Predicate) -> T:
        return self.after_or(raise_not_found, predicate)

    def get(self, index: int) -> Optional[T]:
        return self.first(lambda _, item_index: item_index == index)

    def get_or_fail(self, index: int) -> T:
        return self.first_or_fail(lambda _, item_index: item_index == index)

    @wrap_unexpected_call
    def sole(self, predicate: Optional[Predicate] = None) -> T:
        """the only matching item; none or several matches raise"""
        test = adapt_callback(predicate or _always)
        matched = MISSING
        for index, item in enumerate(self):
            if not test(item, index, self):
                continue
            if matched is not MISSING:
                raise_multiple_found()
            matched = item
        if matched is MISSING:
            raise_not_found()
        return matched

    # --- terminal: materializers ---

    @wrap_unexpected_call
    def for_each(self, callback: ForEach) -> None:
        """call callback(item, index, collection) for every item; eager"""
        call = adapt_callback(callback)
        for index, item in enumerate(self):
            call(item, index, self)

    def to_iterator(self) -> Iterator[T]:
        return iter(self)

    def to_list(self) -> List[T]:
        return list(self)

    @wrap_unexpected_call
    def to_record(self) -> Dict[Union[str, int, float], Any]:
        """
        dict from (key, value) pairs whose keys are strings or numbers.
        anything else raises TypeCollectionError.
        """
        return build_record(self)

    @wrap_unexpected_call
    def to_map(self) -> Dict[Any, Any]:
        """dict from (key, value) pairs with any hashable key"""
        return build_map(self)

    def to_numpy(self) -> np.ndarray:
        return np.array(self.to_list())

    def to_series(self) -> pd.Series:
        return pd.Series(self.to_list())

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.to_list())


# --- helpers shared with the async collection ---

def raise_not_found() -> Any:
    raise ItemNotFoundCollectionError("item was not found")


def raise_multiple_found() -> Any:
    raise MultipleItemsFoundCollectionError("multiple items were found")


def raise_empty() -> Any:
    raise EmptyCollectionError("collection is empty, operation cannot be performed")


def total(values: List[Union[int, float]]) -> Union[int, float]:
    """
    numpy sum, falling back to the builtin for values numpy can't hold.
    python ints are summed as objects so large totals never wrap around.
    """
    try:
        if all(isinstance(value, int) for value in values):
            return int(np.sum(np.asarray(values, dtype=object)))
        result = np.sum(values)
        return result.item() if hasattr(result, 'item') else result
    except (TypeError, ValueError, OverflowError):
        return sum(values)


def middle(values: List[Union[int, float]]) -> Union[int, float]:
    mid = len(values) // 2
    if len(values) % 2 == 0:
        return (values[mid - 1] + values[mid]) / 2
    return values[mid]


def _unpack_pair(item: Any, expected: str) -> Tuple[Any, Any]:
    if not isinstance(item, (tuple, list)) or len(item) != 2:
        raise TypeCollectionError(f"item type is invalid, must be {expected}")
    return item[0], item[1]


def build_record(items: Iterable[Any]) -> Dict[Union[str, int, float], Any]:
    expected = "a tuple of size 2 whose first item is a string or a number"
    record = {}
    for item in items:
        key, value = _unpack_pair(item, expected)
        if not isinstance(key, (str, int, float)):
            raise TypeCollectionError(f"item type is invalid, must be {expected}")
        record[key] = value
    return record


def build_map(items: Iterable[Any]) -> Dict[Any, Any]:
    mapping = {}
    for item in items:
        key, value = _unpack_pair(item, "a tuple of size 2 with a hashable first item")
        try:
            mapping[key] = value
        except TypeError as error:
            raise TypeCollectionError(f"item key is not hashable: {key!r}") from error
    return mapping

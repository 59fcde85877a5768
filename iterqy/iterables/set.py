from __future__ import annotations
import typing
from .._shared import adapt_callback, identity, to_iterable, wrap_unexpected
from ..types import *

if typing.TYPE_CHECKING:
    from ..iterable_collection import IterableCollection

MakeCollection = Callable[[Iterable[Any]], 'IterableCollection[Any]']


class KeyedBuckets(Generic[K, V]):
    """
    insertion-ordered key -> value store used by the bucket operators.
    hashable keys are looked up in o(1); unhashable keys fall back to an
    equality scan, so selectors may return lists or dicts.
    """
    def __init__(self):
        self._keys: List[K] = []
        self._values: List[V] = []
        self._positions: Dict[K, int] = {}

    def _position(self, key: K) -> Optional[int]:
        try:
            return self._positions.get(key)
        except TypeError:
            for position, existing in enumerate(self._keys):
                if existing == key:
                    return position
            return None

    def __contains__(self, key: K) -> bool:
        return self._position(key) is not None

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        position = self._position(key)
        return default if position is None else self._values[position]

    def put(self, key: K, value: V) -> None:
        position = self._position(key)
        if position is not None:
            self._values[position] = value
            return
        try:
            self._positions[key] = len(self._keys)
        except TypeError:
            pass  # unhashable, found by scanning
        self._keys.append(key)
        self._values.append(value)

    def items(self) -> Iterator[Tuple[K, V]]:
        return zip(self._keys, self._values)


# --- bucket operators: one full pass, buckets ordered by first-seen key ---


class GroupByIterable(Generic[T, K]):
    def __init__(self, collection: 'IterableCollection[T]', selector: Optional[Mapper], make_collection: MakeCollection):
        self._collection = collection
        self._selector = adapt_callback(selector or identity)
        self._make_collection = make_collection

    def __iter__(self) -> Iterator[Tuple[K, 'IterableCollection[T]']]:
        buckets: KeyedBuckets[K, List[T]] = KeyedBuckets()
        for index, item in enumerate(self._collection):
            key = self._selector(item, index, self._collection)
            bucket = buckets.get(key)
            if bucket is None:
                bucket = []
                buckets.put(key, bucket)
            bucket.append(item)
        for key, bucket in buckets.items():
            yield key, self._make_collection(bucket)


class CountByIterable(Generic[T, K]):
    def __init__(self, collection: 'IterableCollection[T]', selector: Optional[Mapper]):
        self._collection = collection
        self._selector = adapt_callback(selector or identity)

    def __iter__(self) -> Iterator[Tuple[K, int]]:
        counts: KeyedBuckets[K, int] = KeyedBuckets()
        for index, item in enumerate(self._collection):
            key = self._selector(item, index, self._collection)
            counts.put(key, counts.get(key, 0) + 1)
        yield from counts.items()


class UniqueIterable(Generic[T, K]):
    """keeps the first item seen for every distinct selector value"""
    def __init__(self, collection: 'IterableCollection[T]', selector: Optional[Mapper]):
        self._collection = collection
        self._selector = adapt_callback(selector or identity)

    def __iter__(self) -> Iterator[T]:
        seen: KeyedBuckets[K, bool] = KeyedBuckets()
        for index, item in enumerate(self._collection):
            key = self._selector(item, index, self._collection)
            if key not in seen:
                seen.put(key, True)
                yield item


class CrossJoinIterable(Generic[T]):
    """
    cartesian product of the collection and every other source, built as a
    left fold: start from one empty combination and extend every partial
    combination with every item of the next source. the leftmost source
    varies slowest and every emitted combination is a flat tuple.
    """
    def __init__(self, collection: 'IterableCollection[T]', iterables: Tuple[Source[Any], ...]):
        self._collection = collection
        self._iterables = iterables

    @wrap_unexpected
    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        combinations: List[Tuple[Any, ...]] = [()]
        for iterable in (self._collection, *self._iterables):
            items = list(to_iterable(iterable))
            combinations = [combination + (item,) for combination in combinations for item in items]
        yield from combinations


class ZipIterable(Generic[T, U]):
    """pairs items by position, stopping with the shorter side"""
    def __init__(self, collection: 'IterableCollection[T]', iterable: Source[U]):
        self._collection = collection
        self._iterable = iterable

    def __iter__(self) -> Iterator[Tuple[T, U]]:
        yield from zip(self._collection, to_iterable(self._iterable))


def repeat_fill(fill_items: List[U], missing: int) -> Iterator[U]:
    """whole repeats of fill_items, then a prefix of it, `missing` items in total"""
    if missing <= 0 or not fill_items:
        return
    repeat, rest = divmod(missing, len(fill_items))
    for _ in range(repeat):
        yield from fill_items
    yield from fill_items[:rest]


class PadStartIterable(Generic[T, U]):
    def __init__(self, collection: 'IterableCollection[T]', max_length: int, fill_items: Source[U]):
        self._collection = collection
        self._max_length = max_length
        self._fill_items = fill_items

    @wrap_unexpected
    def __iter__(self) -> Iterator[Union[T, U]]:
        fill_items = list(to_iterable(self._fill_items))
        items = list(self._collection)
        yield from repeat_fill(fill_items, self._max_length - len(items))
        yield from items


class PadEndIterable(Generic[T, U]):
    """streams the upstream first and counts it, so only the fill is buffered"""
    def __init__(self, collection: 'IterableCollection[T]', max_length: int, fill_items: Source[U]):
        self._collection = collection
        self._max_length = max_length
        self._fill_items = fill_items

    @wrap_unexpected
    def __iter__(self) -> Iterator[Union[T, U]]:
        size = 0
        for item in self._collection:
            size += 1
            yield item
        yield from repeat_fill(list(to_iterable(self._fill_items)), self._max_length - size)

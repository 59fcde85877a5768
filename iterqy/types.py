from datetime import timedelta
from typing import (
    TypeVar, Generic, Callable, Iterator, Iterable, AsyncIterator, AsyncIterable,
    Awaitable, Any, Optional, Union, Dict, List, Tuple
)

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')
V = TypeVar('V')

# callbacks are offered (item, index, collection); they may declare fewer parameters
Predicate = Callable[..., bool]
Mapper = Callable[..., U]
Reducer = Callable[..., U]
ForEach = Callable[..., Any]
Comparator = Callable[[T, T], int]
Tap = Callable[[Any], Any]
Modifier = Callable[[Any], Any]
Transform = Callable[[Any], U]

# async variants may return an awaitable instead of a plain value
AsyncPredicate = Callable[..., Union[bool, Awaitable[bool]]]
AsyncMapper = Callable[..., Union[U, Awaitable[U]]]

RandomSource = Callable[[], float]
TimeSpan = Union[int, float, timedelta]

# a plain value, or a zero-argument callable producing it
Lazyable = Union[T, Callable[[], T]]

# anything a collection can be built from
Source = Union[Iterable[T], Callable[[], Iterable[T]], None]
AsyncSource = Union[AsyncIterable[T], Iterable[T], Callable[[], Any], None]

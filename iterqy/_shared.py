from __future__ import annotations

import inspect
import logging
import numbers
from collections import abc
from contextlib import aclosing
from datetime import timedelta
from functools import wraps

from .errors import CollectionError, TypeCollectionError, UnexpectedCollectionError
from .types import *

logger = logging.getLogger(__name__)

# iterable in python, but treated as single values when flattening
_ATOMS = (str, bytes, bytearray)

# marks "no value" where None is a legitimate item
MISSING = object()


# --- source normalization ---

def is_iterable(value: Any) -> bool:
    """true for containers worth flattening; strings and bytes are atoms"""
    return isinstance(value, abc.Iterable) and not isinstance(value, _ATOMS)


def is_async_iterable(value: Any) -> bool:
    return isinstance(value, abc.AsyncIterable)


def to_iterable(source: Source[T]) -> Iterable[T]:
    """
    normalize any supported source into a plain iterable.
    mappings become (key, value) pairs, zero-argument callables are treated as
    restartable factories and called afresh every time.
    """
    if source is None:
        return ()
    if isinstance(source, abc.Mapping):
        return source.items()
    if isinstance(source, abc.Iterable):
        return source
    if callable(source):
        return to_iterable(source())
    raise TypeCollectionError(f"source of type '{type(source).__name__}' is not iterable")


async def aiterate(source: AsyncSource[T]) -> AsyncIterator[T]:
    """async counterpart of to_iterable, also accepting async iterables"""
    if isinstance(source, abc.AsyncIterable):
        async for item in source:
            yield item
        return
    if callable(source) and not isinstance(source, abc.Iterable):
        produced = source()
        if inspect.isawaitable(produced):
            produced = await produced
        async for item in aiterate(produced):
            yield item
        return
    for item in to_iterable(source):
        yield item


async def aenumerate(iterable: AsyncIterable[T], start: int = 0) -> AsyncIterator[Tuple[int, T]]:
    """async counterpart of enumerate"""
    index = start
    async for item in iterable:
        yield index, item
        index += 1


async def resolve(value: Any) -> Any:
    """await value if it is awaitable, otherwise hand it back"""
    if inspect.isawaitable(value):
        return await value
    return value


def resolve_lazyable(value: Lazyable[T]) -> T:
    return value() if callable(value) else value


# --- callbacks ---

def adapt_callback(fn: Callable, fallback: int = 1) -> Callable:
    """
    wrap fn so it can always be offered (item, index, collection) - or
    (accumulator, item, index, collection) for reducers - and only receives as
    many positional arguments as it declares. builtins without an inspectable
    signature receive `fallback` arguments.
    """
    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return lambda *args: fn(*args[:fallback])

    if any(p.kind == p.VAR_POSITIONAL for p in params):
        return fn
    count = sum(1 for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD))
    return lambda *args: fn(*args[:count])


def identity(item: T, *_: Any) -> T:
    return item


# --- numbers and time ---

def is_number(value: Any) -> bool:
    """real numbers only; bools are not counted as numbers"""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def ensure_number(value: Any) -> Any:
    if not is_number(value):
        raise TypeCollectionError(f"item type is invalid, must be a number: {value!r}")
    return value


def ensure_positive(value: int, name: str) -> None:
    if value <= 0:
        raise TypeCollectionError(f"{name} must be a positive integer, got {value}")


def to_seconds(time: TimeSpan) -> float:
    if isinstance(time, timedelta):
        return time.total_seconds()
    return float(time)


# --- error wrapping ---

def _unexpected(error: Exception, where: str) -> UnexpectedCollectionError:
    logger.debug(f"wrapping {type(error).__name__} raised inside {where}")
    return UnexpectedCollectionError(f"unexpected error \"{error}\" occurred")


def wrap_unexpected(func: Callable) -> Callable:
    """re-raise collection errors as they are, wrap anything else"""
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            yield from func(self, *args, **kwargs)
        except CollectionError:
            raise
        except Exception as error:
            raise _unexpected(error, type(self).__name__) from error
    return wrapper


def wrap_unexpected_async(func: Callable) -> Callable:
    """async generator version of wrap_unexpected"""
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            async with aclosing(func(self, *args, **kwargs)) as items:
                async for item in items:
                    yield item
        except CollectionError:
            raise
        except Exception as error:
            raise _unexpected(error, type(self).__name__) from error
    return wrapper


def wrap_unexpected_call(func: Callable) -> Callable:
    """wrap_unexpected for plain methods such as terminals running callbacks"""
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except CollectionError:
            raise
        except Exception as error:
            raise _unexpected(error, func.__qualname__) from error
    return wrapper


def wrap_unexpected_call_async(func: Callable) -> Callable:
    """coroutine version of wrap_unexpected_call"""
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except CollectionError:
            raise
        except Exception as error:
            raise _unexpected(error, func.__qualname__) from error
    return wrapper

from __future__ import annotations
import asyncio
import logging
import typing
from contextlib import aclosing
from .._shared import to_seconds
from ..types import *

if typing.TYPE_CHECKING:
    from ..async_iterable_collection import AsyncIterableCollection

logger = logging.getLogger(__name__)

# --- time and cancellation stages; each pulls one item at a time ---

_END = object()


async def _pull(iterator: AsyncIterator[T]) -> Any:
    return await anext(iterator, _END)


class AsyncDelayIterable(Generic[T]):
    """sleeps `time` before handing out each item"""
    def __init__(self, collection: 'AsyncIterableCollection[T]', time: TimeSpan):
        self._collection = collection
        self._time = time

    async def __aiter__(self) -> AsyncIterator[T]:
        seconds = to_seconds(self._time)
        async for item in self._collection:
            await asyncio.sleep(seconds)
            yield item


class AsyncTakeUntilAbortIterable(Generic[T]):
    """
    ends enumeration once `event` is set. every upstream pull races the event,
    so a pending pull is cancelled as soon as the abort arrives.
    """
    def __init__(self, collection: 'AsyncIterableCollection[T]', event: asyncio.Event):
        self._collection = collection
        self._event = event

    async def __aiter__(self) -> AsyncIterator[T]:
        async with aclosing(self._collection.__aiter__()) as iterator:
            aborted = asyncio.ensure_future(self._event.wait())
            try:
                while not self._event.is_set():
                    pull = asyncio.ensure_future(_pull(iterator))
                    await asyncio.wait({pull, aborted}, return_when=asyncio.FIRST_COMPLETED)
                    if self._event.is_set():
                        pull.cancel()
                        await asyncio.wait({pull})
                        if not pull.cancelled() and pull.exception() is not None:
                            logger.debug(f"dropping {type(pull.exception()).__name__} from a pull that lost to the abort")
                        break
                    item = pull.result()
                    if item is _END:
                        return
                    yield item
                logger.debug("enumeration aborted")
            finally:
                aborted.cancel()


class AsyncTakeUntilTimeoutIterable(Generic[T]):
    """ends enumeration once `time` has passed since it started"""
    def __init__(self, collection: 'AsyncIterableCollection[T]', time: TimeSpan):
        self._collection = collection
        self._time = time

    async def __aiter__(self) -> AsyncIterator[T]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + to_seconds(self._time)
        async with aclosing(self._collection.__aiter__()) as iterator:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                try:
                    item = await asyncio.wait_for(_pull(iterator), remaining)
                except asyncio.TimeoutError:
                    break
                if item is _END:
                    return
                yield item
            logger.debug(f"enumeration timed out after {to_seconds(self._time)}s")

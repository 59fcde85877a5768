from .core import (
    AsyncEntriesIterable,
    AsyncFilterIterable,
    AsyncMapIterable,
    AsyncFlatMapIterable,
    AsyncCollapseIterable,
    AsyncUpdateIterable,
    AsyncTapIterable,
    AsyncTakeIterable,
    AsyncSkipIterable,
    AsyncNthIterable,
    AsyncTakeUntilIterable,
    AsyncSkipUntilIterable,
    AsyncMergeIterable,
    AsyncInsertBeforeIterable,
    AsyncInsertAfterIterable,
    AsyncWhenIterable,
    AsyncRepeatIterable,
)
from .window import (
    AsyncChunkIterable,
    AsyncChunkWhileIterable,
    AsyncSplitIterable,
    AsyncSlidingIterable,
    AsyncPartitionIterable,
    AsyncReverseIterable,
)
from .set import (
    AsyncGroupByIterable,
    AsyncCountByIterable,
    AsyncUniqueIterable,
    AsyncCrossJoinIterable,
    AsyncZipIterable,
    AsyncPadStartIterable,
    AsyncPadEndIterable,
)
from .order import (
    AsyncSortIterable,
    AsyncShuffleIterable,
    AsyncSliceIterable,
    AsyncMemoizedIterable,
)
from .time import (
    AsyncDelayIterable,
    AsyncTakeUntilAbortIterable,
    AsyncTakeUntilTimeoutIterable,
)

__all__ = [
    "AsyncEntriesIterable",
    "AsyncFilterIterable",
    "AsyncMapIterable",
    "AsyncFlatMapIterable",
    "AsyncCollapseIterable",
    "AsyncUpdateIterable",
    "AsyncTapIterable",
    "AsyncTakeIterable",
    "AsyncSkipIterable",
    "AsyncNthIterable",
    "AsyncTakeUntilIterable",
    "AsyncSkipUntilIterable",
    "AsyncMergeIterable",
    "AsyncInsertBeforeIterable",
    "AsyncInsertAfterIterable",
    "AsyncWhenIterable",
    "AsyncRepeatIterable",
    "AsyncChunkIterable",
    "AsyncChunkWhileIterable",
    "AsyncSplitIterable",
    "AsyncSlidingIterable",
    "AsyncPartitionIterable",
    "AsyncReverseIterable",
    "AsyncGroupByIterable",
    "AsyncCountByIterable",
    "AsyncUniqueIterable",
    "AsyncCrossJoinIterable",
    "AsyncZipIterable",
    "AsyncPadStartIterable",
    "AsyncPadEndIterable",
    "AsyncSortIterable",
    "AsyncShuffleIterable",
    "AsyncSliceIterable",
    "AsyncMemoizedIterable",
    "AsyncDelayIterable",
    "AsyncTakeUntilAbortIterable",
    "AsyncTakeUntilTimeoutIterable",
]

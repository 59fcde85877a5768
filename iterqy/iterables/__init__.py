from .core import (
    EntriesIterable,
    FilterIterable,
    MapIterable,
    FlatMapIterable,
    CollapseIterable,
    UpdateIterable,
    TapIterable,
    TakeIterable,
    SkipIterable,
    NthIterable,
    TakeUntilIterable,
    SkipUntilIterable,
    MergeIterable,
    InsertBeforeIterable,
    InsertAfterIterable,
    WhenIterable,
    RepeatIterable,
)
from .window import (
    ChunkIterable,
    ChunkWhileIterable,
    SplitIterable,
    SlidingIterable,
    PartitionIterable,
    ReverseIterable,
)
from .set import (
    KeyedBuckets,
    GroupByIterable,
    CountByIterable,
    UniqueIterable,
    CrossJoinIterable,
    ZipIterable,
    PadStartIterable,
    PadEndIterable,
)
from .order import (
    SortIterable,
    ShuffleIterable,
    SliceIterable,
    MemoizedIterable,
)

__all__ = [
    "EntriesIterable",
    "FilterIterable",
    "MapIterable",
    "FlatMapIterable",
    "CollapseIterable",
    "UpdateIterable",
    "TapIterable",
    "TakeIterable",
    "SkipIterable",
    "NthIterable",
    "TakeUntilIterable",
    "SkipUntilIterable",
    "MergeIterable",
    "InsertBeforeIterable",
    "InsertAfterIterable",
    "WhenIterable",
    "RepeatIterable",
    "ChunkIterable",
    "ChunkWhileIterable",
    "SplitIterable",
    "SlidingIterable",
    "PartitionIterable",
    "ReverseIterable",
    "KeyedBuckets",
    "GroupByIterable",
    "CountByIterable",
    "UniqueIterable",
    "CrossJoinIterable",
    "ZipIterable",
    "PadStartIterable",
    "PadEndIterable",
    "SortIterable",
    "ShuffleIterable",
    "SliceIterable",
    "MemoizedIterable",
]

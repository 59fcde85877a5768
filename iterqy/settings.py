import random
from dataclasses import dataclass, field, replace

from .types import RandomSource

DEFAULT_CHUNK_SIZE = 1024


@dataclass(frozen=True)
class CollectionSettings:
    """per-collection defaults, carried over to every collection derived from it"""
    chunk_size: int = DEFAULT_CHUNK_SIZE  # default for reverse()
    random_source: RandomSource = field(default=random.random)  # default for shuffle()

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    def with_changes(self, **changes) -> 'CollectionSettings':
        """copy with some fields replaced"""
        return replace(self, **changes)

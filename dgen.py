'''
.------..------..------..------.
|d.--. ||g.--. ||e.--. ||n.--. |
| :/\: || :/\: || (\/) || :(): |
| (__) || :\/: || :\/: || ()() |
| '--'d|| '--'g|| '--'e|| '--'n|
`------'`------'`------'`------'
'''

import asyncio
import numpy as np
from faker import Faker
from iterqy import AsyncIterableCollection, IterableCollection
from typing import Any, Callable, Dict, Iterator, Optional

# schema directives, recognised as keys of a dict schema
PROVIDER = "_gen_provider"
COUNT = "_gen_count"
ITEMS = "_gen_items"


class RecordGenerator:
    """
    turns a schema into one record.

    a schema is interpreted recursively:
      * dict: a record whose fields are generated in order, so later fields
        can refer to earlier ones with the `ref` provider
      * list: `[item_schema]`, repeated `_gen_count` times (an int or a [low, high] range)
      * str: a faker provider name (`"name"`, `"email"`), or a literal string
      * (provider_name, kwargs): a faker provider called with arguments
      * anything else: a literal value
    """

    def __init__(self, seed: Optional[int] = None):
        self._fake = Faker()
        if seed is not None:
            self._fake.seed_instance(seed)
        self._rng = np.random.default_rng(seed)

    def _call_faker(self, method_name: str, kwargs: Optional[Dict] = None) -> Any:
        method = getattr(self._fake, method_name, None)
        if method is None:
            raise ValueError(f"faker has no provider '{method_name}'")
        return method(**(kwargs or {}))

    def _resolve_provider(self, config: Dict, context: Dict) -> Any:
        provider = config[PROVIDER]
        if provider == "ref":
            key = config["key"]
            if key not in context:
                raise ValueError(f"reference to '{key}' not found in current context.")
            value = context[key]
            return config["format"].format(value) if "format" in config else value

        if provider == "choice":
            # numpy scalars are turned back into plain python values
            picked = self._rng.choice(config["from"])
            return picked.item() if hasattr(picked, 'item') else picked

        if provider == "integer":
            return int(self._rng.integers(config["low"], config["high"], endpoint=True))

        if provider == "normal":
            return float(self._rng.normal(config.get("mean", 0.0), config.get("std", 1.0)))

        if provider == "call":
            func: Callable[[Dict], Any] = config["func"]
            return func(context)

        if provider == "literal":
            if "value" not in config:
                raise ValueError(f"{PROVIDER} 'literal' requires a 'value' key.")
            return config["value"]

        raise ValueError(f"unknown {PROVIDER}: '{provider}'")

    def create(self, schema: Any, context: Optional[Dict] = None) -> Any:
        current_context = context or {}

        if isinstance(schema, dict):
            if PROVIDER in schema:
                return self._resolve_provider(schema, current_context)
            record = {}
            for key, value in schema.items():
                # refs can look up into the parent and sideways into this record
                record[key] = self.create(value, {**current_context, **record})
            return record

        if isinstance(schema, list):
            if not schema:
                return []
            item_schema = schema[0]
            count = self._count(item_schema)
            if isinstance(item_schema, dict):
                item_schema = item_schema.get(ITEMS, item_schema)
            return [self.create(item_schema, current_context) for _ in range(count)]

        if isinstance(schema, str):
            return self._call_faker(schema) if hasattr(self._fake, schema) else schema

        if isinstance(schema, tuple) and len(schema) == 2 and isinstance(schema[1], dict):
            return self._call_faker(schema[0], schema[1])

        return schema

    def _count(self, item_schema: Any) -> int:
        if not isinstance(item_schema, dict) or COUNT not in item_schema:
            return 5
        count = item_schema[COUNT]
        if isinstance(count, (list, tuple)) and len(count) == 2:
            low, high = count
            return int(self._rng.integers(low, high, endpoint=True))
        return int(count)


class SchemaProvider:
    def __init__(self, schema: Any, seed: Optional[int] = None):
        self._schema = schema
        self._seed = seed

    def _records(self, count: int) -> Iterator[Dict]:
        generator = RecordGenerator(self._seed)
        for _ in range(count):
            yield generator.create(self._schema)

    def take(self, count: int) -> IterableCollection:
        """
        restartable collection of `count` records. with a seed, every
        enumeration reproduces the same records.
        """
        return IterableCollection(lambda: self._records(count))

    def stream(self, count: int) -> IterableCollection:
        """one-shot collection backed by a single generator"""
        return IterableCollection(self._records(count))

    def astream(self, count: int, pause: float = 0.0) -> AsyncIterableCollection:
        """async collection yielding to the event loop between records"""
        async def records():
            for record in self._records(count):
                await asyncio.sleep(pause)
                yield record

        return AsyncIterableCollection(records)


def from_schema(schema: Any, seed: Optional[int] = None) -> SchemaProvider:
    return SchemaProvider(schema, seed)

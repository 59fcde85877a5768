import asyncio
import gc
import suite
from datetime import timedelta
from dgen import from_schema
from iterqy import (
    AC,
    AsyncIterableCollection,
    CollectionSettings,
    EmptyCollectionError,
    ItemNotFoundCollectionError,
    MultipleItemsFoundCollectionError,
    TypeCollectionError,
    UnexpectedCollectionError,
)

test = suite.test
assert_that = suite.assert_that
assert_equal = suite.assert_equal
assert_raises = suite.assert_raises


async def ticks(count, pause=0.0):
    for i in range(count):
        await asyncio.sleep(pause)
        yield i


def counting(count):
    """restartable async source"""
    return lambda: ticks(count)


async def stalled():
    yield 1
    await asyncio.get_running_loop().create_future()


async def as_lists(collection):
    return [await group.to_list() async for group in collection]


# --- sources ---

@test("async sources: async generators, sync iterables and factories")
async def test_async_sources():
    assert_equal(await AC(ticks(3)).to_list(), [0, 1, 2])
    assert_equal(await AC([1, 2]).to_list(), [1, 2])
    assert_equal(await AC("ab").to_list(), ["a", "b"])
    assert_equal(await AC({"k": 1}).to_list(), [("k", 1)])
    assert_equal(await AC().to_list(), [])

    async def load():
        return [4, 5]

    collection = AC(load)
    assert_equal(await collection.to_list(), [4, 5])
    assert_equal(await collection.to_list(), [4, 5])


@test("async factories restart on every enumeration")
async def test_async_factory_restarts():
    collection = AC(counting(3))
    assert_equal(await collection.to_list(), [0, 1, 2])
    assert_equal(await collection.size(), 3)


@test("invalid async source fails on enumeration")
def test_async_invalid_source():
    collection = AC(42).map(lambda x: x)
    assert_raises(TypeCollectionError, collection.to_list)


# --- streaming operators ---

@test("callbacks may be coroutine functions")
async def test_async_callbacks():
    async def double(x):
        await asyncio.sleep(0)
        return x * 2

    async def is_odd(x):
        return x % 2 == 1

    collection = AC(counting(6))
    assert_equal(await collection.map(double).to_list(), [0, 2, 4, 6, 8, 10])
    assert_equal(await collection.filter(is_odd).to_list(), [1, 3, 5])
    assert_equal(await collection.reject(is_odd).to_list(), [0, 2, 4])
    assert_equal(await collection.map(lambda x, i: x + i).to_list(), [0, 2, 4, 6, 8, 10])


@test("async take, skip and their until/while forms")
async def test_async_take_skip():
    collection = AC(counting(6))
    assert_equal(await collection.take(2).to_list(), [0, 1])
    assert_equal(await collection.take(-4).to_list(), [0, 1])
    assert_equal(await collection.take(0).to_list(), [])
    assert_equal(await collection.skip(4).to_list(), [4, 5])
    assert_equal(await collection.skip(-2).to_list(), [4, 5])
    assert_equal(await collection.take_until(lambda x: x == 3).to_list(), [0, 1, 2])
    assert_equal(await collection.take_while(lambda x: x < 2).to_list(), [0, 1])
    assert_equal(await collection.skip_until(lambda x: x == 4).to_list(), [4, 5])
    assert_equal(await collection.skip_while(lambda x: x < 5).to_list(), [5])
    assert_equal(await collection.page(2, 4).to_list(), [4, 5])
    assert_equal(await collection.nth(2).to_list(), [0, 2, 4])


@test("async take stops pulling once satisfied")
async def test_async_take_lazy():
    pulled = []

    async def source():
        for x in range(10):
            pulled.append(x)
            yield x

    assert_equal(await AC(source).map(lambda x: x * 10).take(3).to_list(), [0, 10, 20])
    assert_equal(pulled, [0, 1, 2])


@test("async flat_map, collapse, change and set")
async def test_async_reshaping():
    assert_equal(await AC([1, 2]).flat_map(lambda x: ticks(x)).to_list(), [0, 0, 1])
    assert_equal(await AC([1, [2, 3], "ab"]).collapse().to_list(), [1, 2, 3, "ab"])
    assert_equal(await AC([1, 2, 3]).change(lambda x: x > 1, lambda x: -x).to_list(), [1, -2, -3])
    assert_equal(await AC("abc").set(0, "z").join(""), "zbc")
    assert_equal(await AC("ab").entries().to_list(), [(0, "a"), (1, "b")])
    assert_equal(await AC("ab").keys().to_list(), [0, 1])
    assert_equal(await AC("ab").values().to_list(), ["a", "b"])


@test("async tap, when and merge operators")
async def test_async_tap_when_merge():
    seen = []

    async def record(collection):
        seen.append(await collection.size())

    assert_equal(await AC([1, 2]).tap(record).to_list(), [1, 2])
    assert_equal(seen, [2])
    assert_equal(await AC([]).when_empty(lambda c: c.append(["x"])).to_list(), ["x"])
    assert_equal(await AC([1]).when_not_empty(lambda c: c.map(str)).to_list(), ["1"])
    assert_equal(await AC([1]).when(False, lambda c: c.repeat(2)).to_list(), [1])
    assert_equal(await AC([1]).when_not(False, lambda c: c.repeat(2)).to_list(), [1, 1])
    assert_equal(await AC([2]).prepend(ticks(2)).append("a").to_list(), [0, 1, 2, "a"])
    assert_equal(await AC([1, 2, 1]).insert_before(lambda x: x == 1, [0]).to_list(), [0, 1, 2, 1])
    assert_equal(await AC([1, 2, 1]).insert_after(lambda x: x == 1, [0]).to_list(), [1, 0, 2, 1])
    assert_equal(await AsyncIterableCollection.concat([ticks(1), [9]]).to_list(), [0, 9])


# --- windowing and buckets ---

@test("async chunk, split, sliding and partition")
async def test_async_windows():
    assert_equal(await as_lists(AC(counting(5)).chunk(2)), [[0, 1], [2, 3], [4]])
    assert_equal(await as_lists(AC(counting(5)).split(2)), [[0, 1, 2], [3, 4]])
    assert_equal(await as_lists(AC("abcd").sliding(2)), [["a", "b"], ["b", "c"], ["c", "d"]])
    assert_equal(await as_lists(AC("abcdefgh").sliding(3)),
                 [["a", "b", "c"], ["c", "d", "e"], ["e", "f", "g"], ["g", "h"]])
    assert_equal(await as_lists(AC(counting(5)).partition(lambda x: x > 2)), [[3, 4], [0, 1, 2]])


@test("async chunk_while receives the current chunk")
async def test_async_chunk_while():
    async def same_run(item, _, chunk):
        return await chunk.last() == item

    assert_equal(await as_lists(AC("aabccc").chunk_while(same_run)), [["a", "a"], ["b"], ["c", "c", "c"]])


@test("async windowing rejects non-positive sizes on enumeration")
def test_async_window_errors():
    assert_raises(TypeCollectionError, AC([1]).chunk(0).to_list)
    assert_raises(TypeCollectionError, AC([1]).split(0).to_list)
    assert_raises(TypeCollectionError, AC([1]).sliding(2, 0).to_list)
    assert_raises(TypeCollectionError, AC([1]).reverse(0).to_list)
    assert_raises(TypeCollectionError, AC([1]).nth(0).to_list)


@test("async collections wrap foreign errors")
def test_async_unexpected():
    async def broken():
        yield 1
        raise KeyError("gone")

    error = assert_raises(UnexpectedCollectionError, AC(broken).split(2).to_list)
    assert_that(isinstance(error.__cause__, KeyError), f"cause lost: {error.__cause__!r}")
    assert_raises(UnexpectedCollectionError, AC(broken).reverse().to_list)
    error = assert_raises(UnexpectedCollectionError, AC(broken).map(lambda x: x).to_list)
    assert_that(isinstance(error.__cause__, KeyError), f"cause lost: {error.__cause__!r}")
    assert_raises(UnexpectedCollectionError, AC(broken).sum)
    assert_raises(UnexpectedCollectionError, AC([1, 2]).for_each, lambda x: 1 / (x - 1))
    assert_raises(UnexpectedCollectionError, AC([1]).pipe, lambda c: {}["missing"])
    assert_raises(ItemNotFoundCollectionError, AC([1]).first_or_fail, lambda x: x > 1)


@test("async group_by, count_by, unique and difference")
async def test_async_buckets():
    groups = [(key, await group.to_list()) async for key, group in AC(counting(6)).group_by(lambda x: x % 3)]
    assert_equal(groups, [(0, [0, 3]), (1, [1, 4]), (2, [2, 5])])
    assert_equal(await AC("abca").count_by().to_list(), [("a", 2), ("b", 1), ("c", 1)])
    assert_equal(await AC("abca").unique().join(""), "abc")
    assert_equal(await AC(counting(5)).difference(counting(3)).to_list(), [3, 4])
    assert_equal(await AsyncIterableCollection.difference_of("abc", "ca").join(""), "b")


@test("async cross_join, zip and padding")
async def test_async_joins():
    assert_equal(await AC([1, 2]).cross_join(ticks(2)).to_list(), [(1, 0), (1, 1), (2, 0), (2, 1)])
    assert_equal(await AC(ticks(5)).zip("ab").to_list(), [(0, "a"), (1, "b")])
    assert_equal(await AsyncIterableCollection.zip_of("ab", ticks(1)).to_list(), [("a", 0)])
    assert_equal(await AC("abc").pad_start(10, "foo").join(""), "foofoofabc")
    assert_equal(await AC("abc").pad_end(5, "-").join(""), "abc--")


@test("async sort, reverse, shuffle and slice")
async def test_async_ordering():
    assert_equal(await AC([3, 1, 2]).sort().to_list(), [1, 2, 3])
    assert_equal(await AC([3, 1, 2]).sort(lambda a, b: b - a).to_list(), [3, 2, 1])
    assert_equal(await AC(counting(5)).reverse(2).to_list(), [4, 3, 2, 1, 0])
    settings = CollectionSettings(random_source=lambda: 0.0)
    assert_equal(await AC([1, 2, 3, 4], settings).shuffle().to_list(), [2, 3, 4, 1])
    assert_equal(await AC(counting(5)).slice(1, 3).to_list(), [1, 2])
    assert_equal(await AC(counting(5)).slice(-2).to_list(), [3, 4])
    assert_equal(await AC(counting(5)).slice(3, 1).to_list(), [])


@test("async memoize snapshots a one-shot source")
async def test_async_memoize():
    memoized = AC(ticks(3)).memoize()
    assert_equal(await memoized.to_list(), [0, 1, 2])
    assert_equal(await memoized.to_list(), [0, 1, 2])


@test("concurrent runs over an async memoized collection pull each item once")
async def test_async_memoize_concurrent():
    pulled = []

    async def source():
        for i in range(4):
            await asyncio.sleep(0.001)
            pulled.append(i)
            yield i

    memoized = AC(source()).memoize()
    left, right = await asyncio.gather(memoized.to_list(), memoized.to_list())
    assert_equal(left, [0, 1, 2, 3])
    assert_equal(right, [0, 1, 2, 3])
    assert_equal(pulled, [0, 1, 2, 3])


@test("a failing async upstream keeps failing after memoize")
def test_async_memoize_failure():
    async def failing():
        yield 1
        raise KeyError("gone")

    memoized = AC(failing()).memoize()
    error = assert_raises(UnexpectedCollectionError, memoized.to_list)
    assert_that(isinstance(error.__cause__, KeyError), f"cause lost: {error.__cause__!r}")
    assert_raises(UnexpectedCollectionError, memoized.to_list)
    assert_equal(asyncio.run(memoized.take(1).to_list()), [1])


# --- time and cancellation ---

@test("delay waits before every item")
async def test_delay():
    loop = asyncio.get_running_loop()
    started = loop.time()
    assert_equal(await AC([1, 2, 3]).delay(0.01).to_list(), [1, 2, 3])
    assert_that(loop.time() - started >= 0.025, "delay did not wait")
    assert_equal(await AC([1]).delay(timedelta(milliseconds=1)).to_list(), [1])


@test("take_until_abort stops once the event is set")
async def test_take_until_abort():
    event = asyncio.Event()
    seen = []
    async for item in AC(counting(100)).take_until_abort(event):
        seen.append(item)
        if item == 2:
            event.set()
    assert_equal(seen, [0, 1, 2])


@test("take_until_abort cancels a pending pull")
async def test_take_until_abort_pending():
    event = asyncio.Event()
    asyncio.get_running_loop().call_later(0.02, event.set)
    assert_equal(await AC(stalled).take_until_abort(event).to_list(), [1])


@test("an abort racing a failing pull leaves no unretrieved error")
async def test_take_until_abort_failing_pull():
    event = asyncio.Event()
    reported = []
    asyncio.get_running_loop().set_exception_handler(lambda loop, context: reported.append(context))

    async def source():
        yield 1
        event.set()
        raise KeyError("late")

    assert_equal(await AC(source).take_until_abort(event).to_list(), [1])
    gc.collect()
    assert_equal(reported, [])


@test("take_until_abort with an event already set yields nothing")
async def test_take_until_abort_preset():
    event = asyncio.Event()
    event.set()
    assert_equal(await AC(counting(3)).take_until_abort(event).to_list(), [])


@test("take_until_timeout stops when time runs out")
async def test_take_until_timeout():
    assert_equal(await AC(stalled).take_until_timeout(0.02).to_list(), [1])
    slow = await AC(counting(1000)).delay(0.01).take_until_timeout(timedelta(milliseconds=35)).to_list()
    assert_that(0 < len(slow) < 10, f"timeout let through {len(slow)} items")
    assert_equal(await AC(counting(3)).take_until_timeout(5).to_list(), [0, 1, 2])


# --- terminals ---

@test("async folding and aggregates")
async def test_async_terminals():
    collection = AC(counting(5))
    assert_equal(await collection.reduce(lambda acc, x: acc + x), 10)
    assert_equal(await collection.reduce(lambda acc, x: acc + [x], []), [0, 1, 2, 3, 4])
    assert_equal(await collection.sum(), 10)
    assert_equal(await AC([2**62, 2**62]).sum(), 2**63)
    assert_equal(await collection.average(), 2.0)
    assert_equal(await collection.median(), 2)
    assert_equal(await collection.min(), 0)
    assert_equal(await collection.max(), 4)
    assert_equal(await collection.percentage(lambda x: x > 2), 40.0)
    assert_equal(await collection.pipe(lambda c: c.to_list()), [0, 1, 2, 3, 4])
    assert_equal(await AC(["a", "b"]).join("+"), "a+b")


@test("async queries")
async def test_async_queries():
    collection = AC(counting(5))
    assert_that(await collection.some(lambda x: x == 4), "some failed")
    assert_that(await collection.every(lambda x: x < 5), "every failed")
    assert_that(not await collection.every(lambda x: x < 4), "every should be false")
    assert_equal(await collection.count(lambda x: x % 2 == 0), 3)
    assert_that(await AC().is_empty(), "should be empty")
    assert_that(await collection.is_not_empty(), "should not be empty")
    assert_equal(await collection.search_first(lambda x: x > 1), 2)
    assert_equal(await collection.search_last(lambda x: x > 1), 4)


@test("async item lookup")
async def test_async_lookup():
    collection = AC(counting(5))
    assert_equal(await collection.first(), 0)
    assert_equal(await collection.last(lambda x: x < 3), 2)
    assert_equal(await collection.before(lambda x: x == 3), 2)
    assert_equal(await collection.after(lambda x: x == 3), 4)
    assert_equal(await collection.get(1), 1)
    assert_equal(await collection.first_or("none", lambda x: x > 10), "none")

    async def fallback():
        return "async default"

    assert_equal(await collection.last_or(fallback, lambda x: x > 10), "async default")
    assert_equal(await collection.sole(lambda x: x == 3), 3)


@test("async terminal errors")
def test_async_terminal_errors():
    assert_raises(TypeCollectionError, AC([]).reduce, lambda acc, x: acc)
    assert_raises(EmptyCollectionError, AC([]).sum)
    assert_raises(TypeCollectionError, AC([1, "x"]).max)
    assert_raises(TypeCollectionError, AC([1]).join)
    assert_raises(ItemNotFoundCollectionError, AC([1]).first_or_fail, lambda x: x > 1)
    assert_raises(ItemNotFoundCollectionError, AC([1]).get_or_fail, 4)
    assert_raises(MultipleItemsFoundCollectionError, AC([1, 1]).sole)
    assert_raises(ItemNotFoundCollectionError, AC([]).sole)


@test("async materializers")
async def test_async_materializers():
    seen = []
    await AC("ab").for_each(lambda item, index: seen.append((index, item)))
    assert_equal(seen, [(0, "a"), (1, "b")])
    assert_equal(await AC([("a", 1)]).to_record(), {"a": 1})
    assert_equal(await AC([((1, 2), 1)]).to_map(), {(1, 2): 1})
    assert_equal((await AC(counting(3)).to_numpy()).tolist(), [0, 1, 2])
    assert_equal((await AC(counting(3)).to_series()).tolist(), [0, 1, 2])
    iterator = AC([1, 2]).to_iterator()
    assert_equal(await anext(iterator), 1)


@test("async streams of generated records")
async def test_async_generated_records():
    schema = {"user": "user_name", "score": {"_gen_provider": "integer", "low": 0, "high": 100}}
    stream = from_schema(schema, seed=1).astream(20)
    frame = await stream.filter(lambda r: r["score"] >= 0).to_frame()
    assert_equal(len(frame), 20)
    expected = from_schema(schema, seed=1).take(20).map(lambda r: r["score"]).to_list()
    assert_equal(await stream.map(lambda r: r["score"]).to_list(), expected)


if __name__ == "__main__":
    suite.run(title="iterqy async collection test")

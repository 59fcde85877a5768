import random
import suite
from iterqy import C, CollectionSettings, UnexpectedCollectionError

test = suite.test
assert_that = suite.assert_that
assert_equal = suite.assert_equal
assert_raises = suite.assert_raises

numbers = [5, 3, 9, 1, 7]


# --- sort ---

@test("sort uses natural ordering by default")
def test_sort_natural():
    assert_equal(C(numbers).sort().to_list(), [1, 3, 5, 7, 9])
    assert_equal(C("cab").sort().join(""), "abc")


@test("sort accepts a comparator")
def test_sort_comparator():
    descending = C(numbers).sort(lambda a, b: b - a).to_list()
    assert_equal(descending, [9, 7, 5, 3, 1])


@test("sort is stable")
def test_sort_stable():
    pairs = [("b", 1), ("a", 2), ("b", 0), ("a", 1)]
    by_letter = C(pairs).sort(lambda a, b: (a[0] > b[0]) - (a[0] < b[0])).to_list()
    assert_equal(by_letter, [("a", 2), ("a", 1), ("b", 1), ("b", 0)])


# --- shuffle ---

@test("shuffle is a permutation driven by the random source")
def test_shuffle():
    first = C(range(20)).shuffle(random.Random(7).random).to_list()
    second = C(range(20)).shuffle(random.Random(7).random).to_list()
    assert_equal(first, second, "same random source must give the same order")
    assert_equal(sorted(first), list(range(20)))


@test("shuffle takes its default random source from the settings")
def test_shuffle_settings():
    settings = CollectionSettings(random_source=lambda: 0.0)
    assert_equal(C([1, 2, 3, 4], settings).map(lambda x: x).shuffle().to_list(), [2, 3, 4, 1])


# --- slice ---

@test("slice follows python slice semantics")
def test_slice():
    source = list(range(5))
    cases = [(None, None), (1, 3), (2, None), (None, 2), (-2, None), (None, -1), (-3, -1), (3, 1), (1, 100)]
    for start, end in cases:
        assert_equal(C(source).slice(start, end).to_list(), source[start:end], f"slice({start}, {end})")


@test("slice with a negative start keeps the last items")
def test_slice_negative():
    assert_equal(C(range(5)).slice(-2).to_list(), [3, 4])


# --- memoize ---

@test("memoize makes a one-shot source enumerable many times")
def test_memoize():
    pulled = []

    def source():
        for x in range(4):
            pulled.append(x)
            yield x

    memoized = C(source()).memoize()
    assert_equal(pulled, [], "memoize must stay lazy")
    assert_equal(memoized.to_list(), [0, 1, 2, 3])
    assert_equal(memoized.to_list(), [0, 1, 2, 3])
    assert_equal(pulled, [0, 1, 2, 3], "every item is pulled once")


@test("memoize keeps a partial run and continues from it")
def test_memoize_partial():
    pulled = []
    memoized = C(pulled.append(x) or x for x in range(5)).memoize()
    assert_equal(memoized.take(2).to_list(), [0, 1])
    assert_equal(pulled, [0, 1])
    assert_equal(memoized.to_list(), [0, 1, 2, 3, 4])
    assert_equal(pulled, [0, 1, 2, 3, 4])


@test("interleaved runs over a memoized collection agree")
def test_memoize_interleaved():
    memoized = C(iter("abc")).memoize()
    left, right = iter(memoized), iter(memoized)
    assert_equal([next(left), next(right), next(right), next(left)], ["a", "a", "b", "b"])
    assert_equal(list(left) + list(right), ["c", "c"])


@test("a failing upstream keeps failing after memoize")
def test_memoize_failure():
    def source():
        yield 1
        yield 2
        raise ValueError("source broke")

    memoized = C(source()).memoize()
    error = assert_raises(UnexpectedCollectionError, memoized.to_list)
    assert_that(isinstance(error.__cause__, ValueError), f"cause lost: {error.__cause__!r}")
    assert_raises(UnexpectedCollectionError, memoized.to_list)
    assert_equal(memoized.take(2).to_list(), [1, 2])


if __name__ == "__main__":
    suite.run(title="iterqy ordering operators test")

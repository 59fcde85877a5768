import suite
from collections import namedtuple
from dgen import from_schema
from iterqy import C, IterableCollection

test = suite.test
assert_that = suite.assert_that
assert_equal = suite.assert_equal

Person = namedtuple('Person', ['name', 'age', 'city'])
people = [
    Person('alice', 25, 'oslo'),
    Person('bob', 30, 'rome'),
    Person('charlie', 25, 'oslo'),
    Person('diana', 35, 'lima'),
    Person('eve', 30, 'rome')
]


# --- buckets ---

@test("group_by orders groups by first seen key")
def test_group_by():
    groups = C(people).group_by(lambda p: p.city).map(lambda pair: (pair[0], pair[1].map(lambda p: p.name).to_list()))
    assert_equal(groups.to_list(), [
        ('oslo', ['alice', 'charlie']),
        ('rome', ['bob', 'eve']),
        ('lima', ['diana'])
    ])


@test("group_by without a selector groups equal items")
def test_group_by_identity():
    groups = C("abca").group_by().map(lambda pair: (pair[0], pair[1].size())).to_list()
    assert_equal(groups, [("a", 2), ("b", 1), ("c", 1)])


@test("group_by accepts unhashable keys")
def test_group_by_unhashable():
    groups = C([1, 2, 3, 4]).group_by(lambda x: [x % 2]).map(lambda pair: pair[0]).to_list()
    assert_equal(groups, [[1], [0]])


@test("count_by counts per key")
def test_count_by():
    assert_equal(C(people).count_by(lambda p: p.age).to_list(), [(25, 2), (30, 2), (35, 1)])
    assert_equal(C(people).count_by(lambda p: p.age).to_map(), {25: 2, 30: 2, 35: 1})


@test("unique keeps the first item of every key")
def test_unique():
    assert_equal(C([3, 1, 3, 2, 1]).unique().to_list(), [3, 1, 2])
    assert_equal(C(people).unique(lambda p: p.city).map(lambda p: p.name).to_list(), ['alice', 'bob', 'diana'])
    records = [{"tags": ["a"]}, {"tags": ["b"]}, {"tags": ["a"]}]
    assert_equal(C(records).unique(lambda r: r["tags"]).size(), 2)


@test("unique over generated records")
def test_unique_generated():
    schema = {"id": {"_gen_provider": "integer", "low": 1, "high": 5}, "name": "first_name"}
    records = from_schema(schema, seed=3).take(40)
    ids = records.unique(lambda r: r["id"]).map(lambda r: r["id"]).to_list()
    assert_equal(len(ids), len(set(ids)))
    assert_that(set(ids) <= {1, 2, 3, 4, 5}, f"ids out of range: {ids}")


@test("difference removes every item found in the other source")
def test_difference():
    assert_equal(C([1, 2, 3, 4, 5]).difference([2, 4]).to_list(), [1, 3, 5])
    assert_equal(C(people).difference(['oslo'], lambda item: getattr(item, 'city', item)).map(lambda p: p.name).to_list(),
                 ['bob', 'diana', 'eve'])
    assert_equal(IterableCollection.difference_of("abc", "b").join(""), "ac")


# --- joins ---

@test("cross_join yields flat tuples, leftmost input slowest")
def test_cross_join():
    assert_equal(C([1, 2]).cross_join(["a", "b"]).to_list(), [(1, "a"), (1, "b"), (2, "a"), (2, "b")])
    triple = C([1, 2]).cross_join("ab", [True]).to_list()
    assert_equal(triple, [(1, "a", True), (1, "b", True), (2, "a", True), (2, "b", True)])
    assert_equal(C([1, 2]).cross_join([]).to_list(), [])


@test("zip stops with the shorter side")
def test_zip():
    assert_equal(C([1, 2, 3]).zip("ab").to_list(), [(1, "a"), (2, "b")])
    assert_equal(IterableCollection.zip_of("ab", range(5)).to_list(), [("a", 0), ("b", 1)])


# --- padding ---

@test("pad_start repeats the fill to reach the exact length")
def test_pad_start():
    assert_equal(C("abc").pad_start(10, "foo").join(""), "foofoofabc")
    assert_equal(C("abc").pad_start(4, "xy").join(""), "xabc")


@test("pad_end repeats the fill to reach the exact length")
def test_pad_end():
    assert_equal(C("abc").pad_end(7, "xy").join(""), "abcxyxy")
    assert_equal(C([1]).pad_end(3, [0]).to_list(), [1, 0, 0])


@test("padding is a no-op when long enough or the fill is empty")
def test_pad_noop():
    assert_equal(C("abc").pad_start(2, "x").join(""), "abc")
    assert_equal(C("abc").pad_end(3, "x").join(""), "abc")
    assert_equal(C("abc").pad_end(10, "").join(""), "abc")
    assert_equal(C("abc").pad_start(10, []).join(""), "abc")


if __name__ == "__main__":
    suite.run(title="iterqy set operators test")

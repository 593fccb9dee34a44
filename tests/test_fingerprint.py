from enum import Enum

from solo.fingerprint import NO_METADATA, canonical_args, fingerprint, split_metadata


class Key(str, Enum):
    FOO = "foo"


def test_fingerprint_is_32_hex_chars():
    fp = fingerprint("FakeUniqueJob", ["x"])
    assert len(fp) == 32
    int(fp, 16)


def test_fingerprint_is_deterministic():
    assert fingerprint("FakeUniqueJob", ["x", 1]) == fingerprint("FakeUniqueJob", ["x", 1])


def test_fingerprint_depends_on_job_type_and_args():
    assert fingerprint("FakeUniqueJob", ["x"]) != fingerprint("OtherJob", ["x"])
    assert fingerprint("FakeUniqueJob", ["x"]) != fingerprint("FakeUniqueJob", ["y"])
    assert fingerprint("FakeUniqueJob", ["x", "y"]) != fingerprint("FakeUniqueJob", ["y", "x"])


def test_map_key_order_is_ignored():
    a = fingerprint("FakeUniqueJob", [{"bar": 1, "foo": 2}])
    b = fingerprint("FakeUniqueJob", [{"foo": 2, "bar": 1}])
    assert a == b


def test_nested_map_key_order_is_not_sorted():
    a = fingerprint("FakeUniqueJob", [{"outer": {"y": 1, "x": 2}}])
    b = fingerprint("FakeUniqueJob", [{"outer": {"x": 2, "y": 1}}])
    assert a != b


def test_key_representation_is_ignored():
    plain = fingerprint("FakeUniqueJob", [{"bar": 1, "foo": 1}])
    assert fingerprint("FakeUniqueJob", [{"bar": 1, Key.FOO: 1}]) == plain
    assert fingerprint("FakeUniqueJob", [{b"bar": 1, "foo": 1}]) == plain
    assert fingerprint("FakeUniqueJob", [{1: "a"}]) == fingerprint("FakeUniqueJob", [{"1": "a"}])


def test_tuple_and_list_arguments_collide():
    assert fingerprint("FakeUniqueJob", [(1, 2)]) == fingerprint("FakeUniqueJob", [[1, 2]])
    assert fingerprint("FakeUniqueJob", ("x",)) == fingerprint("FakeUniqueJob", ["x"])


def test_metadata_is_excluded():
    base = fingerprint("FakeUniqueJob", ["foo"])
    assert fingerprint("FakeUniqueJob", ["foo", {"metadata": {"a": 1}}]) == base
    assert fingerprint("FakeUniqueJob", ["foo", {"metadata": {"a": 2}}]) == base


def test_metadata_in_data_map_is_excluded():
    a = fingerprint("FakeUniqueJob", [{"foo": "foo", "metadata": {"x": 1}}])
    assert a == fingerprint("FakeUniqueJob", [{"foo": "foo"}])


def test_split_metadata_does_not_mutate_args():
    last = {"foo": "foo", "metadata": {"x": 1}}
    args = ["a", last]
    data, meta = split_metadata(args)
    assert data == ["a", {"foo": "foo"}]
    assert meta == {"x": 1}
    assert last == {"foo": "foo", "metadata": {"x": 1}}
    assert len(args) == 2


def test_split_metadata_drops_map_holding_only_metadata():
    data, meta = split_metadata(["foo", {"metadata": "m"}])
    assert data == ["foo"]
    assert meta == "m"


def test_split_metadata_without_metadata():
    assert split_metadata(["foo", {"bar": 1}]) == (["foo", {"bar": 1}], NO_METADATA)
    assert split_metadata([]) == ([], NO_METADATA)


def test_split_metadata_only_looks_at_trailing_map():
    data, meta = split_metadata([{"metadata": 1}, "x"])
    assert data == [{"metadata": 1}, "x"]
    assert meta is NO_METADATA


def test_split_metadata_keeps_null_metadata_apart_from_missing():
    data, meta = split_metadata(["foo", {"metadata": None}])
    assert data == ["foo"]
    assert meta is None
    assert meta is not NO_METADATA


def test_canonical_args_sorts_top_level_pairs():
    assert list(canonical_args([{"b": 1, "a": {"d": 1, "c": 2}}])[0].keys()) == ["a", "b"]
    assert list(canonical_args([{"b": 1, "a": {"d": 1, "c": 2}}])[0]["a"].keys()) == ["d", "c"]

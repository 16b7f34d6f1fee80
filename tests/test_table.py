import copy
from fractions import Fraction
from collections.abc import MutableMapping

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kv_table.activity import Activity
from kv_table.constructors import T, array, pairs
from kv_table.errors import KeyNotFound, PreconditionViolation, TypeMismatch
from kv_table.table import Table


_OPERATIONS = st.lists(
    st.tuples(
        st.sampled_from(
            ["update", "insert", "insert_at", "remove", "remove_at", "delete", "update_float", "delete_float"]
        ),
        st.integers(min_value=1, max_value=8),
    ),
    max_size=40,
)


def _contiguous_prefix(table: Table) -> int:
    length = 0
    while length + 1 in table:
        length += 1
    return length


def test_table_from_values_tracks_top_index() -> None:
    table = T(10, 20, 30)

    assert table.top_index == 3
    assert table.length() == 3
    assert len(table) == 3
    assert table.get(2) == 20


def test_update_fills_gap_and_absorbs_stranded_keys() -> None:
    table = Table()

    _ = table.update(2, "x")
    assert table.top_index == 0

    _ = table.update(1, "y")
    assert table.top_index == 2


def test_top_index_stops_at_first_gap() -> None:
    table = pairs((1, "a"), (2, "b"), (4, "d"))

    assert table.top_index == 2
    assert table.length() == 3


def test_update_returns_table_and_accepts_mapping_forms() -> None:
    table = Table()

    assert table.update(1, "a") is table
    assert table.update({2: "b", 3: "c"}, name="n") is table
    assert table.update([(4, "d")]) is table

    assert table.top_index == 4
    assert table["name"] == "n"


def test_overwriting_inside_prefix_keeps_top_index() -> None:
    table = T("a", "b", "c")
    table[2] = "x"

    assert table.top_index == 3
    assert table == T("a", "x", "c")


def test_get_and_contains_never_raise_for_missing_keys() -> None:
    table = T("a", name="n")

    assert table.get(5) is None
    assert table.get(5, "fallback") == "fallback"
    assert table.contains("name")
    assert not table.contains("missing")
    assert "missing" not in table


def test_get_with_expected_type_checks_present_values() -> None:
    table = T("a", 2)

    assert table.get(1, expected=str) == "a"
    assert table.get(9, expected=str) is None
    with pytest.raises(TypeMismatch, match="value at key 2 is int, expected str"):
        _ = table.get(2, expected=str)


def test_apply_and_getitem_raise_key_not_found() -> None:
    table = T("a")

    with pytest.raises(KeyNotFound):
        _ = table[2]
    with pytest.raises(KeyError):
        _ = table.apply("missing")

    assert table.apply(1, str) == "a"
    with pytest.raises(TypeMismatch):
        _ = table.apply(1, int)


def test_delitem_inside_prefix_shrinks_top_index_without_shifting() -> None:
    table = T("a", "b", "c", "d")
    del table[2]

    assert table.top_index == 1
    assert table.length() == 3
    assert table[3] == "c"

    table[2] = "x"
    assert table.top_index == 4


def test_delitem_missing_key_raises_key_not_found() -> None:
    table = T("a")

    with pytest.raises(KeyNotFound, match="missing"):
        del table["missing"]


def test_mapping_pop_keeps_invariant() -> None:
    table = T("a", "b", "c")

    assert table.pop(3) == "c"
    assert table.top_index == 2
    assert table.pop(9, None) is None


def test_remove_inside_prefix_shifts_down() -> None:
    table = T("a", "b", "c", "d")

    assert table.remove(2) == "b"
    assert table == T("a", "c", "d")
    assert table.top_index == 3


def test_remove_past_prefix_removes_without_shifting() -> None:
    table = T("a", "b")
    table[5] = "x"

    assert table.remove(5) == "x"
    assert table == T("a", "b")
    assert table.top_index == 2


def test_remove_missing_index_returns_none() -> None:
    table = T("a")

    assert table.remove(4) is None
    assert table == T("a")


@pytest.mark.parametrize("index", [0, -1])
def test_remove_rejects_non_positive_index(index: int) -> None:
    table = T("a")

    with pytest.raises(PreconditionViolation, match="index must be positive"):
        _ = table.remove(index)
    with pytest.raises(ValueError, match="index must be positive"):
        _ = table.remove(index)


def test_remove_without_index_pops_top() -> None:
    assert Table().remove() is None

    table = T(1, 2)
    assert table.remove() == 2
    assert table.top_index == 1


def test_insert_then_remove_is_a_noop() -> None:
    table = T(1, 2, 3, name="n")
    before = table.clone()

    _ = table.insert("v")
    assert table.top_index == 4
    assert table.remove() == "v"
    assert table == before


def test_insert_at_index_shifts_up() -> None:
    table = T("a", "b", "c")

    assert table.insert(2, "x") is table
    assert table == T("a", "x", "b", "c")
    assert table.top_index == 4


def test_insert_past_prefix_behaves_as_update() -> None:
    table = T("a")
    _ = table.insert(3, "z")

    assert table.top_index == 1
    assert table[3] == "z"

    _ = table.insert(2, "y")
    assert table.top_index == 3


def test_insert_inside_prefix_absorbs_stranded_key() -> None:
    table = T("a", "b")
    table[4] = "d"
    _ = table.insert(1, "z")

    assert table == T("z", "a", "b", "d")
    assert table.top_index == 4


def test_insert_rejects_non_positive_index() -> None:
    with pytest.raises(PreconditionViolation):
        _ = T("a").insert(0, "x")


def test_add_merges_string_keys_only_into_receiver() -> None:
    table = T(1)

    assert table.add(pairs(("name", "n"), ("kind", "k"))) is table
    assert table["name"] == "n"
    assert table["kind"] == "k"
    assert table.top_index == 1


def test_add_with_non_string_key_leaves_receiver_unmodified() -> None:
    table = T(1, name="a")
    snapshot = table.clone()

    with pytest.raises(PreconditionViolation, match="add only merges string keys"):
        _ = table.add(pairs(("x", 1), (2, "y")))
    assert table == snapshot
    assert "x" not in table


def test_clone_is_equal_shallow_and_independent() -> None:
    inner = T(1, 2)
    table = T(inner, "b", name="n")
    cloned = table.clone()

    assert cloned == table
    assert cloned is not table
    assert cloned[1] is inner

    cloned[3] = "c"
    _ = cloned.remove(1)
    assert table == T(inner, "b", name="n")


def test_clone_recomputes_top_index() -> None:
    table = Table()
    table[2] = "b"
    table[1] = "a"

    cloned = table.clone()
    assert cloned.top_index == 2


def test_copy_module_uses_clone() -> None:
    table = T(1, 2)
    copied = copy.copy(table)

    assert isinstance(copied, Table)
    assert copied == table
    assert copied is not table


def test_equality_is_structural() -> None:
    assert T(1, 2) == T(1, 2)
    assert T(1, 2) != T(2, 1)
    assert T(1, 2) != T(1, 2, 3)
    assert T(T(1), 2) == T(T(1), 2)
    assert T(T(1), 2) != T(T(2), 2)
    assert pairs((1, "a"), ("x", 1)) != pairs((1, "a"), ("y", 1))
    assert T(1, 2) != {1: 1, 2: 2}


def test_hash_is_independent_of_insertion_order() -> None:
    left = pairs(("a", 1), ("b", 2), (1, "x"))
    right = pairs((1, "x"), ("b", 2), ("a", 1))

    assert left == right
    assert hash(left) == hash(right)


def test_table_can_be_used_as_a_key() -> None:
    outer = Table()
    outer[T(1, 2)] = "v"

    assert outer[T(1, 2)] == "v"
    assert outer.top_index == 0


def test_hash_of_table_with_unhashable_value_raises_type_error() -> None:
    with pytest.raises(TypeError):
        _ = hash(T([1]))


def test_str_renders_one_entry_per_line() -> None:
    assert str(T(10, 20)) == " {\n\t1: 10\n\t2: 20\n }"


def test_str_indents_nested_values_under_their_key() -> None:
    rendered = str(pairs(("ab", T(1))))

    assert rendered == " {\n\tab:  {\n\t    \t1: 1\n\t     }\n }"


def test_repr_handles_self_reference() -> None:
    table = T(1)
    assert repr(table) == "Table({1: 1})"

    table[2] = table
    assert repr(table) == "Table({1: 1, 2: ...})"


def test_state_is_read_only_view() -> None:
    table = T(1)
    state = table.state()

    assert state[1] == 1
    with pytest.raises(TypeError):
        state[2] = 2  # type: ignore[index]

    table[2] = 2
    assert state[2] == 2


def test_table_is_an_activity_and_mutable_mapping() -> None:
    table = Table()

    assert isinstance(table, Activity)
    assert isinstance(table, MutableMapping)


@given(operations=_OPERATIONS)
def test_top_index_is_maximal_contiguous_prefix_after_every_mutation(operations: list[tuple[str, int]]) -> None:
    table = Table()
    for operation, index in operations:
        if operation == "update":
            table[index] = index
        elif operation == "insert":
            _ = table.insert(index)
        elif operation == "insert_at":
            _ = table.insert(index, index)
        elif operation == "remove":
            _ = table.remove()
        elif operation == "remove_at":
            _ = table.remove(index)
        elif operation == "update_float":
            table[float(index)] = index
        elif operation == "delete_float":
            if float(index) in table:
                del table[float(index)]
        elif index in table:
            del table[index]
        assert table.top_index == _contiguous_prefix(table)


@given(values=st.lists(st.integers(), min_size=1, max_size=10), data=st.data())
def test_remove_inside_prefix_shifts_by_exactly_one(values: list[int], data: st.DataObject) -> None:
    index = data.draw(st.integers(min_value=1, max_value=len(values)))
    table = array(values)

    assert table.remove(index) == values[index - 1]
    assert table == array(values[: index - 1] + values[index:])
    assert table.top_index == len(values) - 1


def test_numeric_keys_equal_to_integers_count_toward_prefix() -> None:
    table = Table()
    table[1.0] = "a"

    assert table.top_index == 1
    assert 1 in table

    table[Fraction(2)] = "b"
    assert table.top_index == 2


def test_deleting_a_float_key_inside_prefix_shrinks_top_index() -> None:
    table = T("a", "b", "c")
    del table[2.0]

    assert table.top_index == 1
    assert table.remove(1) == "a"
    assert table.top_index == 0
    assert table[3] == "c"


def test_deleting_non_integral_numeric_keys_keeps_prefix() -> None:
    table = T("a", "b")
    table[1.5] = "half"
    table[float("nan")] = "nan"
    del table[1.5]

    assert table.top_index == 2

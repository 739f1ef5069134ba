"""
拖拽排序测试
"""
import pytest

from app.core.exceptions import BadRequestException
from app.services.reorder import merge_subset, reorder, reorder_page, resolve_group_move


def items(*ids):
    return [{"id": i, "order": n} for n, i in enumerate(ids)]


def test_reorder_moves_and_renumbers():
    result = reorder(items("A", "B", "C", "D"), 0, 2)
    assert [i["id"] for i in result] == ["B", "C", "A", "D"]
    assert [i["order"] for i in result] == [0, 1, 2, 3]


def test_reorder_does_not_mutate_input():
    original = items("A", "B", "C")
    reorder(original, 2, 0)
    assert [i["id"] for i in original] == ["A", "B", "C"]


def test_reorder_same_index_keeps_order():
    result = reorder(items("A", "B"), 1, 1)
    assert [i["id"] for i in result] == ["A", "B"]


@pytest.mark.parametrize("source, destination", [(-1, 0), (0, 3), (5, 1)])
def test_reorder_out_of_range(source, destination):
    with pytest.raises(BadRequestException):
        reorder(items("A", "B", "C"), source, destination)


def test_reorder_page_applies_offset():
    everything = items(*"ABCDEFG")
    result = reorder_page(everything, page=2, page_size=3, source_index=2, destination_index=0)
    assert [i["id"] for i in result] == list("ABCFDEG")
    assert [i["order"] for i in result] == list(range(7))


def test_reorder_page_leaves_other_pages_untouched():
    everything = items(*"ABCDEF")
    result = reorder_page(everything, page=1, page_size=3, source_index=0, destination_index=1)
    assert result[3:] == everything[3:]


def test_resolve_group_move():
    assert resolve_group_move("applied", "screening") == "screening"
    assert resolve_group_move("applied", "applied") is None
    assert resolve_group_move("applied", None) is None


def test_merge_subset_keeps_hidden_slots():
    everything = items("A", "B", "C", "D")
    # 筛选结果 [A, C, D] 重排为 [D, A, C]
    subset = [everything[3], everything[0], everything[2]]
    result = merge_subset(everything, subset)
    assert [i["id"] for i in result] == ["D", "B", "A", "C"]
    assert [i["order"] for i in result] == [0, 1, 2, 3]

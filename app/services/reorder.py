"""
拖拽排序

- reorder: 列表内移动，按新位置重排 order（从 0 开始连续）
- reorder_page: 分页列表内移动，order 加上页偏移后按 ID 合并回完整集合
- merge_subset: 筛选后的列表重排后，写回完整集合并保持 order 连续
- resolve_group_move: 看板跨列移动，返回目标分组（列内位置不持久化）
"""
from typing import Any, List, Optional, Sequence, TypeVar

from pydantic import BaseModel

from app.core.exceptions import BadRequestException

T = TypeVar("T")


def _get(item: Any, key: str) -> Any:
    if isinstance(item, dict):
        return item[key]
    return getattr(item, key)


def _with_order(item: T, order: int) -> T:
    """返回设置了新 order 的副本，不修改原对象"""
    if isinstance(item, dict):
        return {**item, "order": order}
    if isinstance(item, BaseModel):
        return item.model_copy(update={"order": order})
    raise TypeError(f"Unsupported item type: {type(item).__name__}")


def move_item(items: Sequence[T], source_index: int, destination_index: int) -> List[T]:
    """移除 source_index 处的元素并插入到 destination_index"""
    size = len(items)
    if not 0 <= source_index < size:
        raise BadRequestException(f"Source index out of range: {source_index}")
    if not 0 <= destination_index < size:
        raise BadRequestException(f"Destination index out of range: {destination_index}")

    result = list(items)
    moved = result.pop(source_index)
    result.insert(destination_index, moved)
    return result


def reorder(
    items: Sequence[T],
    source_index: int,
    destination_index: int,
    *,
    offset: int = 0,
) -> List[T]:
    """
    拖拽排序

    例: reorder([A, B, C, D], 0, 2) -> [B, C, A, D]，order 依次为 0..3
    """
    moved = move_item(items, source_index, destination_index)
    return [_with_order(item, offset + index) for index, item in enumerate(moved)]


def paginate(items: Sequence[T], page: int, page_size: int) -> List[T]:
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def reorder_page(
    items: Sequence[T],
    page: int,
    page_size: int,
    source_index: int,
    destination_index: int,
) -> List[T]:
    """
    分页拖拽排序

    items 为按 order 排好序的完整集合。只重排当前页，
    新 order = 页偏移 (page-1)*page_size + 页内位置，再按 ID 合并回完整集合；
    当前页以外的元素原样保留，结果按新 order 排序。
    """
    if page < 1 or page_size < 1:
        raise BadRequestException("Invalid pagination parameters")

    page_items = paginate(items, page, page_size)
    updated = reorder(
        page_items,
        source_index,
        destination_index,
        offset=(page - 1) * page_size,
    )
    by_id = {_get(item, "id"): item for item in updated}
    merged = [by_id.get(_get(item, "id"), item) for item in items]
    return sorted(merged, key=lambda item: _get(item, "order"))


def merge_subset(items: Sequence[T], subset: Sequence[T]) -> List[T]:
    """
    将重排后的子集（筛选结果）合并回完整集合

    子集元素按新顺序依次占据它们原先在完整集合中的位置，
    其余元素位置不变，最后整体重新编号 order 为 0..n-1。
    """
    subset_ids = {_get(item, "id") for item in subset}
    remaining = iter(subset)
    merged = [
        next(remaining) if _get(item, "id") in subset_ids else item
        for item in items
    ]
    return [_with_order(item, index) for index, item in enumerate(merged)]


def resolve_group_move(source_group: str, destination_group: Optional[str]) -> Optional[str]:
    """
    看板跨列移动

    目标列与源列不同时返回目标列 ID，否则返回 None（列内顺序不记录）
    """
    if destination_group is None or destination_group == source_group:
        return None
    return destination_group

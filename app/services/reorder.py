"""
Idea 排序引擎（纯函数，不访问数据库）

列表按 order 降序展示：第一项 order 最大。每次移动都会对整个序列重新编号，
第 i 项的新 order 为 len(seq) - i，保证严格递减、无空洞、无重复。
"""
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from app.core.errors import ReorderError

OrderUpdate = Tuple[int, int]


def _id_of(item: Any) -> int:
    return item if isinstance(item, int) else item.id


def renumber(sequence: Sequence[Any]) -> List[OrderUpdate]:
    """按当前顺序重新编号，返回 [(id, order), ...]"""
    total = len(sequence)
    return [(_id_of(item), total - index) for index, item in enumerate(sequence)]


def move_item(sequence: Sequence[Any], moved_id: int, target_index: int) -> List[Any]:
    """把 moved_id 从原位置取出并插入到 target_index（从 0 开始）"""
    items = list(sequence)
    ids = [_id_of(item) for item in items]
    if moved_id not in ids:
        raise ReorderError(f"Idea {moved_id} is not in the list")
    if not 0 <= target_index < len(items):
        raise ReorderError(
            f"Target index {target_index} out of range for {len(items)} ideas"
        )

    moved = items.pop(ids.index(moved_id))
    items.insert(target_index, moved)
    return items


def compute_reorder(
    current_list: Sequence[Any],
    moved_id: int,
    target_index: int,
) -> List[OrderUpdate]:
    """
    计算一次拖拽移动后的排序值

    Args:
        current_list: 当前展示顺序（自上而下）的 idea 或 id
        moved_id: 被拖动的 idea id
        target_index: 新位置

    Returns:
        每一项的 (id, new_order)，顺序与新的展示顺序一致
    """
    return renumber(move_item(current_list, moved_id, target_index))


def plan_move(
    full_list: Sequence[Any],
    moved_id: int,
    target_index: int,
    visible_ids: Optional[Iterable[int]] = None,
) -> List[OrderUpdate]:
    """
    在完整列表上规划一次移动

    visible_ids 为当前过滤后可见的 id（例如按平台过滤）。移动只在可见子序列内
    计算，然后把结果按原先占据的位置写回完整列表，最后对完整列表统一编号，
    避免可见项与隐藏项之间出现 order 冲突。
    """
    items = list(full_list)
    if visible_ids is None:
        return compute_reorder(items, moved_id, target_index)

    visible = set(visible_ids)
    slots = [index for index, item in enumerate(items) if _id_of(item) in visible]
    subset = [items[index] for index in slots]
    reordered = move_item(subset, moved_id, target_index)

    merged = list(items)
    for slot, item in zip(slots, reordered):
        merged[slot] = item
    return renumber(merged)

"""
Grouping/Ordering - partitions descriptors into category sections
"""

from typing import Dict, Iterable, List

from form_engine.contracts import FieldDescriptor


def group_by_category(descriptors: Iterable[FieldDescriptor]) -> Dict[str, List[FieldDescriptor]]:
    """
    Partition descriptors by category, ordered for rendering.

    Categories iterate in first-occurrence order. Within a category,
    descriptors are sorted ascending by `order`; sorted() is stable, so
    ties keep their document order. Every descriptor lands in exactly
    one group.

    Args:
        descriptors: Descriptors in document order

    Returns:
        dict: category -> sorted list of descriptors

    Example:
        >>> groups = group_by_category(descriptors)
        >>> list(groups)
        ['Basic', 'Site']
    """
    groups: Dict[str, List[FieldDescriptor]] = {}
    for descriptor in descriptors:
        groups.setdefault(descriptor.category, []).append(descriptor)

    return {
        category: sorted(members, key=lambda d: d.order)
        for category, members in groups.items()
    }

"""Tab-order navigation over a scope of widget ids."""

from __future__ import annotations

from typing import Optional, Sequence

from focus_core.geometry import WidgetId


def first_of(scope: Sequence[WidgetId]) -> Optional[WidgetId]:
    return scope[0] if scope else None


def last_of(scope: Sequence[WidgetId]) -> Optional[WidgetId]:
    return scope[-1] if scope else None


def _index_of(scope: Sequence[WidgetId], widget_id: Optional[WidgetId]) -> Optional[int]:
    if widget_id is None:
        return None
    try:
        return scope.index(widget_id)
    except ValueError:
        return None


def next_in_scope(
    scope: Sequence[WidgetId],
    current: Optional[WidgetId],
    *,
    wrap: bool = True,
) -> Optional[WidgetId]:
    """Return the id after ``current`` in ``scope``.

    ``None`` means there is nothing to focus (empty scope). A ``current`` that is
    absent or outside the scope resolves to the first element.
    """

    idx = _index_of(scope, current)
    if idx is None:
        return first_of(scope)
    if idx + 1 < len(scope):
        return scope[idx + 1]
    return first_of(scope) if wrap else scope[idx]


def previous_in_scope(
    scope: Sequence[WidgetId],
    current: Optional[WidgetId],
    *,
    wrap: bool = True,
) -> Optional[WidgetId]:
    """Mirror of :func:`next_in_scope`; an unknown ``current`` resolves to the last element."""

    idx = _index_of(scope, current)
    if idx is None:
        return last_of(scope)
    if idx > 0:
        return scope[idx - 1]
    return last_of(scope) if wrap else scope[idx]

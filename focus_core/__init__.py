from ._version import __version__
from .coordinator import FocusCoordinator
from .geometry import MAX_COORD, MAX_WIDGET_ID, Direction, Rect, WidgetId
from .trap_guard import FocusTrap
from .trap_stack import FocusTrapConfig

__all__ = [
    "__version__",
    "FocusCoordinator",
    "FocusTrap",
    "FocusTrapConfig",
    "Direction",
    "Rect",
    "WidgetId",
    "MAX_WIDGET_ID",
    "MAX_COORD",
]

from .input_bindings import BindingConfig, ControlScheme, FocusBindingManager

__all__ = [
    "BindingConfig",
    "ControlScheme",
    "FocusBindingManager",
]

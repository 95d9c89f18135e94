from .models import ToolDeclaration, RequestOptions, ToolMode

__all__ = [
    "ToolDeclaration",
    "RequestOptions",
    "ToolMode",
]

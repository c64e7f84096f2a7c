"""Extension runtime surface."""

from style_engine.extensions.api import ExtensionAPI
from style_engine.extensions.models import (
    ExecutionStat,
    ExtensionError,
    ExtensionPointKind,
    ExtensionPointSpec,
)
from style_engine.extensions.points import CORE_EXTENSION_POINTS
from style_engine.extensions.registry import ExtensionRegistry
from style_engine.extensions.runtime import ExtensionFactory, ExtensionRuntime

__all__ = [
    "CORE_EXTENSION_POINTS",
    "ExecutionStat",
    "ExtensionAPI",
    "ExtensionError",
    "ExtensionFactory",
    "ExtensionPointKind",
    "ExtensionPointSpec",
    "ExtensionRegistry",
    "ExtensionRuntime",
]

"""Option registry and catalog loading."""

from style_engine.options.loader import build_descriptor, load_option_catalog
from style_engine.options.registry import OptionRegistry

__all__ = ["OptionRegistry", "build_descriptor", "load_option_catalog"]

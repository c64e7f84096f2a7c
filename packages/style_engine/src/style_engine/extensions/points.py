"""Extension points invoked by engine components."""

from __future__ import annotations

from style_engine.extensions.models import ExtensionPointKind, ExtensionPointSpec

BEFORE_SAVE = "settings.beforeSave"
BEFORE_COMMIT = "settings.beforeCommit"
AFTER_COMMIT = "settings.afterCommit"
AFTER_IMPORT = "settings.afterImport"
AFTER_RESET = "settings.afterReset"
EXTRA_KEYS = "validate.extraKeys"
THREAT_PATTERNS = "security.threatPatterns"
CACHE_INVALIDATED = "cache.invalidated"
STYLESHEET_GENERATED = "stylesheet.generated"
EFFECT_APPLIED = "preview.effectApplied"

CORE_EXTENSION_POINTS: tuple[ExtensionPointSpec, ...] = (
    ExtensionPointSpec(
        name=BEFORE_SAVE,
        kind=ExtensionPointKind.FILTER,
        description="Transform validated values before they are merged into a snapshot.",
        parameters=("values", "current_values"),
        returns="values",
    ),
    ExtensionPointSpec(
        name=BEFORE_COMMIT,
        kind=ExtensionPointKind.ACTION,
        description="Runs before a new snapshot is persisted.",
        parameters=("snapshot",),
    ),
    ExtensionPointSpec(
        name=AFTER_COMMIT,
        kind=ExtensionPointKind.ACTION,
        description="Runs after a new snapshot becomes current.",
        parameters=("snapshot",),
    ),
    ExtensionPointSpec(
        name=AFTER_IMPORT,
        kind=ExtensionPointKind.ACTION,
        description="Runs after an imported document was committed.",
        parameters=("snapshot", "document"),
    ),
    ExtensionPointSpec(
        name=AFTER_RESET,
        kind=ExtensionPointKind.ACTION,
        description="Runs after settings were reset to defaults.",
        parameters=("snapshot",),
    ),
    ExtensionPointSpec(
        name=EXTRA_KEYS,
        kind=ExtensionPointKind.FILTER,
        description="Whitelist keys that have no registered option descriptor.",
        parameters=("keys", "raw_input"),
        returns="keys",
    ),
    ExtensionPointSpec(
        name=THREAT_PATTERNS,
        kind=ExtensionPointKind.FILTER,
        description="Extend or replace the threat patterns applied to markup-capable values.",
        parameters=("patterns",),
        returns="patterns",
    ),
    ExtensionPointSpec(
        name=CACHE_INVALIDATED,
        kind=ExtensionPointKind.ACTION,
        description="Runs after the in-process cache tier was cleared.",
        parameters=("generation",),
    ),
    ExtensionPointSpec(
        name=STYLESHEET_GENERATED,
        kind=ExtensionPointKind.FILTER,
        description="Transform generated stylesheet text before it is cached.",
        parameters=("css", "snapshot"),
        returns="css",
    ),
    ExtensionPointSpec(
        name=EFFECT_APPLIED,
        kind=ExtensionPointKind.ACTION,
        description="Runs after a live preview effect was applied.",
        parameters=("option_key", "value", "effect"),
    ),
)

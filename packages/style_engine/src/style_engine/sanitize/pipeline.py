"""Sanitization pipeline: type validation, threat scanning, third-party transforms."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from style_engine.extensions.points import BEFORE_SAVE, EXTRA_KEYS
from style_engine.models.options import OptionType
from style_engine.sanitize.models import (
    RejectionRecord,
    SanitizeResult,
    ValidationError,
    ValidationReason,
)
from style_engine.sanitize.threats import ThreatScanner
from style_engine.sanitize.validators import DEFAULT_VALIDATORS, FieldRejected, Validator
from style_engine.utils import utc_timestamp

if TYPE_CHECKING:
    from collections.abc import Iterable

    from style_engine.extensions.registry import ExtensionRegistry
    from style_engine.options.registry import OptionRegistry

logger = logging.getLogger(__name__)

SCANNED_TYPES = frozenset({OptionType.TEXT, OptionType.FREEFORM_CSS})
MAX_REJECTION_HISTORY = 200


def string_leaves(value: Any) -> Iterator[str]:
    """Yield every string nested inside mappings and sequences."""
    if isinstance(value, str):
        yield value
    elif isinstance(value, Mapping):
        for key, item in value.items():
            if isinstance(key, str):
                yield key
            yield from string_leaves(item)
    elif isinstance(value, list | tuple | set | frozenset):
        for item in value:
            yield from string_leaves(item)


class SanitizationPipeline:
    """Validate a batch of raw option values.

    The batch is all-or-nothing: any invalid or flagged field rejects every key.
    Rejected batches are kept in a bounded history for diagnostics.
    """

    def __init__(
        self,
        options: OptionRegistry,
        extensions: ExtensionRegistry,
        *,
        scanner: ThreatScanner | None = None,
        validators: Mapping[str, Validator] | None = None,
    ) -> None:
        self._options = options
        self._extensions = extensions
        self._scanner = scanner or ThreatScanner(extensions)
        self._validators: dict[str, Validator] = dict(validators or DEFAULT_VALIDATORS)
        self._lock = threading.Lock()
        self._history: list[RejectionRecord] = []
        self._rejections = 0
        self._security_rejections = 0
        self._pattern_matches: Counter[str] = Counter()

    @property
    def scanner(self) -> ThreatScanner:
        """Return the threat scanner."""
        return self._scanner

    def register_validator(self, name: str, validator: Validator) -> None:
        """Register a validator that descriptors can reference by name."""
        self._validators[name] = validator

    def sanitize_and_validate(
        self,
        raw_input: Mapping[str, Any],
        base_values: Mapping[str, Any] | None = None,
    ) -> SanitizeResult:
        """Validate ``raw_input`` and merge it onto ``base_values``."""
        if not isinstance(raw_input, Mapping):
            error = ValidationError("*", ValidationReason.TYPE_MISMATCH, "input must be a mapping")
            self._record_rejection((error,))
            return SanitizeResult(values=None, errors=(error,))

        errors: list[ValidationError] = []
        typed: dict[str, Any] = {}
        scan_keys: list[str] = []
        extra_keys = self._extra_keys(raw_input)

        for key, raw in raw_input.items():
            descriptor = self._options.get(key)
            if descriptor is None:
                if key in extra_keys:
                    typed[key] = raw
                    scan_keys.append(key)
                    continue
                errors.append(ValidationError(key, ValidationReason.UNKNOWN_KEY, "unknown option"))
                continue
            validator = self._validators.get(descriptor.validator_name)
            if validator is None:
                errors.append(
                    ValidationError(
                        key,
                        ValidationReason.TYPE_MISMATCH,
                        f"no validator named {descriptor.validator_name}",
                    )
                )
                continue
            try:
                typed[key] = validator(descriptor, raw)
            except FieldRejected as rejection:
                errors.append(ValidationError(key, rejection.reason, rejection.detail))
                continue
            except Exception as exc:  # noqa: BLE001 - third-party validators
                logger.exception("Validator %s failed on %s", descriptor.validator_name, key)
                errors.append(
                    ValidationError(
                        key,
                        ValidationReason.TYPE_MISMATCH,
                        f"validator {descriptor.validator_name} failed: {exc}",
                    )
                )
                continue
            if descriptor.type in SCANNED_TYPES:
                scan_keys.append(key)

        if scan_keys:
            patterns = self._scanner.active_patterns()
            for key in scan_keys:
                for text in string_leaves(typed[key]):
                    match = self._scanner.scan(text, patterns)
                    if match is not None:
                        errors.append(
                            ValidationError(
                                key, ValidationReason.THREAT_PATTERN_MATCHED, match.name
                            )
                        )
                        break

        if errors:
            result = SanitizeResult(values=None, errors=tuple(errors))
            self._record_rejection(result.errors)
            if result.security_rejection:
                logger.warning(
                    "Security rejection for keys %s",
                    ", ".join(
                        error.key
                        for error in errors
                        if error.reason is ValidationReason.THREAT_PATTERN_MATCHED
                    ),
                )
            else:
                logger.info("Rejected batch with %d invalid field(s)", len(errors))
            return result

        current = dict(base_values or {})
        transformed = self._extensions.apply_filter(BEFORE_SAVE, dict(typed), current)
        if not isinstance(transformed, Mapping):
            logger.warning("Ignoring %s result of type %s", BEFORE_SAVE, type(transformed))
            transformed = typed
        current.update(transformed)
        return SanitizeResult(values=current, errors=())

    def unknown_keys(self, values: Mapping[str, Any]) -> list[str]:
        """Keys that are neither registered options nor whitelisted extras."""
        extra_keys = self._extra_keys(values)
        return [key for key in values if self._options.get(key) is None and key not in extra_keys]

    def rejection_history(self, limit: int | None = None) -> list[RejectionRecord]:
        """Most recent rejected batches, newest last."""
        with self._lock:
            history = list(self._history)
        return history[-limit:] if limit else history

    def clear_history(self) -> None:
        """Forget recorded rejections and counters."""
        with self._lock:
            self._history.clear()
            self._rejections = 0
            self._security_rejections = 0
            self._pattern_matches.clear()

    def security_stats(self) -> dict[str, Any]:
        """Rejection counters plus the active pattern and validator counts."""
        active_patterns = self._scanner.active_patterns()
        with self._lock:
            return {
                "total_rejections": self._rejections,
                "security_rejections": self._security_rejections,
                "pattern_matches": dict(self._pattern_matches),
                "history_size": len(self._history),
                "active_pattern_count": len(active_patterns),
                "validator_count": len(self._validators),
            }

    def _record_rejection(self, errors: Iterable[ValidationError]) -> None:
        errors = tuple(errors)
        patterns = tuple(
            error.detail
            for error in errors
            if error.reason is ValidationReason.THREAT_PATTERN_MATCHED
        )
        record = RejectionRecord(
            occurred_at=utc_timestamp(),
            keys=tuple(error.key for error in errors),
            reasons=tuple(error.reason.value for error in errors),
            patterns=patterns,
        )
        with self._lock:
            self._rejections += 1
            if record.security:
                self._security_rejections += 1
                self._pattern_matches.update(patterns)
            self._history.append(record)
            if len(self._history) > MAX_REJECTION_HISTORY:
                del self._history[: len(self._history) - MAX_REJECTION_HISTORY]

    def _extra_keys(self, raw_input: Mapping[str, Any]) -> set[str]:
        allowed = self._extensions.apply_filter(EXTRA_KEYS, [], dict(raw_input))
        if not isinstance(allowed, list | tuple | set | frozenset):
            logger.warning("Ignoring %s result of type %s", EXTRA_KEYS, type(allowed))
            return set()
        return {str(key) for key in allowed}

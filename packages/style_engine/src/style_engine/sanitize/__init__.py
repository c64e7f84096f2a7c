"""Sanitization pipeline: validators and threat-pattern scanning."""

from style_engine.sanitize.models import (
    RejectionRecord,
    SanitizeResult,
    ValidationError,
    ValidationReason,
)
from style_engine.sanitize.pipeline import SanitizationPipeline
from style_engine.sanitize.threats import DEFAULT_THREAT_PATTERNS, ThreatPattern, ThreatScanner
from style_engine.sanitize.validators import DEFAULT_VALIDATORS, FieldRejected, Validator

__all__ = [
    "DEFAULT_THREAT_PATTERNS",
    "DEFAULT_VALIDATORS",
    "FieldRejected",
    "RejectionRecord",
    "SanitizationPipeline",
    "SanitizeResult",
    "ThreatPattern",
    "ThreatScanner",
    "ValidationError",
    "ValidationReason",
    "Validator",
]

"""Service helpers for the style engine web backend."""

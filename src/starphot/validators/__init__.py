from __future__ import annotations

# Re-export the common result types
from .base import ValidationResult, ValidationError

# Photometry configuration validator
from .config import validate_config

__all__ = [
    "ValidationResult", "ValidationError",
    "validate_config",
]

"""Import Obsidian vaults into Dendron's flat, dot-delimited note layout."""

from .config import AppConfig, load_config
from .core import ImportFailure, VaultImportService, transform_vault
from .models import RunStats, TransformOptions, ValidationResult, VaultStats
from .validation import validate_source_vault

__all__ = [
    "AppConfig",
    "ImportFailure",
    "RunStats",
    "TransformOptions",
    "ValidationResult",
    "VaultImportService",
    "VaultStats",
    "load_config",
    "transform_vault",
    "validate_source_vault",
]

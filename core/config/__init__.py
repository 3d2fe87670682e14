"""
Creditline Core Config — Public API
=====================================
Configurable engine rules.
Doctrine: No hardcoded thresholds in engine logic.
"""

from core.config.rules import (
    DEFAULT_CONFIG,
    CreditEngineConfig,
    load_engine_config,
)

__all__ = [
    "CreditEngineConfig",
    "DEFAULT_CONFIG",
    "load_engine_config",
]

"""Data models for configward.

This module exports the core data structures used throughout the application.
"""

from configward.models.config import (
    AgentEntry,
    AgentsSection,
    GatewayAuth,
    GatewaySection,
    MetaSection,
    ModelsSection,
    PlatformConfig,
)
from configward.models.snapshot import ConfigIssue, ConfigSnapshot

__all__ = [
    "AgentEntry",
    "AgentsSection",
    "ConfigIssue",
    "ConfigSnapshot",
    "GatewayAuth",
    "GatewaySection",
    "MetaSection",
    "ModelsSection",
    "PlatformConfig",
]

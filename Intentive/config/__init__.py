"""
Configuration package for Intentive.

This package provides:
- YAML-based configuration (config.yaml + local.yaml)
- Deep-merge logic and environment variable substitution
- The immutable Settings object handed to the router and adapters
"""

from .parser import Settings, get_provider_api_config, load_config, load_settings

__all__ = ["Settings", "get_provider_api_config", "load_config", "load_settings"]

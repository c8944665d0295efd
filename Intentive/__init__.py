"""Intentive: chat relay for intent-centric Web3 demos."""

__version__ = "0.1.0"

"""Adapters that embed the engine in concrete editors."""

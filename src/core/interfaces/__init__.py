"""Core interfaces.

Contracts (Protocol) implemented by concrete adapters, so the core depends on
abstractions instead of httpx or the filesystem.
"""

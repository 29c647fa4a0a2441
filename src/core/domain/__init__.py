"""Domain models and pure rules.

Pure data structures (Pydantic v2) and predicates: no HTTP, CLI or
filesystem concerns live here.
"""

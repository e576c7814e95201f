"""
domain - Entities, value objects, ports and exceptions of the meal planner.

Pure Python: no SQLite, no pydantic. Everything else depends on this package.
"""

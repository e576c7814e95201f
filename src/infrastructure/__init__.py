"""
infrastructure - Concrete implementations of domain ports.

Contains the vendor-specific code: aiosqlite persistence, environment
configuration and logging setup. Depends on domain/ only.
"""

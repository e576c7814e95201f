"""
infrastructure.persistence - aiosqlite schema management and repositories.
"""

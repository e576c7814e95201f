"""
application.queries - Pure derivations over collections loaded from the repositories.

Deterministic and side-effect free: grouping, filtering, searching,
statistics and ordering. No I/O.
"""

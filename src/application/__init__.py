"""
application - Validation, derivation queries and services.

Depends on domain/ only (services receive repositories through domain ports).
Never imports from infrastructure/.
"""

"""
application.services - Validated entry points over the repositories.
"""

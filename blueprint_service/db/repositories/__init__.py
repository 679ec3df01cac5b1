"""
Repository modules for database access.
"""

from .blueprints import BlueprintStore

__all__ = ["BlueprintStore"]

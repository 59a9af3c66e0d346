"""
Import all models from their respective modules.
"""

from carlens.models.user import User
from carlens.models.car import CarRecord

# Export all models
__all__ = [
    "User",
    "CarRecord",
]

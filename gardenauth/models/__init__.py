"""Garden Auth Database Models."""

from gardenauth.models.account import Account
from gardenauth.models.garden import Garden

__all__ = [
    "Account",
    "Garden",
]

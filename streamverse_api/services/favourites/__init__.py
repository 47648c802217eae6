"""Favourites ledger components split by responsibility.

Persistence, caching and presentation live in separate classes so that the
orchestrating :class:`~streamverse_api.services.favourites_service.FavouritesService`
can be tested with any of them replaced.
"""

from .cache import FavouritesCache
from .persistence import FavouritesPersistence
from .presentation import FavouritesPresenter, NormalizedFavourite

__all__ = [
    "FavouritesCache",
    "FavouritesPersistence",
    "FavouritesPresenter",
    "NormalizedFavourite",
]

"""repositories package."""
from .accounts import AccountRepository
from .local_cache import LocalCacheRepository

__all__ = [
    'AccountRepository',
    'LocalCacheRepository',
]

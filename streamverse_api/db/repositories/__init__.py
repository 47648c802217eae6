from .users import UniqueField, UserRepository, normalize_identity

__all__ = [
    "UniqueField",
    "UserRepository",
    "normalize_identity",
]

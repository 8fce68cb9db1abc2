from transpipe.services.schemas.profiles import (
    ProfileRead,
)

__all__ = [
    "ProfileRead",
]

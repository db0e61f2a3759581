from .base import StoreProfile
from .kofi import KOFI
from .acggoods import ACGGOODS

PROFILES = {
    KOFI.key: KOFI,
    ACGGOODS.key: ACGGOODS,
    # add more storefronts here...
}


class UnknownStoreError(ValueError):
    pass


def pick_profile(key: str) -> StoreProfile:
    prof = PROFILES.get((key or "").strip().lower())
    if prof is None:
        raise UnknownStoreError(f"unknown store {key!r}; expected one of {', '.join(sorted(PROFILES))}")
    return prof

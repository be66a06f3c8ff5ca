"""Page persistence helpers: profiles, payload codecs and load-time rules."""

from pageomatic.services.page.profiles import PageProfile, get_profile

__all__ = ["PageProfile", "get_profile"]

"""Session handling: refresh coalescing and login redirects."""

from ideaforge.auth.navigation import UNAUTHENTICATED_PATHS, LoginNavigator
from ideaforge.auth.singleflight import SingleFlight

__all__ = ["UNAUTHENTICATED_PATHS", "LoginNavigator", "SingleFlight"]

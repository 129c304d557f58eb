from .registry import ToolRegistry
from .tools import hotels, itinerary, search, trips, wishlist


def default_registry() -> ToolRegistry:
    return ToolRegistry([*trips.TOOLS, *wishlist.TOOLS, *search.TOOLS, *hotels.TOOLS, *itinerary.TOOLS])

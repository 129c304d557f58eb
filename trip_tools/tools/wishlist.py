from typing import Any, Dict, Optional

from pydantic import Field, model_validator

from ..errors import PersistenceConflict
from ..models import TripPreferences, TripRecord, TripStatus
from ..registry import Tool, ToolArgs, ToolContext


class AddToWishlistArgs(ToolArgs):
    destination_name: str = Field(description="Name of the destination, e.g. 'Bali'")
    destination_id: str = Field(description="ISO country code or unique identifier, e.g. 'ID' for Indonesia")
    country: Optional[str] = Field(default=None, description="Country name")
    description: Optional[str] = Field(default=None, description="Brief description of why this destination is appealing")
    estimated_budget: Optional[float] = Field(default=None, description="Estimated budget in user's currency")


class GetWishlistArgs(ToolArgs):
    pass


class RemoveFromWishlistArgs(ToolArgs):
    destination_id: Optional[str] = Field(default=None, description="ISO country code or unique identifier of the destination")
    destination_name: Optional[str] = Field(default=None, description="Name of the destination to remove")

    @model_validator(mode="after")
    def _needs_one(self) -> "RemoveFromWishlistArgs":
        self.destination_id = (self.destination_id or "").strip() or None
        self.destination_name = (self.destination_name or "").strip() or None
        if not self.destination_id and not self.destination_name:
            raise ValueError("destinationId or destinationName is required")
        return self


def _matches_id(record: TripRecord, destination_id: str) -> bool:
    wanted = destination_id.strip().lower()
    prefs = record.preferences
    return (prefs.destination_id or "").lower() == wanted or (prefs.iso2 or "").lower() == wanted


def _matches_name(record: TripRecord, name: str) -> bool:
    label = record.preferences.destination_name or record.title
    return name.strip().lower() in label.lower()


async def add_to_wishlist(args: AddToWishlistArgs, ctx: ToolContext) -> Dict[str, Any]:
    user_id = ctx.require_user()
    # Check-then-insert under the user's lock so two concurrent adds can't both insert.
    async with ctx.store.user_lock(user_id):
        existing = await ctx.store.list(user_id, TripStatus.WISHLIST)
        match = next((r for r in existing if _matches_id(r, args.destination_id)), None)
        if match is not None:
            return {
                "message": f"{args.destination_name} is already in your wishlist!",
                "action": "exists",
                "wishlistId": match.id,
            }

        record = await ctx.store.insert(
            TripRecord(
                id="",
                user_id=user_id,
                title=f"{args.destination_name} ({args.destination_id.upper()})",
                trip_type="explore",
                status=TripStatus.WISHLIST,
                preferences=TripPreferences(
                    kind="wishlist",
                    destination_id=args.destination_id,
                    destination_name=args.destination_name,
                    country=args.country,
                    iso2=args.destination_id.upper() if len(args.destination_id) == 2 else None,
                    description=args.description,
                    estimated_budget=args.estimated_budget,
                    currency=str(ctx.currency.currency) if args.estimated_budget is not None else None,
                ),
            )
        )
    return {
        "message": (
            f"{args.destination_name} has been added to your wishlist! "
            "You can view it in your saved destinations."
        ),
        "action": "added",
        "wishlistId": record.id,
    }


async def get_wishlist(args: GetWishlistArgs, ctx: ToolContext) -> Dict[str, Any]:
    user_id = ctx.require_user()
    rows = await ctx.store.list(user_id, TripStatus.WISHLIST)
    if not rows:
        return {
            "message": "Your wishlist is empty. Would you like me to suggest some amazing destinations to add?",
            "wishlist": [],
        }
    items = [
        {
            "id": r.id,
            "destinationName": r.preferences.destination_name or r.title,
            "destinationId": r.preferences.destination_id,
            "country": r.preferences.country,
            "addedAt": r.created_at,
        }
        for r in rows
    ]
    return {"message": f"You have {len(rows)} destination(s) in your wishlist", "wishlist": items}


async def remove_from_wishlist(args: RemoveFromWishlistArgs, ctx: ToolContext) -> Dict[str, Any]:
    user_id = ctx.require_user()
    async with ctx.store.user_lock(user_id):
        rows = await ctx.store.list(user_id, TripStatus.WISHLIST)
        match = None
        for r in rows:
            if args.destination_id and _matches_id(r, args.destination_id):
                match = r
                break
            if args.destination_name and _matches_name(r, args.destination_name):
                match = r
                break
        if match is None:
            raise PersistenceConflict("Couldn't find that destination in your wishlist.")
        await ctx.store.delete(user_id, match.id)
    return {"message": "Removed from your wishlist.", "action": "removed", "wishlistId": match.id}


TOOLS = [
    Tool(
        name="add_to_wishlist",
        description=(
            "Add a destination to the user's travel wishlist. Use when user says they want to save a destination "
            "for later, add to favorites, or 'I'd love to visit there someday'."
        ),
        args_model=AddToWishlistArgs,
        handler=add_to_wishlist,
        mutates=True,
    ),
    Tool(
        name="get_wishlist",
        description=(
            "Get the user's travel wishlist. Use when user asks about their saved destinations, favorite places "
            "to visit, or wishlist."
        ),
        args_model=GetWishlistArgs,
        handler=get_wishlist,
    ),
    Tool(
        name="remove_from_wishlist",
        description=(
            "Remove a destination from the user's wishlist. Use when user asks to remove, delete from wishlist, "
            "or says they're no longer interested."
        ),
        args_model=RemoveFromWishlistArgs,
        handler=remove_from_wishlist,
        mutates=True,
    ),
]

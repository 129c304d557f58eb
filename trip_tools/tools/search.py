from typing import Any, Dict, Optional

from pydantic import Field

from ..catalog import CURRENCY_RATES, DESTINATIONS, convert, find_destination, rate
from ..currency.codes import CurrencyCode
from ..currency.format import format_price
from ..errors import ToolError, ValidationError
from ..registry import Tool, ToolArgs, ToolContext


class SearchDestinationsArgs(ToolArgs):
    query: Optional[str] = Field(
        default=None,
        description="Search query - destination name, country, or keywords like 'beach', 'temples', 'food'",
    )
    trip_type: Optional[str] = Field(
        default=None,
        description="Type of trip: 'romantic', 'adventure', 'cultural', 'family', 'luxury', 'budget', 'relaxation'",
    )
    budget: Optional[float] = Field(default=None, gt=0, description="Maximum daily budget per person in user's currency")


class DestinationInfoArgs(ToolArgs):
    destination_id: Optional[str] = Field(default=None, description="ISO country code of the destination")
    destination_name: Optional[str] = Field(default=None, description="Name of the destination")


class ConvertCurrencyArgs(ToolArgs):
    amount: float = Field(description="Amount to convert")
    from_currency: str = Field(description="Source currency code (e.g., 'USD')")
    to_currency: Optional[str] = Field(
        default=None, description="Target currency code (e.g., 'INR'); defaults to the user's currency"
    )


def _budget_currency(ctx: ToolContext) -> str:
    # Budgets are only quoted in currencies the rate table knows.
    code = str(ctx.currency.currency)
    return code if code in CURRENCY_RATES else "USD"


async def search_destinations(args: SearchDestinationsArgs, ctx: ToolContext) -> Dict[str, Any]:
    currency = _budget_currency(ctx)
    results = list(DESTINATIONS)

    if args.query:
        q = args.query.lower()
        results = [
            d for d in results
            if q in d.name.lower()
            or q in d.country.lower()
            or q in d.description.lower()
            or any(q in h.lower() for h in d.highlights)
        ]
    if args.trip_type:
        t = args.trip_type.lower()
        results = [d for d in results if any(t in tt.lower() for tt in d.trip_types)]
    if args.budget:
        budget_usd = convert(args.budget, currency, "USD")
        results = [d for d in results if d.avg_daily_budget_usd <= budget_usd]

    destinations = []
    for d in results:
        daily = round(convert(d.avg_daily_budget_usd, "USD", currency))
        destinations.append(
            {
                "id": d.id,
                "name": d.name,
                "country": d.country,
                "description": d.description,
                "highlights": d.highlights,
                "bestTime": d.best_time,
                "avgDailyBudget": daily,
                "avgDailyBudgetFormatted": format_price(daily, currency),
                "currency": currency,
                "tripTypes": d.trip_types,
            }
        )

    if not destinations:
        return {
            "message": (
                "No destinations found matching your criteria. "
                "Try broadening your search or let me suggest some alternatives!"
            ),
            "destinations": [],
        }
    return {
        "message": f"Found {len(destinations)} destination(s) matching your criteria",
        "destinations": destinations,
    }


async def get_destination_info(args: DestinationInfoArgs, ctx: ToolContext) -> Dict[str, Any]:
    if not args.destination_id and not args.destination_name:
        raise ValidationError("destinationId or destinationName is required")
    d = find_destination(args.destination_id, args.destination_name)
    if d is None:
        raise ToolError(
            f'I don\'t have detailed information about "{args.destination_name or args.destination_id}". '
            "Would you like me to help you with another destination?"
        )
    currency = _budget_currency(ctx)
    daily = round(convert(d.avg_daily_budget_usd, "USD", currency))
    return {
        "destination": {
            "id": d.id,
            "name": d.name,
            "country": d.country,
            "description": d.description,
            "highlights": d.highlights,
            "bestTimeToVisit": d.best_time,
            "estimatedDailyBudget": daily,
            "estimatedWeeklyBudget": daily * 7,
            "currency": currency,
            "suitableFor": d.trip_types,
        }
    }


async def convert_currency(args: ConvertCurrencyArgs, ctx: ToolContext) -> Dict[str, Any]:
    source = CurrencyCode(args.from_currency)
    target = CurrencyCode(args.to_currency) if args.to_currency else ctx.currency.currency
    converted = convert(args.amount, str(source), str(target))
    return {
        "original": {"amount": args.amount, "currency": str(source)},
        "converted": {
            "amount": round(converted, 2),
            "currency": str(target),
            "formatted": format_price(converted, str(target)),
        },
        "rate": rate(str(target)) / rate(str(source)),
    }


TOOLS = [
    Tool(
        name="search_destinations",
        description=(
            "Search for travel destinations based on criteria like location, trip type, or budget. Use this when "
            "the user is exploring options or asks for destination recommendations. Budgets are in the user's currency."
        ),
        args_model=SearchDestinationsArgs,
        handler=search_destinations,
    ),
    Tool(
        name="get_destination_info",
        description=(
            "Get detailed information about a specific travel destination. Use when user asks for specifics about "
            "a place - best time to visit, budget estimates, highlights, etc."
        ),
        args_model=DestinationInfoArgs,
        handler=get_destination_info,
    ),
    Tool(
        name="convert_currency",
        description=(
            "Convert an amount between currencies. Use when user asks about prices in different currencies "
            "or needs budget conversion."
        ),
        args_model=ConvertCurrencyArgs,
        handler=convert_currency,
    ),
]

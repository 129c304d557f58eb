"""Fixed destination catalog and USD-based conversion table."""
from typing import Dict, List, Optional

from pydantic import BaseModel

from .errors import ValidationError


# Units of each currency per 1 USD.
CURRENCY_RATES: Dict[str, float] = {
    "USD": 1,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 150,
    "CAD": 1.35,
    "AUD": 1.52,
    "INR": 83,
    "SGD": 1.34,
    "THB": 35,
    "MYR": 4.7,
    "IDR": 15700,
    "PHP": 56,
    "VND": 24500,
    "KRW": 1330,
    "CNY": 7.2,
    "NZD": 1.64,
    "BRL": 4.95,
    "MXN": 17,
    "ARS": 850,
    "CLP": 950,
    "ZAR": 19,
    "AED": 3.67,
    "SAR": 3.75,
    "TRY": 32,
    "RUB": 92,
}


def rate(currency: str) -> float:
    try:
        return CURRENCY_RATES[currency.upper()]
    except KeyError:
        raise ValidationError(f"Unsupported currency for conversion: {currency}")


def convert(amount: float, from_currency: str, to_currency: str) -> float:
    if from_currency.upper() == to_currency.upper():
        return amount
    return amount / rate(from_currency) * rate(to_currency)


class Destination(BaseModel):
    id: str
    name: str
    country: str
    description: str
    highlights: List[str]
    best_time: str
    avg_daily_budget_usd: float
    trip_types: List[str]


DESTINATIONS: List[Destination] = [
    Destination(
        id="ID",
        name="Bali",
        country="Indonesia",
        description=(
            "Tropical paradise with stunning temples, rice terraces, beaches, and vibrant nightlife. "
            "Perfect for honeymoons, adventure, and cultural exploration."
        ),
        highlights=["Ubud Rice Terraces", "Tanah Lot Temple", "Seminyak Beach", "Uluwatu"],
        best_time="April to October (dry season)",
        avg_daily_budget_usd=50,
        trip_types=["romantic", "adventure", "cultural", "relaxation"],
    ),
    Destination(
        id="TH",
        name="Thailand",
        country="Thailand",
        description=(
            "Land of smiles with incredible street food, ancient temples, tropical islands, and bustling cities. "
            "Great for all budgets."
        ),
        highlights=["Bangkok Grand Palace", "Phi Phi Islands", "Chiang Mai Temples", "Phuket Beaches"],
        best_time="November to February (cool season)",
        avg_daily_budget_usd=40,
        trip_types=["adventure", "cultural", "family", "budget"],
    ),
    Destination(
        id="JP",
        name="Japan",
        country="Japan",
        description=(
            "Unique blend of ancient traditions and cutting-edge technology. "
            "Famous for cherry blossoms, cuisine, and incredible hospitality."
        ),
        highlights=["Tokyo", "Kyoto Temples", "Mount Fuji", "Osaka Food Scene"],
        best_time="March-May (cherry blossoms) or October-November (autumn colors)",
        avg_daily_budget_usd=100,
        trip_types=["cultural", "food", "adventure", "family"],
    ),
    Destination(
        id="FR",
        name="Paris",
        country="France",
        description=(
            "The city of love with world-class art, fashion, cuisine, and iconic landmarks. "
            "Perfect for romantic getaways."
        ),
        highlights=["Eiffel Tower", "Louvre Museum", "Notre-Dame", "Champs-Élysées"],
        best_time="April to June or September to November",
        avg_daily_budget_usd=150,
        trip_types=["romantic", "cultural", "food", "luxury"],
    ),
    Destination(
        id="IT",
        name="Italy",
        country="Italy",
        description=(
            "Rich history, art, architecture, and arguably the best food in the world. "
            "From Rome to Venice to the Amalfi Coast."
        ),
        highlights=["Colosseum", "Venice Canals", "Tuscany", "Amalfi Coast"],
        best_time="April to June or September to October",
        avg_daily_budget_usd=120,
        trip_types=["romantic", "cultural", "food", "history"],
    ),
    Destination(
        id="MV",
        name="Maldives",
        country="Maldives",
        description=(
            "Ultimate luxury beach destination with crystal clear waters, overwater villas, and world-class diving."
        ),
        highlights=["Overwater Bungalows", "Snorkeling", "Sunset Cruises", "Spa Retreats"],
        best_time="November to April (dry season)",
        avg_daily_budget_usd=300,
        trip_types=["romantic", "luxury", "relaxation", "honeymoon"],
    ),
    Destination(
        id="GR",
        name="Greece",
        country="Greece",
        description="Ancient ruins, stunning islands, delicious Mediterranean cuisine, and legendary hospitality.",
        highlights=["Santorini", "Athens Acropolis", "Mykonos", "Crete"],
        best_time="May to October",
        avg_daily_budget_usd=100,
        trip_types=["romantic", "cultural", "beach", "history"],
    ),
    Destination(
        id="AE",
        name="Dubai",
        country="United Arab Emirates",
        description="Futuristic city with luxury shopping, ultramodern architecture, and world-class entertainment.",
        highlights=["Burj Khalifa", "Dubai Mall", "Palm Jumeirah", "Desert Safari"],
        best_time="November to March (cooler weather)",
        avg_daily_budget_usd=200,
        trip_types=["luxury", "shopping", "family", "adventure"],
    ),
    Destination(
        id="ES",
        name="Spain",
        country="Spain",
        description=(
            "Vibrant culture, incredible architecture, beautiful beaches, and legendary nightlife. "
            "From Barcelona to Madrid to the Costa del Sol."
        ),
        highlights=["Sagrada Familia", "Alhambra", "Madrid Museums", "Ibiza"],
        best_time="April to June or September to November",
        avg_daily_budget_usd=100,
        trip_types=["cultural", "beach", "nightlife", "food"],
    ),
    Destination(
        id="VN",
        name="Vietnam",
        country="Vietnam",
        description=(
            "Stunning landscapes, rich history, incredible street food, and warm hospitality "
            "at budget-friendly prices."
        ),
        highlights=["Ha Long Bay", "Ho Chi Minh City", "Hoi An", "Sapa Rice Terraces"],
        best_time="February to April or August to October",
        avg_daily_budget_usd=30,
        trip_types=["adventure", "cultural", "budget", "food"],
    ),
    Destination(
        id="AU",
        name="Australia",
        country="Australia",
        description=(
            "Diverse landscapes from the Outback to the Great Barrier Reef, unique wildlife, and vibrant cities."
        ),
        highlights=["Sydney Opera House", "Great Barrier Reef", "Uluru", "Melbourne"],
        best_time="September to November or March to May",
        avg_daily_budget_usd=150,
        trip_types=["adventure", "nature", "family", "wildlife"],
    ),
    Destination(
        id="NZ",
        name="New Zealand",
        country="New Zealand",
        description="Adventure capital of the world with breathtaking landscapes, from fjords to mountains to beaches.",
        highlights=["Queenstown", "Milford Sound", "Hobbiton", "Rotorua"],
        best_time="December to February (summer)",
        avg_daily_budget_usd=130,
        trip_types=["adventure", "nature", "film locations", "outdoor"],
    ),
]


def find_destination(destination_id: Optional[str], destination_name: Optional[str]) -> Optional[Destination]:
    wanted_id = (destination_id or "").lower()
    wanted_name = (destination_name or "").lower()
    for d in DESTINATIONS:
        if (wanted_id and d.id.lower() == wanted_id) or (wanted_name and d.name.lower() == wanted_name):
            return d
    if not wanted_name:
        return None
    for d in DESTINATIONS:
        if wanted_name in d.name.lower() or wanted_name in d.country.lower():
            return d
    return None

"""Domain constants for currency handling and product listings."""

import re
from typing import Dict, Pattern, Set

# Shape check only; any three-letter code is accepted so new ISO entries need no release
CURRENCY_CODE_RE: Pattern[str] = re.compile(r"^[A-Z]{3}$")

# Currencies the storefront offers in its selector
DISPLAY_CURRENCIES: Set[str] = {
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CAD",
    "AUD",
    "CHF",
    "CNY",
    "INR",
}

SORT_OPTIONS: Set[str] = {"price-asc", "price-desc", "name-asc", "name-desc"}

# Offline mock tables used by the 'static' provider
MOCK_RATES: Dict[str, Dict[str, float]] = {
    "USD": {"USD": 1, "EUR": 0.92, "GBP": 0.78, "JPY": 151.2, "INR": 83.2, "AUD": 1.49, "CAD": 1.35},
    "EUR": {"EUR": 1, "USD": 1.09, "GBP": 0.85, "JPY": 164.1, "INR": 90.2, "AUD": 1.62, "CAD": 1.47},
}

# Last-resort approximations when no live source answers
FALLBACK_RATES: Dict[str, Dict[str, float]] = {
    "USD": {
        "EUR": 0.85,
        "GBP": 0.73,
        "JPY": 110,
        "CAD": 1.25,
        "AUD": 1.35,
        "CHF": 0.92,
        "CNY": 6.45,
        "INR": 74.5,
    },
    "EUR": {
        "USD": 1.18,
        "GBP": 0.86,
        "JPY": 129,
        "CAD": 1.47,
        "AUD": 1.59,
        "CHF": 1.08,
        "CNY": 7.59,
        "INR": 87.7,
    },
    "GBP": {
        "USD": 1.37,
        "EUR": 1.16,
        "JPY": 150,
        "CAD": 1.71,
        "AUD": 1.85,
        "CHF": 1.26,
        "CNY": 8.84,
        "INR": 102.1,
    },
}

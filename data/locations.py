"""
Reference location tables shared by the normalizer, the fallback extractor
and the location corrector.
"""
from typing import Dict, FrozenSet

# Canonical state name -> postal abbreviation (50 states + DC)
US_STATES: Dict[str, str] = {
    "Alabama": "AL",
    "Alaska": "AK",
    "Arizona": "AZ",
    "Arkansas": "AR",
    "California": "CA",
    "Colorado": "CO",
    "Connecticut": "CT",
    "Delaware": "DE",
    "District of Columbia": "DC",
    "Florida": "FL",
    "Georgia": "GA",
    "Hawaii": "HI",
    "Idaho": "ID",
    "Illinois": "IL",
    "Indiana": "IN",
    "Iowa": "IA",
    "Kansas": "KS",
    "Kentucky": "KY",
    "Louisiana": "LA",
    "Maine": "ME",
    "Maryland": "MD",
    "Massachusetts": "MA",
    "Michigan": "MI",
    "Minnesota": "MN",
    "Mississippi": "MS",
    "Missouri": "MO",
    "Montana": "MT",
    "Nebraska": "NE",
    "Nevada": "NV",
    "New Hampshire": "NH",
    "New Jersey": "NJ",
    "New Mexico": "NM",
    "New York": "NY",
    "North Carolina": "NC",
    "North Dakota": "ND",
    "Ohio": "OH",
    "Oklahoma": "OK",
    "Oregon": "OR",
    "Pennsylvania": "PA",
    "Rhode Island": "RI",
    "South Carolina": "SC",
    "South Dakota": "SD",
    "Tennessee": "TN",
    "Texas": "TX",
    "Utah": "UT",
    "Vermont": "VT",
    "Virginia": "VA",
    "Washington": "WA",
    "West Virginia": "WV",
    "Wisconsin": "WI",
    "Wyoming": "WY",
}

# Lowercase lookups derived from the canonical table
STATE_NAMES_LOWER: Dict[str, str] = {name.lower(): name for name in US_STATES}
ABBREVIATIONS_LOWER: Dict[str, str] = {abbr.lower(): name for name, abbr in US_STATES.items()}

# Abbreviations that are also everyday English words or titles. These are only read as
# states from end-anchored or comma-qualified positions, never from a bare
# word-boundary scan.
ABBREVIATION_COLLISIONS: FrozenSet[str] = frozenset({
    "in", "me", "or", "hi", "ok", "oh", "id", "de", "la", "ma", "al", "mo",
    "pa", "co", "ne", "md", "mt", "ms",
})

# Words that show up next to "county" or after a preposition in incident
# narratives and must never be taken for a place name.
NON_LOCATION_WORDS: FrozenSet[str] = frozenset({
    "someone", "somebody", "killed", "kill", "hurt", "died", "dead", "murder",
    "crime", "bad", "good", "wrong", "person", "people", "time", "place",
    "thing", "the", "a", "an", "my", "our", "this", "that", "same", "other",
    "another", "every", "each", "any", "some", "which", "what", "whole",
    "entire", "neighboring", "next", "local",
})

# Leading words stripped from a "<words> county" candidate
COUNTY_LEADING_NOISE: FrozenSet[str] = frozenset({
    "in", "at", "from", "to", "for", "near", "of", "on", "i'm", "im", "i",
    "live", "lives", "living", "was", "were", "is", "and", "but", "by",
    "actually", "now", "it", "happened", "arrested", "located", "based",
})

# Consolidated city-counties and the state each belongs to
CITY_COUNTIES: Dict[str, str] = {
    "honolulu": "Hawaii",
    "san francisco": "California",
    "philadelphia": "Pennsylvania",
    "denver": "Colorado",
}

COUNTY_SUFFIX = " county"

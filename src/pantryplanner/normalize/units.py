"""Unit-of-measure canonicalisation and quantity parsing utilities."""

import re

from pantryplanner.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Unit Synonym Tables
# =============================================================================

# Spelling -> canonical token. Quantities are never converted between units;
# the families only group spellings of the same unit.
VOLUME_UNITS: dict[str, str] = {
    # Metric
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "cl": "cl",
    "centiliter": "cl",
    "centiliters": "cl",
    "centilitre": "cl",
    "centilitres": "cl",
    "dl": "dl",
    "deciliter": "dl",
    "deciliters": "dl",
    "decilitre": "dl",
    "decilitres": "dl",
    "l": "l",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    # US customary
    "tsp": "tsp",
    "tsps": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tbsp": "tbsp",
    "tbsps": "tbsp",
    "tbs": "tbsp",
    "tbl": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "cup": "cup",
    "cups": "cup",
    "fl oz": "fl oz",
    "fl. oz": "fl oz",
    "floz": "fl oz",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "pt": "pt",
    "pint": "pt",
    "pints": "pt",
    "qt": "qt",
    "quart": "qt",
    "quarts": "qt",
    "gal": "gal",
    "gallon": "gal",
    "gallons": "gal",
}

WEIGHT_UNITS: dict[str, str] = {
    # Metric
    "mg": "mg",
    "milligram": "mg",
    "milligrams": "mg",
    "g": "g",
    "gr": "g",
    "gram": "g",
    "grams": "g",
    "gramme": "g",
    "grammes": "g",
    "kg": "kg",
    "kgs": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    # Imperial
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "lb": "lb",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
}

COUNT_UNITS: dict[str, str] = {
    "pcs": "pcs",
    "pc": "pcs",
    "piece": "pcs",
    "pieces": "pcs",
    "ea": "pcs",
    "each": "pcs",
    "whole": "pcs",
    "item": "pcs",
    "items": "pcs",
    "clove": "clove",
    "cloves": "clove",
    "slice": "slice",
    "slices": "slice",
    "head": "head",
    "heads": "head",
    "bunch": "bunch",
    "bunches": "bunch",
    "sprig": "sprig",
    "sprigs": "sprig",
    "can": "can",
    "cans": "can",
    "tin": "can",
    "tins": "can",
    "jar": "jar",
    "jars": "jar",
    "pkg": "pkg",
    "package": "pkg",
    "packages": "pkg",
    "pack": "pkg",
    "packs": "pkg",
    "packet": "pkg",
    "packets": "pkg",
    "bottle": "bottle",
    "bottles": "bottle",
    "bag": "bag",
    "bags": "bag",
    "box": "box",
    "boxes": "box",
    "stick": "stick",
    "sticks": "stick",
    "fillet": "fillet",
    "fillets": "fillet",
    "pinch": "pinch",
    "pinches": "pinch",
    "dash": "dash",
    "dashes": "dash",
    "handful": "handful",
    "handfuls": "handful",
}

UNIT_SYNONYMS: dict[str, str] = {**VOLUME_UNITS, **WEIGHT_UNITS, **COUNT_UNITS}

_FAMILIES: dict[str, str] = {
    **{canonical: "volume" for canonical in VOLUME_UNITS.values()},
    **{canonical: "weight" for canonical in WEIGHT_UNITS.values()},
    **{canonical: "count" for canonical in COUNT_UNITS.values()},
}

_TRAILING_JUNK = re.compile(r"[\s.]+$")


def _clean_unit(unit: str) -> str:
    return " ".join(_TRAILING_JUNK.sub("", unit.lower()).split())


def normalize_unit(unit: str | None) -> str:
    """
    Map a unit spelling to its canonical token.

    "tablespoon", "Tablespoons" and "tbsp." all become "tbsp". Spellings not in
    the table are returned lower-cased and trimmed rather than rejected, so
    imported or hand-typed units are never dropped. Idempotent.
    """
    if not unit:
        return ""
    cleaned = _clean_unit(unit)
    return UNIT_SYNONYMS.get(cleaned, cleaned)


def units_match(unit1: str | None, unit2: str | None) -> bool:
    """Check whether two unit spellings name the same unit."""
    return normalize_unit(unit1) == normalize_unit(unit2)


def unit_family(unit: str | None) -> str:
    """
    Classify a unit as "volume", "weight", "count" or "unknown".

    Informational only: quantities are never converted between units.
    """
    return _FAMILIES.get(normalize_unit(unit), "unknown")


def is_known_unit(unit: str | None) -> bool:
    return bool(unit) and _clean_unit(unit) in UNIT_SYNONYMS


# =============================================================================
# Parsing Functions
# =============================================================================

VULGAR_FRACTIONS: dict[str, str] = {
    "¼": "1/4",
    "½": "1/2",
    "¾": "3/4",
    "⅓": "1/3",
    "⅔": "2/3",
    "⅛": "1/8",
}


def replace_vulgar_fractions(text: str) -> str:
    """Rewrite unicode fractions as ASCII, e.g. "1½" -> "1 1/2"."""
    for symbol, ascii_fraction in VULGAR_FRACTIONS.items():
        text = text.replace(symbol, f" {ascii_fraction}")
    return " ".join(text.split())


_RANGE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:-|to)\s*(\d+(?:\.\d+)?)")
_MIXED = re.compile(r"(\d+)\s+(\d+)/(\d+)")
_FRACTION = re.compile(r"(\d+)/(\d+)")
_DECIMAL = re.compile(r"\d+(?:\.\d+)?")
_MEASURE = re.compile(r"(\d+(?:[.,]\d+)?(?:\s*/\s*\d+)?(?:\s+\d+/\d+)?)\s*(.*)")

VAGUE_QUANTITIES = frozenset({"to taste", "as needed", "pinch", "dash", "some"})


def parse_quantity_string(text: str) -> float:
    """
    Read a quantity such as "2", "1,5", "1/2", "1 1/2", "½" or "2-3".

    Ranges give their midpoint. Vague amounts ("to taste") and anything
    unreadable count as one.
    """
    cleaned = replace_vulgar_fractions((text or "").strip().lower()).replace(",", ".")
    if not cleaned or cleaned in VAGUE_QUANTITIES:
        return 1.0

    if match := _RANGE.match(cleaned):
        return (float(match[1]) + float(match[2])) / 2
    if (match := _MIXED.match(cleaned)) and int(match[3]):
        return int(match[1]) + int(match[2]) / int(match[3])
    if (match := _FRACTION.match(cleaned)) and int(match[2]):
        return int(match[1]) / int(match[2])
    if match := _DECIMAL.match(cleaned):
        return float(match[0])

    logger.debug(f"Unparseable quantity {text!r}, defaulting to 1")
    return 1.0


def extract_quantity_and_unit(measure: str) -> tuple[str, str]:
    """Split a measure such as "2 cups", "500g" or "1/2 tsp" into quantity and unit text.

    A measure without a leading number ("pinch") has an implied quantity of "1".
    """
    measure = replace_vulgar_fractions((measure or "").strip())
    if not measure:
        return "1", ""
    if match := _MEASURE.match(measure):
        return match[1].strip(), match[2].strip()
    return "1", measure

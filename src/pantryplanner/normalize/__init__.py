"""Normalize units, quantities and free ingredient text."""

from pantryplanner.normalize.ingredients import (
    clean_imported_ingredients,
    parse_ingredient_line,
    parse_ingredient_text,
)
from pantryplanner.normalize.units import (
    UNIT_SYNONYMS,
    extract_quantity_and_unit,
    normalize_unit,
    parse_quantity_string,
    unit_family,
    units_match,
)

__all__ = [
    "UNIT_SYNONYMS",
    "clean_imported_ingredients",
    "extract_quantity_and_unit",
    "normalize_unit",
    "parse_ingredient_line",
    "parse_ingredient_text",
    "parse_quantity_string",
    "unit_family",
    "units_match",
]

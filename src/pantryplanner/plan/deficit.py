"""Shortfall of a requirement against pantry stock."""

from collections.abc import Iterable
from dataclasses import dataclass

from pantryplanner.logging_config import get_logger
from pantryplanner.matching import find_pantry_match
from pantryplanner.normalize.units import normalize_unit
from pantryplanner.schemas import Ingredient

logger = get_logger(__name__)


@dataclass(frozen=True)
class Deficit:
    """Available and missing amounts for one requirement."""

    available_quantity: float
    missing_quantity: float
    matched_unit: str | None = None  # unit of the matched pantry item, if any
    matched_ingredient_id: str | None = None

    @property
    def is_covered(self) -> bool:
        return self.missing_quantity <= 0


def compute_deficit(
    name: str,
    quantity: float,
    unit: str,
    pantry: Iterable[Ingredient],
) -> Deficit:
    """
    Compare a requirement with pantry stock.

    The first pantry item whose name matches is used, even if a later item
    would have matched more closely. Stock in a different unit counts as
    nothing available; quantities are never converted. Never raises.
    """
    match = find_pantry_match(name, pantry)

    if match is None:
        available = 0.0
        logger.debug(f"{name!r}: not in pantry")
    elif normalize_unit(match.unit) != normalize_unit(unit):
        available = 0.0
        logger.debug(f"{name!r}: pantry has {match.name!r} in {match.unit!r}, need {unit!r}")
    else:
        available = match.quantity

    return Deficit(
        available_quantity=available,
        missing_quantity=max(0.0, quantity - available),
        matched_unit=match.unit if match is not None else None,
        matched_ingredient_id=match.id if match is not None else None,
    )

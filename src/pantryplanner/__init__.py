"""Pantry, recipe and weekly meal planning with shopping list generation."""

__version__ = "0.1.0"

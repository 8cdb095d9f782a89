"""Interactive prompts for sprout."""

from .prompts import CANCELLED, Option, Prompter, is_cancelled

__all__ = ["CANCELLED", "Option", "Prompter", "is_cancelled"]

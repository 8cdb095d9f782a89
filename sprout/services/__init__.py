"""Services used by sprout commands."""

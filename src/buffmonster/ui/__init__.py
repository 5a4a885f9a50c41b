"""Qt presentation layer for the tagging editor."""

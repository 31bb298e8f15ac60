"""Shared terminal styling constants."""

YELLOW = "\033[93m"
RESET = "\033[0m"

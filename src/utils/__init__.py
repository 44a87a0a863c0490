"""
Utility functions for the environmental dashboard
"""

from .number_format import (
    DisplayFormat,
    ParsedDisplay,
    parse_display_value,
    clamp,
    fit_to_domain,
)

__all__ = [
    'DisplayFormat',
    'ParsedDisplay',
    'parse_display_value',
    'clamp',
    'fit_to_domain',
]

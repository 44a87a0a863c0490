from .error_handler import (
    DomainError,
    ServiceUnavailableError,
    ElementNotFoundError,
    ChartNotFoundError,
    InvalidPeriodError,
    InvalidLayerError,
    InvalidVisibilityError,
    register_exception_handlers,
)

__all__ = [
    "DomainError",
    "ServiceUnavailableError",
    "ElementNotFoundError",
    "ChartNotFoundError",
    "InvalidPeriodError",
    "InvalidLayerError",
    "InvalidVisibilityError",
    "register_exception_handlers",
]

from .dashboard_controller import DashboardController, DashboardContext

__all__ = [
    'DashboardController',
    'DashboardContext',
]

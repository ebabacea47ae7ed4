from sparkclean.admin.dashboard import (
    DashboardCalculator,
    DashboardReport,
    DashboardStats,
    filter_bookings,
)

__all__ = ["DashboardCalculator", "DashboardReport", "DashboardStats", "filter_bookings"]

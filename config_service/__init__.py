"""
Centralised configuration for the dashboard view.

Single access point for the settings shared by the reporting client and the
dashboard service.
"""

from config_service.config import DashboardSettings, settings

__all__ = ["DashboardSettings", "settings"]

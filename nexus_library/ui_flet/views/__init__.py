"""
Views for the Nexus Library UI
"""

from .settings_view import SettingsView

__all__ = ["SettingsView"]

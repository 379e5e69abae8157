"""
Nexus Library - Flet UI Entry Point
"""

import asyncio
import logging

import flet as ft

from nexus_library.bootstrap import create_app_services
from nexus_library.logger import setup_logger
from nexus_library.ui_flet.views.settings_view import SettingsView
from nexus_library.version import __version__


async def main(page: ft.Page):
    """
    Main async entry point for the Flet application

    Args:
        page: The Flet page instance
    """
    page.title = "Nexus"
    page.window.width = 900
    page.window.height = 700
    page.window.min_width = 700
    page.window.min_height = 500
    page.padding = 24
    page.theme_mode = ft.ThemeMode.DARK
    page.bgcolor = "#2E2E2E"

    logger = logging.getLogger("NexusLibrary")
    logger.info(f"Nexus {__version__} starting...")

    # Services are built once here and handed to the views
    try:
        services = await asyncio.to_thread(create_app_services)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        page.add(ft.Text(f"Could not open the game database: {e}", color=ft.Colors.RED_400))
        return

    settings_view = SettingsView(
        page,
        logger,
        services.library_service,
        services.settings_repository,
        services.db_manager.db_path,
    )
    page.add(settings_view)


if __name__ == "__main__":
    setup_logger()
    ft.app(target=main)

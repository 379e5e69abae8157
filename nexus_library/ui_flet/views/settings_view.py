"""
Settings View
Application preferences, hidden (ignored) games and library maintenance.

Every store call runs in a worker thread via asyncio.to_thread; the view is
only mutated after the await returns on the event loop.
"""

import asyncio
import logging
from pathlib import Path
from typing import List

import flet as ft

from nexus_library.library_service import LibraryService
from nexus_library.models import AppSettings, IgnoredGame
from nexus_library.settings_repository import SettingsRepository
from nexus_library.task_registry import register_task

CLEAR_BUTTON_LABEL = "Clear & Rescan"
CLEARING_LABEL = "Clearing..."

# (setting name, label, description)
TOGGLES = (
    ("launch_on_startup", "Launch on startup", "Start Nexus when you sign in"),
    ("close_to_tray", "Close to tray", "Keep running in the system tray when the window is closed"),
    ("dark_mode", "Dark mode", "Use the dark color scheme"),
)


class SettingsView(ft.Column):
    """
    Settings page.

    Mirrors AppSettings into toggle switches, lists hidden games with a
    restore action, and offers a library clear.
    """

    def __init__(
        self,
        page: ft.Page,
        logger: logging.Logger,
        library_service: LibraryService,
        settings_repository: SettingsRepository,
        db_path: Path | str,
    ):
        super().__init__()
        self._page_ref = page
        self.logger = logger
        self.library_service = library_service
        self.settings_repository = settings_repository
        self.expand = True
        self.scroll = ft.ScrollMode.AUTO
        self.spacing = 16

        self.settings = AppSettings()
        self.hidden_games: List[IgnoredGame] = []

        # Switches stay disabled until settings have been loaded
        self.toggle_switches: dict[str, ft.Switch] = {}
        toggle_rows = []
        for name, label, description in TOGGLES:
            switch = ft.Switch(
                value=getattr(self.settings, name),
                data=name,
                disabled=True,
                on_change=self._on_toggle_changed,
            )
            self.toggle_switches[name] = switch
            toggle_rows.append(self._create_toggle_row(label, description, switch))

        self.db_path_text = ft.Text(str(Path(db_path).resolve()), size=12, selectable=True)

        self.clear_button_label = ft.Text(CLEAR_BUTTON_LABEL)
        self.clear_button = ft.FilledButton(
            content=self.clear_button_label,
            icon=ft.Icons.DELETE_SWEEP,
            on_click=self._on_clear_library_clicked,
        )
        self.clear_progress = ft.ProgressRing(width=16, height=16, stroke_width=2, visible=False)

        self.hidden_games_empty_state = ft.Container(
            content=ft.Column(
                controls=[
                    ft.Icon(ft.Icons.VISIBILITY_OFF, size=40, color=ft.Colors.GREY),
                    ft.Text("No hidden games", color=ft.Colors.GREY),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=24,
            visible=True,
        )
        self.hidden_games_list = ft.Column(spacing=8, visible=False)

        self.controls = [
            ft.Row(
                controls=[
                    ft.Icon(ft.Icons.SETTINGS, size=28),
                    ft.Text("Settings", size=22, weight=ft.FontWeight.W_600),
                ],
                spacing=12,
            ),
            self._create_section("General", toggle_rows),
            self._create_section(
                "Hidden Games",
                [
                    ft.Text(
                        "Restored games appear in your library on the next scan.",
                        size=12,
                        color=ft.Colors.GREY,
                    ),
                    self.hidden_games_empty_state,
                    self.hidden_games_list,
                ],
            ),
            self._create_section(
                "Library",
                [
                    ft.Text(
                        "Remove all automatically detected games. Manually added games are preserved.",
                        size=12,
                        color=ft.Colors.GREY,
                    ),
                    ft.Row(controls=[self.clear_button, self.clear_progress], spacing=12),
                    ft.Text("Database location", size=12, weight=ft.FontWeight.W_500),
                    self.db_path_text,
                ],
            ),
        ]

    # ===== Layout helpers =====

    def _create_section(self, title: str, controls: List[ft.Control]) -> ft.Container:
        return ft.Container(
            content=ft.Column(
                controls=[ft.Text(title, size=16, weight=ft.FontWeight.W_500), *controls],
                spacing=8,
            ),
            bgcolor="#3C3C3C",
            padding=16,
            border_radius=8,
        )

    def _create_toggle_row(self, label: str, description: str, switch: ft.Switch) -> ft.Row:
        return ft.Row(
            controls=[
                ft.Column(
                    controls=[
                        ft.Text(label, size=15, weight=ft.FontWeight.W_500),
                        ft.Text(description, size=12, color=ft.Colors.GREY),
                    ],
                    spacing=2,
                    expand=True,
                ),
                switch,
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )

    def _build_hidden_game_row(self, entry: IgnoredGame) -> ft.Container:
        return ft.Container(
            content=ft.Row(
                controls=[
                    ft.Icon(ft.Icons.SPORTS_ESPORTS, size=18),
                    ft.Column(
                        controls=[
                            ft.Text(entry.title, weight=ft.FontWeight.BOLD),
                            ft.Text(entry.install_path or "Unknown path", size=12, color=ft.Colors.GREY),
                        ],
                        spacing=2,
                        expand=True,
                    ),
                    ft.TextButton(
                        "Restore",
                        data=entry,
                        on_click=lambda e, entry=entry: self._on_restore_clicked(entry),
                    ),
                ],
                spacing=12,
            ),
            padding=8,
            border_radius=4,
        )

    def _show_message_dialog(self, title: str, message: str):
        dialog = ft.AlertDialog(
            title=ft.Text(title),
            content=ft.Text(message),
            actions=[
                ft.TextButton("OK", on_click=lambda e: self._page_ref.pop_dialog()),
            ],
        )
        self._page_ref.show_dialog(dialog)

    def _show_confirm_dialog(self, title: str, message: str, confirm_label: str, on_confirm) -> ft.AlertDialog:
        dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text(title),
            content=ft.Text(message),
            actions_alignment=ft.MainAxisAlignment.END,
        )
        dialog.actions = [
            ft.TextButton("Cancel", on_click=lambda e: self._page_ref.pop_dialog()),
            ft.FilledButton(confirm_label, on_click=on_confirm),
        ]
        self._page_ref.show_dialog(dialog)
        return dialog

    # ===== Lifecycle =====

    def did_mount(self):
        self._page_ref.run_task(self.load_settings)
        self._page_ref.run_task(self.load_hidden_games)

    # ===== Settings =====

    async def load_settings(self):
        """Load settings off the event loop; defaults stay on failure"""
        try:
            self.settings = await asyncio.to_thread(self.settings_repository.get_settings)
        except Exception as e:
            self.logger.debug(f"Could not load settings, using defaults: {e}")

        for name, switch in self.toggle_switches.items():
            switch.value = getattr(self.settings, name)
            switch.disabled = False
        self._page_ref.update()

    async def _on_toggle_changed(self, e) -> asyncio.Task:
        name = e.control.data
        value = bool(e.control.value)
        setattr(self.settings, name, value)
        self.toggle_switches[name].value = value
        self._page_ref.update()

        # Fire and forget; the outcome is only logged
        return register_task(
            asyncio.create_task(self._save_setting(name, value)),
            name=f"save-setting-{name}",
        )

    async def _save_setting(self, name: str, value: bool):
        try:
            await asyncio.to_thread(self.settings_repository.update_setting, name, value)
            self.logger.info(f"[SETTINGS] Saved {name}: {value}")
        except Exception as e:
            self.logger.error(f"[SETTINGS] Failed to save {name}: {e}")

    # ===== Hidden games =====

    async def load_hidden_games(self):
        try:
            ignored_games = await asyncio.to_thread(self.library_service.get_all_ignored_games)
        except Exception as e:
            self.logger.error(f"Failed to load hidden games: {e}", exc_info=True)
            ignored_games = []

        self._update_hidden_games_ui(ignored_games)

    def _update_hidden_games_ui(self, ignored_games: List[IgnoredGame]):
        self.hidden_games = list(ignored_games)

        if not self.hidden_games:
            self.hidden_games_empty_state.visible = True
            self.hidden_games_list.visible = False
            self.hidden_games_list.controls = []
        else:
            self.hidden_games_empty_state.visible = False
            self.hidden_games_list.visible = True
            self.hidden_games_list.controls = [self._build_hidden_game_row(g) for g in self.hidden_games]

        self._page_ref.update()

    def _on_restore_clicked(self, entry: IgnoredGame):
        async def handler(e):
            await self._perform_restore(entry)

        self._show_confirm_dialog(
            f"Restore {entry.title}?",
            "This game will appear in your library on the next scan.",
            "Restore",
            handler,
        )

    async def _perform_restore(self, entry: IgnoredGame):
        self._page_ref.pop_dialog()

        try:
            await asyncio.to_thread(self.library_service.restore_ignored_game, entry)
        except Exception as ex:
            self.logger.error(f"Failed to restore game '{entry.title}': {ex}", exc_info=True)
            self._show_message_dialog("Error", "Failed to restore game. An error occurred while restoring the game.")
            return

        self.logger.info(f"Restored game: {entry.title}")
        await self.load_hidden_games()

    # ===== Library maintenance =====

    async def _on_clear_library_clicked(self, e):
        async def handler(e):
            await self._perform_clear_library()

        self._show_confirm_dialog(
            "Clear all scanned games?",
            "This will remove all automatically detected games from your library. "
            "Manually added games will be preserved.",
            "Clear",
            handler,
        )

    def _set_clearing(self, busy: bool):
        self.clear_button.disabled = busy
        self.clear_button_label.value = CLEARING_LABEL if busy else CLEAR_BUTTON_LABEL
        self.clear_progress.visible = busy
        self._page_ref.update()

    async def _perform_clear_library(self):
        self._page_ref.pop_dialog()
        self._set_clearing(True)

        try:
            removed = await asyncio.to_thread(self.library_service.clear_all_games)
        except Exception as ex:
            self.logger.error(f"Error clearing library: {ex}", exc_info=True)
            self._set_clearing(False)
            self._show_message_dialog("Error", "Failed to clear library. An error occurred while clearing the library.")
            return

        self._set_clearing(False)
        self._show_message_dialog(
            "Library Cleared",
            f"Removed {removed} game(s). Use Scan Games to rescan your library.",
        )

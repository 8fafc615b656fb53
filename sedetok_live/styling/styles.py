"""Centralized stylesheets for the application."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QLineEdit, QListWidget {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
            QGroupBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_pin_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"font-size: 32pt; font-weight: bold; letter-spacing: 6px; "
            f"color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};"
        )

    @staticmethod
    def get_option_button_style(index: int, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.OPTION_COLORS[index % len(ColorPalette.OPTION_COLORS)].get(theme)
        return f"""
            QPushButton {{
                background-color: {color};
                color: {ColorPalette.TEXT_ON_ACCENT.get(theme)};
                border: none;
                border-radius: 6px;
                padding: 18px;
                font-size: 16pt;
                font-weight: bold;
            }}
            QPushButton:disabled {{
                background-color: {ColorPalette.BORDER_PRIMARY.get(theme)};
            }}
        """

    @staticmethod
    def get_feedback_style(is_correct: bool, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.SUCCESS if is_correct else ColorPalette.ERROR
        return f"font-size: 18pt; font-weight: bold; color: {color.get(theme)};"

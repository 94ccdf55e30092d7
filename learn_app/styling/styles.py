"""Qt stylesheets for the player window."""

from .color_palette import ColorPalette


class Styles:
    """Helper class that builds stylesheets from the player palette."""

    @staticmethod
    def get_main_window_style() -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.background};
                color: {ColorPalette.text_primary};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.accent};
                color: {ColorPalette.text_primary};
                border: none;
                border-radius: 6px;
                padding: 6px 14px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.accent_hover};
            }}
            QPushButton#resetButton {{
                background-color: {ColorPalette.danger};
            }}
        """

    @staticmethod
    def get_header_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_timer_label_style(low_time: bool) -> str:
        color = ColorPalette.timer_low if low_time else ColorPalette.timer
        return f"font-size: 16pt; font-weight: bold; color: {color};"

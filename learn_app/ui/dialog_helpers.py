"""Helper functions for the dialogs the player window shows."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_reset_quiz(parent: QWidget, quiz_name: str) -> bool:
    """Ask before throwing away saved progress.

    Args:
        parent: Parent widget for the dialog
        quiz_name: Name of the quiz being reset

    Returns:
        True if user confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        "Reset Quiz",
        f"Start '{quiz_name}' over? Your answers and remaining time will be lost.",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def show_info(parent: QWidget, title: str, message: str) -> None:
    """Show information dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Information message
    """
    QMessageBox.information(parent, title, message)

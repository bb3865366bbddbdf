"""Non-blocking message boxes usable from coroutines running on QtAsyncio."""

from __future__ import annotations

import asyncio

from PySide6.QtWidgets import QMessageBox, QWidget


async def ask_yes_no(parent: QWidget | None, title: str, message: str) -> bool:
    """
    Show a window-modal Yes/No box and await the answer.

    ``QMessageBox.open()`` is used instead of ``exec()`` so no nested event
    loop runs while a coroutine is suspended here.
    """
    loop = asyncio.get_running_loop()
    answer: asyncio.Future[bool] = loop.create_future()

    box = QMessageBox(
        QMessageBox.Icon.Question, title, message, QMessageBox.StandardButton.NoButton, parent
    )
    box.setStandardButtons(QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No)
    box.setDefaultButton(QMessageBox.StandardButton.No)

    def _on_finished(_result: int) -> None:
        if not answer.done():
            button = box.clickedButton()
            if button is None:
                answer.set_result(False)
            else:
                answer.set_result(box.standardButton(button) == QMessageBox.StandardButton.Yes)
        box.deleteLater()

    box.finished.connect(_on_finished)
    box.open()
    return await answer


def show_warning(parent: QWidget | None, title: str, message: str) -> None:
    """Show a window-modal warning without blocking the caller."""
    box = QMessageBox(
        QMessageBox.Icon.Warning, title, message, QMessageBox.StandardButton.NoButton, parent
    )
    box.setStandardButtons(QMessageBox.StandardButton.Ok)
    box.finished.connect(box.deleteLater)
    box.open()

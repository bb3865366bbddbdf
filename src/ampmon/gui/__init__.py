"""Desktop GUI implementation built with PySide6/Qt.

The main window hosts the amplifier page in a Qt WebEngine view, shows the
peak-held dashboard values and mirrors the page's control buttons. Polling
and clicking are delegated to :mod:`ampmon.core` and :mod:`ampmon.remote`
through :class:`~ampmon.gui.monitor_controller.MonitorController`.
"""

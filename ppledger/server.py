"""Lifecycle holder for the ledger server."""

from __future__ import annotations

import logging


class Server:
    """Tracks whether the server is running and on which port."""

    def __init__(self) -> None:
        self.log = logging.getLogger("server")
        self.port = 0
        self._running = False

    def start(self, port: int) -> bool:
        """Mark the server as running on ``port``; False if already running."""
        if self._running:
            return False
        self.port = port
        self._running = True
        self.log.info("Server started on port %d", port)
        return True

    def stop(self) -> None:
        """Mark the server as stopped."""
        if self._running:
            self._running = False
            self.log.info("Server stopped")

    def is_running(self) -> bool:
        return self._running
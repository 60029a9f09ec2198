"""
Structured logging for Backend LobbyRisk.

JSON logs with timestamp, identity, event_type. Use get_logger() in all modules;
configure_structlog() applies LOG_LEVEL / LOG_FORMAT once settings are loaded.
"""

from backend_lobbyrisk.lobbyrisk_logging.logger import bind_identity, configure_structlog, get_logger

__all__ = ["bind_identity", "configure_structlog", "get_logger"]

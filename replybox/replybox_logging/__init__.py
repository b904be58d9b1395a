"""
Structured logging for ReplyBox.

JSON logs with timestamp, level and event_type. Use get_logger() in all modules.
"""

from replybox.replybox_logging.logger import get_logger

__all__ = ["get_logger"]

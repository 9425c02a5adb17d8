"""
Structured operation logging for the embedding store.
Configured once per process; never re-initialized per request.
"""

import logging
from typing import Any, Dict, List, Optional

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Install the process-wide handler. Safe to call more than once."""
    global _configured
    root = logging.getLogger("embedstore")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if _configured:
        return

    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    _configured = True


def _truncate(text: str, limit: int = 50) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class StructuredLogger:
    """Structured logger for repository, generation and search operations."""

    def __init__(self, name: str = "embedstore"):
        self.logger = logging.getLogger(name)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None,
                      level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_embedding_operation(self, operation: str, key: Any, text: Optional[str] = None,
                                details: Dict[str, Any] = None, status: str = "success"):
        """Log a repository operation on a single record."""
        log_details = {"key": key}
        if text is not None:
            log_details["text"] = _truncate(text)
        if details:
            log_details.update(details)

        level = logging.INFO if status == "success" else logging.ERROR
        self.log_operation(f"embedding.{operation}", status, log_details, level)

    def log_generation(self, provider: str, batch_size: int, dimension: Optional[int] = None,
                       status: str = "success", error: Optional[str] = None):
        """Log a call to the embedding provider."""
        log_details = {"provider": provider, "batch_size": batch_size}
        if dimension is not None:
            log_details["dimension"] = dimension
        if error:
            log_details["error"] = _truncate(error, 100)

        level = logging.INFO if status == "success" else logging.ERROR
        self.log_operation("generation.embed", status, log_details, level)

    def log_search(self, query: str, candidates: int, returned: int, top_score: Optional[float] = None):
        """Log a completed similarity search."""
        log_details = {
            "query": _truncate(query),
            "candidates": candidates,
            "returned": returned,
        }
        if top_score is not None:
            log_details["top_score"] = round(top_score, 4)

        self.log_operation("search.rank", "success", log_details)

    def log_corrupt_rows(self, row_ids: List[int], action: str):
        """Log undecodable rows found while reading the store."""
        self.log_operation("embedding.decode", action, {"row_ids": row_ids}, logging.WARNING)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()

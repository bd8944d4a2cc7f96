"""Logging setup: colored console output in development, JSON lines in production."""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import config


class JSONFormatter(logging.Formatter):
	def format(self, record: logging.LogRecord) -> str:
		log_data: Dict[str, Any] = {
			"timestamp": datetime.now(timezone.utc).isoformat(),
			"level": record.levelname,
			"logger": record.name,
			"message": record.getMessage(),
			"module": record.module,
			"function": record.funcName,
			"line": record.lineno,
		}
		if record.exc_info:
			log_data["exception"] = self.formatException(record.exc_info)
		for extra in ("interval_id", "phase", "session_id"):
			if hasattr(record, extra):
				log_data[extra] = getattr(record, extra)
		return json.dumps(log_data)


class ColoredFormatter(logging.Formatter):
	COLORS = {
		"DEBUG": "\033[36m",
		"INFO": "\033[32m",
		"WARNING": "\033[33m",
		"ERROR": "\033[31m",
		"CRITICAL": "\033[35m",
	}
	RESET = "\033[0m"

	def format(self, record: logging.LogRecord) -> str:
		color = self.COLORS.get(record.levelname, self.RESET)
		record = logging.makeLogRecord(record.__dict__)
		record.levelname = f"{color}{record.levelname}{self.RESET}"
		return super().format(record)


def setup_logging(log_level: Optional[str] = None) -> None:
	"""Configure the root logger once for the whole process.

	Args:
		log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL. When None, LOG_LEVEL
			is used, falling back to INFO in production and DEBUG otherwise.
	"""
	if log_level is None:
		log_level = config.LOG_LEVEL or ("INFO" if config.is_production else "DEBUG")
	numeric_level = getattr(logging, log_level.upper(), logging.INFO)

	handler = logging.StreamHandler(sys.stdout)
	if config.is_production:
		handler.setFormatter(JSONFormatter())
	else:
		handler.setFormatter(ColoredFormatter(
			fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
			datefmt="%Y-%m-%d %H:%M:%S",
		))

	root_logger = logging.getLogger()
	root_logger.setLevel(numeric_level)
	for h in list(root_logger.handlers):
		if getattr(h, "_intervalquiz", False):
			root_logger.removeHandler(h)
	handler._intervalquiz = True  # type: ignore[attr-defined]
	root_logger.addHandler(handler)

	# Streamlit's own watcher is chatty at DEBUG
	logging.getLogger("watchdog").setLevel(logging.WARNING)

	get_logger(__name__).info(
		"Logging configured: level=%s, environment=%s", log_level, config.ENVIRONMENT
	)


def get_logger(name: str) -> logging.Logger:
	return logging.getLogger(name)

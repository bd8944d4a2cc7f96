"""Process-level configuration read from the environment.

Environment Variables:
    INTERVALQUIZ_HOME: Directory holding the JSON data files
        Default: ~/.intervalquiz

    ENVIRONMENT: Deployment environment name
        Default: development
        Options: development, production
        Affects: logging format and default level

    LOG_LEVEL: Logging verbosity level
        Default: INFO (production), DEBUG (development)

User-facing settings (session length, playback mode, phase) live in the
settings store instead, see intervalquiz.storage.
"""
import os
from pathlib import Path


class Config:
	"""Settings loaded from environment variables at import time."""

	DATA_DIR: str = os.getenv("INTERVALQUIZ_HOME", str(Path.home() / ".intervalquiz"))
	"""Where sessions, interval stats and settings are stored."""

	ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

	LOG_LEVEL: str = os.getenv("LOG_LEVEL", "")
	"""Empty string means pick a level from ENVIRONMENT."""

	@property
	def is_production(self) -> bool:
		return self.ENVIRONMENT.lower() == "production"

	@property
	def data_dir(self) -> Path:
		return Path(self.DATA_DIR).expanduser()


config = Config()

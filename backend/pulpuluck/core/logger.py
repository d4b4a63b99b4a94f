import logging
import os
from logging.handlers import RotatingFileHandler
from pulpuluck.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

class LoggerConfig:
    """
    Sets up the application logger: console output plus a rotating file
    under ``log_directory``. Pass ``log_directory=None`` to log to the
    console only.
    """
    def __init__(self, level=20, logger_name="Pulpuluck", log_directory="logs", log_file="app.log"):
        self.logger_name = logger_name
        self.level = level
        self.log_file_path = None
        if log_directory:
            self.log_file_path = os.path.join(os.path.abspath(log_directory), log_file)

        self.logger = logging.getLogger(self.logger_name)
        try:
            self.setup_logger()
        except OSError as e:
            print(f"Failed to setup file logging for {self.logger_name}: {str(e)}")

    def setup_logger(self):
        self.logger.setLevel(self.level)

        # Avoid adding duplicate handlers if re-initialized
        if self.logger.handlers:
            return

        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.level)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if self.log_file_path:
            os.makedirs(os.path.dirname(self.log_file_path), exist_ok=True)
            file_handler = RotatingFileHandler(
                self.log_file_path, backupCount=5, maxBytes=1024 * 1024 * 10, encoding="utf-8"
            )
            file_handler.setLevel(self.level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def log(self, level: int, message: str, extra: dict = None):
        """Log ``message``, appending ``extra`` as context when given."""
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message)

# Initialize Logger
logs = LoggerConfig(
    level=settings.LOGGER,
    logger_name="PULPULUCK",
    log_directory=settings.LOG_DIR or None,
    log_file="app.log"
)

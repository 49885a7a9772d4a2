import logging
import os
from logging.handlers import RotatingFileHandler
from llm_maps.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


class LoggerConfig:
    """
    Application logger: a rotating file under log_directory plus the console.

    Handlers are attached once per logger name, so building a second
    LoggerConfig for the same name reuses the existing handlers and
    never opens the log file again.
    """
    def __init__(
        self, env=20, logger_name="LLMMaps", log_directory="logs", log_file="app.log"
    ):
        self.env = env
        self.logger_name = logger_name
        self.log_directory = os.path.abspath(log_directory)
        self.log_file_path = os.path.join(self.log_directory, log_file)
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(env)

        if not self.logger.handlers:
            try:
                for handler in self._build_handlers():
                    self.logger.addHandler(handler)
            except OSError as e:
                # Unwritable log directory: keep console output only
                self.logger.addHandler(self._console_handler())
                self.logger.warning(f"File logging disabled: {e}")

    def _build_handlers(self) -> list[logging.Handler]:
        os.makedirs(self.log_directory, exist_ok=True)
        file_handler = RotatingFileHandler(
            self.log_file_path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
        )
        self._configure(file_handler)
        return [file_handler, self._console_handler()]

    def _console_handler(self) -> logging.Handler:
        return self._configure(logging.StreamHandler())

    def _configure(self, handler: logging.Handler) -> logging.Handler:
        handler.setLevel(self.env)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        return handler

    def log(self, level: int, message: str, extra: dict = None):
        """Log message, appending extra context as `message | {...}`"""
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message)


logs = LoggerConfig(
    env=settings.LOGGER,
    logger_name="LLM-MAPS",
    log_directory=settings.LOG_DIR,
    log_file="app.log"
)

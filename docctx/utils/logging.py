"""
Logging utilities for docctx.
"""

import logging
import sys
import time
from functools import wraps
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = 'docctx'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# HTTP stack loggers that flood DEBUG output with connection details
NOISY_LOGGERS = ('urllib3', 'requests', 'charset_normalizer', 'asyncio')


def setup_logging(log_level: Optional[str] = "INFO", log_file: Optional[str] = None,
                enable_console: bool = True) -> logging.Logger:
   """Configure the docctx package logger and return it.

   Only the ``docctx`` logger tree is touched, so a host application that
   embeds the providers keeps its own root configuration.
   """
   numeric_level = getattr(logging, (log_level or "INFO").upper(), logging.INFO)
   formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

   package_logger = logging.getLogger(PACKAGE_LOGGER)
   package_logger.setLevel(numeric_level)
   package_logger.propagate = False

   for handler in list(package_logger.handlers):
       package_logger.removeHandler(handler)
       handler.close()

   # stderr keeps CLI output on stdout clean
   if enable_console:
       console_handler = logging.StreamHandler(sys.stderr)
       console_handler.setLevel(numeric_level)
       console_handler.setFormatter(formatter)
       package_logger.addHandler(console_handler)

   if log_file:
       log_path = Path(log_file)
       log_path.parent.mkdir(parents=True, exist_ok=True)

       file_handler = logging.FileHandler(log_path, encoding='utf-8')
       file_handler.setLevel(numeric_level)
       file_handler.setFormatter(formatter)
       package_logger.addHandler(file_handler)

   for name in NOISY_LOGGERS:
       logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

   return package_logger


def get_logger(name: str) -> logging.Logger:
   """Get a logger inside the docctx tree for the given module name."""
   if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
       name = f"{PACKAGE_LOGGER}.{name}"
   return logging.getLogger(name)


class LogCapture:
   """Context manager to capture docctx log records in tests."""

   def __init__(self, logger_name: str = None, level: int = logging.INFO):
       """Initialize log capture for a logger and minimum level."""
       self.logger_name = logger_name or PACKAGE_LOGGER
       self.level = level
       self.handler = None
       self.logs = []
       self._previous_level = None

   def __enter__(self):
       """Start capturing logs."""
       self.handler = logging.Handler()
       self.handler.setLevel(self.level)
       self.handler.emit = self.logs.append

       logger = logging.getLogger(self.logger_name)
       self._previous_level = logger.level
       if logger.getEffectiveLevel() > self.level:
           logger.setLevel(self.level)
       logger.addHandler(self.handler)

       return self

   def __exit__(self, exc_type, exc_val, exc_tb):
       """Stop capturing logs."""
       if self.handler:
           logger = logging.getLogger(self.logger_name)
           logger.removeHandler(self.handler)
           logger.setLevel(self._previous_level)

   def get_messages(self, level: Optional[int] = None) -> list:
       """Get captured log messages, optionally filtered by minimum level."""
       if level is None:
           return [record.getMessage() for record in self.logs]
       return [record.getMessage() for record in self.logs if record.levelno >= level]


def log_performance(func):
   """Log how long a fetch-style method took, naming its URL argument.

   The first positional argument after ``self`` is treated as the target.
   Failures are logged at WARNING and re-raised.
   """
   @wraps(func)
   def wrapper(*args, **kwargs):
       logger = get_logger(func.__module__)
       target = args[1] if len(args) > 1 else kwargs.get('url', '')
       start_time = time.time()

       try:
           result = func(*args, **kwargs)
       except Exception as e:
           duration = time.time() - start_time
           logger.warning(f"{func.__name__} {target} failed after {duration:.2f}s: {e}")
           raise

       duration = time.time() - start_time
       logger.debug(f"{func.__name__} {target} completed in {duration:.2f}s")
       return result

   return wrapper

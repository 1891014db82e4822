"""
Shared "driver_ltv" logger. Modules log through the helpers at the bottom;
the CLI picks console/file output and verbosity via setup_logger.
"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional, Dict, Any


class DLVLogger:
    """
    Owns the handlers of the "driver_ltv" logger. Module loggers are
    children of it and inherit level and handlers.
    """

    def __init__(self,
                 log_level: str = "INFO",
                 enable_console: bool = True,
                 enable_file: bool = False,
                 log_dir: str = "debug_logs",
                 log_format: str = "simple"):
        """
        Replaces any handlers already attached to "driver_ltv".

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            enable_console: Whether to log to console
            enable_file: Whether to log to files
            log_dir: Directory for log files
            log_format: Log format style ("simple", "detailed", "minimal")
        """
        self.log_level = getattr(logging, log_level.upper())
        self.enable_console = enable_console
        self.enable_file = enable_file
        self.log_dir = log_dir
        self.log_format = log_format

        if self.enable_file:
            os.makedirs(self.log_dir, exist_ok=True)

        self._setup_loggers()

    def _setup_loggers(self):
        """Attach console and file handlers for the configured mode"""

        self.logger = logging.getLogger('driver_ltv')
        self.logger.setLevel(self.log_level)

        # Clear any existing handlers
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()

        if self.log_format == "detailed":
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
            )
        elif self.log_format == "simple":
            formatter = logging.Formatter(
                '%(levelname)s - %(message)s'
            )
        else:  # minimal
            formatter = logging.Formatter('%(message)s')

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.log_level)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if self.enable_file:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_file = os.path.join(self.log_dir, f'driver_ltv_{timestamp}.log')

            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

            self.log_file = log_file
        else:
            self.log_file = None

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def get_logger(self, name: str = None) -> logging.Logger:
        """Child logger "driver_ltv.<name>", or the root package logger"""
        if name:
            return logging.getLogger(f'driver_ltv.{name}')
        return self.logger

    def debug(self, message: str, module: str = None):
        self.get_logger(module).debug(message)

    def info(self, message: str, module: str = None):
        self.get_logger(module).info(message)

    def warning(self, message: str, module: str = None):
        self.get_logger(module).warning(message)

    def error(self, message: str, module: str = None):
        self.get_logger(module).error(message)

    def print_summary(self, title: str, data: Dict[str, Any]):
        """Print a titled key/value block to stdout when console output is on"""
        if not self.enable_console:
            return

        print(f"\n{'='*50}")
        print(title)
        print(f"{'='*50}")

        for key, value in data.items():
            if isinstance(value, float):
                print(f"  {key}: {value:,.4f}")
            elif isinstance(value, int) and not isinstance(value, bool) and value >= 1000:
                print(f"  {key}: {value:,}")
            else:
                print(f"  {key}: {value}")

        print(f"{'='*50}")


# Global logger instance
_global_logger: Optional[DLVLogger] = None

def get_logger(name: str = None) -> logging.Logger:
    """Get the global logger instance"""
    return get_global_logger().get_logger(name)

def setup_logger(**kwargs) -> DLVLogger:
    """Setup the global logger with custom configuration"""
    global _global_logger
    _global_logger = DLVLogger(**kwargs)
    return _global_logger

def get_global_logger() -> DLVLogger:
    """Get the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = DLVLogger()
    return _global_logger

# Convenience functions
def debug(message: str, module: str = None):
    get_global_logger().debug(message, module)

def info(message: str, module: str = None):
    get_global_logger().info(message, module)

def warning(message: str, module: str = None):
    get_global_logger().warning(message, module)

def error(message: str, module: str = None):
    get_global_logger().error(message, module)

def print_summary(title: str, data: Dict[str, Any]):
    """Print a titled key/value block to stdout when console output is on"""
    get_global_logger().print_summary(title, data)

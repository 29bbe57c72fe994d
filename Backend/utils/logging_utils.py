import logging
import logging.handlers
import os
from datetime import datetime, timezone
from typing import Optional, Dict, Any
import json


class EmojiSafeFormatter(logging.Formatter):
    """Log formatter that makes emojis and special characters safe for console output."""

    replacements = {
        '✅': '[OK]',
        '❌': '[X]',
        '⚠️': '[WARN]',
        '🔄': '[REFRESH]',
        '🚀': '[ROCKET]',
        '⏰': '[ALARM]',
        '📝': '[NOTE]',
        '🍃': '[DB]',
    }

    def format(self, record):
        msg = super().format(record)
        for emoji, replacement in self.replacements.items():
            msg = msg.replace(emoji, replacement)
        return msg


class EncodingSafeHandler(logging.StreamHandler):
    """Stream handler that handles encoding errors gracefully."""

    def emit(self, record):
        try:
            msg = self.format(record)
            self.stream.write(msg + self.terminator)
            self.flush()
        except UnicodeEncodeError:
            # Fall back to ascii with replacement if Unicode fails
            try:
                msg = self.format(record)
                safe_msg = msg.encode('ascii', 'replace').decode('ascii')
                self.stream.write(safe_msg + self.terminator)
                self.flush()
            except Exception:
                self.handleError(record)
        except Exception:
            self.handleError(record)


def configure_logging(
    level: str = "INFO",
    format_string: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    log_dir: Optional[str] = None,
    log_name: str = "momentum",
) -> logging.Logger:
    """
    Configure the root logger with the emoji-safe console handler and,
    when a log directory is given, a midnight-rotating file handler.
    """
    formatter = EmojiSafeFormatter(format_string)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = EncodingSafeHandler()
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            os.path.join(log_dir, f"{log_name}.log"),
            when='midnight',
            interval=1,
            backupCount=30,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return root_logger


class JSONLogger:
    """Logger that formats messages as JSON."""

    def __init__(
        self,
        name: str,
        log_file: Optional[str] = None,
        level: int = logging.INFO,
        additional_fields: Optional[Dict[str, Any]] = None
    ):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.additional_fields = additional_fields or {}

        if log_file and not self.logger.handlers:
            os.makedirs(os.path.dirname(log_file), exist_ok=True)
            file_handler = logging.handlers.TimedRotatingFileHandler(
                log_file,
                when='midnight',
                interval=1,
                backupCount=30
            )
            file_handler.setFormatter(logging.Formatter('%(message)s'))
            self.logger.addHandler(file_handler)

    def _format_message(
        self,
        level: str,
        message: str,
        **kwargs
    ) -> str:
        """Format log message as JSON."""
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'message': message,
            **self.additional_fields,
            **kwargs
        }
        return json.dumps(log_data, default=str)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(self._format_message('INFO', message, **kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(self._format_message('WARNING', message, **kwargs))


def get_audit_logger(
    name: str,
    log_dir: Optional[str] = None
) -> JSONLogger:
    """
    Get a JSON logger for audit tracking.
    """
    log_file = os.path.join(log_dir, 'audit', f'{name}_audit.log') if log_dir else None
    return JSONLogger(
        f'{name}.audit',
        log_file,
        additional_fields={'service': name}
    )

from __future__ import annotations

import logging
import logging.handlers
from typing import Any, Dict, Optional, Union
from pathlib import Path
from datetime import datetime
import json
import sys


class LogChannel:
    """Laravel-style log channel wrapping a standard library logger."""
    
    def __init__(self, name: str, handler: logging.Handler, level: Union[str, int] = logging.INFO) -> None:
        self.name = name
        self.handler = handler
        self.logger = logging.getLogger(f"larasearch.channels.{name}")
        self.logger.setLevel(_level(level))
        self.logger.addHandler(handler)
        self.logger.propagate = False
    
    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, context)
    
    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, context)
    
    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, context)
    
    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, context)
    
    def _log(self, level: int, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        extra = {'context': context} if context else {}
        self.logger.log(level, message, extra=extra)


class LaravelFormatter(logging.Formatter):
    """Laravel-style log formatter: ``[date] channel.LEVEL: message {context}``."""
    
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        log_line = f"[{timestamp}] {record.name}.{record.levelname}: {record.getMessage()}"
        
        context = getattr(record, 'context', {})
        if context:
            log_line += f" {json.dumps(context, default=str)}"
        
        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"
        
        return log_line


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""
    
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'channel': record.name,
            'message': record.getMessage(),
            'context': getattr(record, 'context', {}),
        }
        
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)
        
        return json.dumps(log_entry, default=str)


def _level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


class LogManager:
    """
    Laravel-style log manager.
    
    Channels are created lazily from the ``channels`` section of the
    logging configuration. Supported drivers are ``single`` (one file),
    ``daily`` (rotating file) and ``stderr``; unknown drivers fall back to
    ``stderr``.
    """
    
    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        self._config = config or {}
        self._channels: Dict[str, LogChannel] = {}
        self._default_channel = self._config.get('default', 'stderr')
    
    def channel(self, name: Optional[str] = None) -> LogChannel:
        """Get a log channel, creating it on first use."""
        if name is None:
            name = self._default_channel
        
        if name not in self._channels:
            self._channels[name] = self._create_channel(name)
        
        return self._channels[name]
    
    def _create_channel(self, name: str) -> LogChannel:
        config = self._config.get('channels', {}).get(name, {})
        driver = config.get('driver', 'stderr')
        level = config.get('level', logging.INFO)
        
        if driver == 'single':
            path = config.get('path', f'storage/logs/{name}.log')
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = logging.FileHandler(path)
        elif driver == 'daily':
            path = config.get('path', f'storage/logs/{name}.log')
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.TimedRotatingFileHandler(
                path, when='midnight', interval=1, backupCount=config.get('days', 14)
            )
        else:
            handler = logging.StreamHandler(sys.stderr)
        
        handler.setFormatter(self._get_formatter(config))
        return LogChannel(name, handler, level)
    
    def _get_formatter(self, config: Dict[str, Any]) -> logging.Formatter:
        if config.get('formatter', 'laravel') == 'json':
            return JsonFormatter()
        return LaravelFormatter()
    
    def route(self, logger_name: str, channel: Optional[str] = None, level: Union[str, int, None] = None) -> LogChannel:
        """
        Send a library logger's records to a channel.
        
        @param logger_name: Name of the logger to route, e.g. ``elastic_transport``
        @param channel: Channel name, the default channel when omitted
        @param level: Level for the routed logger; the channel's level when omitted
        @return: The channel records are routed to
        """
        target = self.channel(channel)
        library_logger = logging.getLogger(logger_name)
        
        if target.handler not in library_logger.handlers:
            library_logger.addHandler(target.handler)
        library_logger.setLevel(_level(level) if level is not None else target.logger.level)
        
        return target
    
    def get_default_driver(self) -> str:
        return self._default_channel
    
    def set_default_driver(self, name: str) -> None:
        self._default_channel = name
    
    def forget_channel(self, name: str) -> None:
        self._channels.pop(name, None)


log_manager_instance: Optional[LogManager] = None


def get_log_manager() -> LogManager:
    """Get the global log manager instance, configured from ``config.logging``."""
    global log_manager_instance
    if log_manager_instance is None:
        from config import logging as logging_config
        
        log_manager_instance = LogManager({
            'default': logging_config.default,
            'channels': logging_config.channels,
        })
    return log_manager_instance


def logger(channel: Optional[str] = None) -> LogChannel:
    """Get a log channel."""
    return get_log_manager().channel(channel)

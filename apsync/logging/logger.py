"""
Hierarchical structured logger for apsync.

Features:
- Logger name auto-detected from the caller (module + class), computed once
- Rotating file handler per top-level component, optional console handler
- Structured field logging: log.info("Slot connected", team=0, slot=3)

Usage:
    from apsync.logging import getLogger

    class ItemsManager:
        def __init__(self):
            self.log = getLogger()  # Auto: 'managers.itemsManager.ItemsManager'

        def reset(self):
            self.log.info("State reset", generation=self.generation)

Property of Uncompromising Sensors LLC.
"""

# Imports
import inspect, logging, logging.handlers, os, socket
from pathlib import Path
from typing import Optional
from datetime import datetime, timezone as tz


# Global state
_hostname = socket.gethostname()
_configured = False
_fileHandlers = {}  # logPath -> handler
_config = {
    'logDir': None,
    'maxBytes': 10_000_000,
    'backupCount': 5,
    'console': True,
    'level': logging.INFO,
    'utc': False,
    'file': True
}

# Record attributes that are not structured fields
_RESERVED = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName',
    'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'hostname', 'asctime', 'taskName'
}


def configureLogging(logDir: Optional[str] = None, maxBytes: int = 10_000_000,
                     backupCount: int = 5, console: bool = True, level: str = 'INFO',
                     utc: bool = False, file: bool = True):
    """
    Configure global logging settings (call once at app startup).

    Args:
        logDir: Directory for log files (default: ../logs)
        maxBytes: Maximum size per log file before rotation (default: 10MB)
        backupCount: Number of rotated files kept per component (default: 5)
        console: Also log to console (default: True)
        level: Minimum log level (default: 'INFO')
        utc: Use UTC timestamps (default: False, uses local time)
        file: Write log files at all (default: True)
    """
    global _configured

    if logDir is None:
        logDir = os.path.abspath(os.path.join(os.getcwd(), os.pardir, "logs"))

    _config.update({'logDir': logDir, 'maxBytes': maxBytes, 'backupCount': backupCount,
                    'console': console, 'level': getattr(logging, level.upper()), 'utc': utc,
                    'file': file})

    if file:
        Path(logDir).mkdir(parents=True, exist_ok=True)
    _configured = True

    # Session context stamps every record routed through our handlers
    from .context import installSessionContextFilter
    installSessionContextFilter()


def _autoDetectName() -> str:
    """Walk the call stack to the first frame outside apsync.logging. Returns e.g. 'managers.itemsManager.ItemsManager'"""

    frame = inspect.currentframe()
    try:
        current = frame
        while current is not None:
            current = current.f_back
            if current is None:
                break

            module = inspect.getmodule(current)
            if module is None:
                continue

            moduleName = module.__name__
            if moduleName.startswith('apsync.logging'):
                continue
            if moduleName.startswith('importlib') or moduleName == '__main__':
                continue

            parts = moduleName.split('.')

            # Package prefix carries no information in log lines
            if parts and parts[0] == 'apsync':
                parts = parts[1:]

            className = None
            if current.f_locals:
                if 'self' in current.f_locals:
                    className = current.f_locals['self'].__class__.__name__
                elif 'cls' in current.f_locals:
                    className = current.f_locals['cls'].__name__

            hierarchy = '.'.join(parts) if parts else 'apsync'
            if className:
                hierarchy = f"{hierarchy}.{className}"
            return hierarchy

        return 'apsync'
    finally:
        del frame


class StructuredFormatter(logging.Formatter):
    """Formats as: timestamp - hostname - logger.name - level - message [field1=value1, field2=value2]"""

    def __init__(self, fmt=None, datefmt=None, utc=False):
        super().__init__(fmt, datefmt)
        self.utc = utc

    def formatTime(self, record, datefmt=None):
        if self.utc:
            ct = datetime.fromtimestamp(record.created, tz=tz.utc)
        else:
            ct = datetime.fromtimestamp(record.created)

        if datefmt:
            return ct.strftime(datefmt)
        return f"{ct.strftime('%Y-%m-%d %H:%M:%S')},{int(record.msecs):03d}"

    def format(self, record):
        record.hostname = _hostname

        structuredFields = [f"{key}={value}" for key, value in record.__dict__.items()
                            if key not in _RESERVED and not key.startswith('_')]

        # Restore msg afterwards so other handlers see the original
        originalMsg = record.msg
        if structuredFields:
            record.msg = f"{originalMsg} [{', '.join(structuredFields)}]"
        try:
            return super().format(record)
        finally:
            record.msg = originalMsg


def getLogger(name: Optional[str] = None, separateFile: bool = False) -> logging.Logger:
    """
    Get or create a logger with automatic hierarchy detection.

    Args:
        name: Logger name (auto-detected from call stack if None)
        separateFile: If True, this logger writes its own file instead of the component file

    Returns:
        logging.Logger whose level methods accept structured fields as keyword arguments
    """
    if not _configured:
        configureLogging()

    if name is None:
        name = _autoDetectName()

    logger = logging.getLogger(name)
    logger.propagate = False

    if not logger.handlers and not hasattr(logger, '_configuredByApsync'):
        logger.setLevel(_config['level'])

        if _config['file']:
            logFilename = f"{name}.log" if separateFile else f"{name.split('.')[0]}.log"
            logPath = str(Path(_config['logDir']) / logFilename)

            if logPath not in _fileHandlers:
                fileHandler = logging.handlers.RotatingFileHandler(
                    logPath,
                    maxBytes=_config['maxBytes'],
                    backupCount=_config['backupCount'],
                    encoding='utf-8'
                )
                fileHandler.setLevel(_config['level'])
                fileHandler.setFormatter(StructuredFormatter(
                    '%(asctime)s - %(hostname)s - %(name)s - %(levelname)s - %(message)s',
                    utc=_config['utc']
                ))
                _fileHandlers[logPath] = fileHandler

            logger.addHandler(_fileHandlers[logPath])

        if _config['console']:
            consoleHandler = logging.StreamHandler()
            consoleHandler.setLevel(_config['level'])
            consoleHandler.setFormatter(StructuredFormatter('%(name)s - %(levelname)s - %(message)s',
                                                            utc=_config['utc']))
            logger.addHandler(consoleHandler)

        from .context import SessionContextFilter
        logger.addFilter(SessionContextFilter())
        logger._configuredByApsync = True

    return _wrapLogger(logger)


def _wrapLogger(logger: logging.Logger) -> logging.Logger:
    """
    Patch level methods so structured fields can be passed as **kwargs.

    log.info("Message", slot=3) instead of log.info("Message", extra={'slot': 3})
    """
    if hasattr(logger, '_isWrapped'):
        return logger

    def _wrap(original):
        def method(msg, *args, **kwargs):
            # exc_info and stack_info are reserved logging parameters, not fields
            excInfo = kwargs.pop('exc_info', False)
            stackInfo = kwargs.pop('stack_info', False)
            if kwargs:
                original(msg, *args, extra=kwargs, exc_info=excInfo, stack_info=stackInfo)
            else:
                original(msg, *args, exc_info=excInfo, stack_info=stackInfo)
        method.__doc__ = original.__doc__
        return method

    logger.debug = _wrap(logger.debug)
    logger.info = _wrap(logger.info)
    logger.warning = _wrap(logger.warning)
    logger.error = _wrap(logger.error)
    logger.critical = _wrap(logger.critical)
    logger._isWrapped = True

    return logger

"""Loading client configuration JSON with built-in fallbacks."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import orjson

from .config_defaults import DEFAULT_CLIENT_CONFIG


@dataclass
class ClientConfig:
    uri: str = DEFAULT_CLIENT_CONFIG['uri']
    snapshotTimeout: Optional[float] = DEFAULT_CLIENT_CONFIG['snapshotTimeout']
    logDir: Optional[str] = None
    logLevel: str = 'INFO'
    console: bool = True
    logFile: bool = True
    configVersion: str = DEFAULT_CLIENT_CONFIG['configVersion']
    usedDefaults: bool = False

    @classmethod
    def fromDict(cls, config: dict, usedDefaults: bool = False) -> 'ClientConfig':
        loggingConfig = config.get('logging', {})
        return cls(uri=config.get('uri', cls.uri),
                   snapshotTimeout=config.get('snapshotTimeout', cls.snapshotTimeout),
                   logDir=loggingConfig.get('logDir'),
                   logLevel=loggingConfig.get('level', 'INFO'),
                   console=loggingConfig.get('console', True),
                   logFile=loggingConfig.get('file', True),
                   configVersion=config.get('configVersion', '1.0'),
                   usedDefaults=usedDefaults)


def _validate_client_config(config: dict) -> None:
    if not isinstance(config, dict):
        raise ValueError('client config is not a JSON object')
    if not isinstance(config.get('uri'), str):
        raise ValueError("Missing 'uri' string")
    timeout = config.get('snapshotTimeout')
    if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
        raise ValueError("'snapshotTimeout' must be a positive number or null")
    if not isinstance(config.get('logging', {}), dict):
        raise ValueError("'logging' must be an object")


def loadClientConfig(path: str | Path, log: Optional[object] = None) -> ClientConfig:
    """Load client config JSON, falling back to built-in defaults on error."""
    cfg_path = Path(path)

    try:
        config = orjson.loads(cfg_path.read_bytes())
        _validate_client_config(config)
        result = ClientConfig.fromDict(config)
        if log:
            log.info('Loaded client config', event='clientConfigLoad', component='ClientConfig',
                     configPath=str(cfg_path), configVersion=result.configVersion)
        return result
    except (OSError, ValueError) as exc:
        if log:
            log.error('Failed to load client config', event='clientConfigLoadError', component='ClientConfig',
                      configPath=str(cfg_path), errorClass=type(exc).__name__, errorMsg=str(exc))

        result = ClientConfig.fromDict(copy.deepcopy(DEFAULT_CLIENT_CONFIG), usedDefaults=True)
        if log:
            log.warning('Loaded client config defaults', event='clientConfigDefaultsLoad',
                        component='ClientConfig', configVersion=result.configVersion)
        return result

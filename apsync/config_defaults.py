"""Built-in client configuration used when no config file is available."""

DEFAULT_CLIENT_CONFIG = {
    "_comment_uri": "Multiworld server address. ws:// or wss://, or loopback:// for an in-process host.",
    "_comment_snapshotTimeout": "Seconds to wait for the hint snapshot after connecting. null waits forever.",
    "configVersion": "1.0",
    "uri": "ws://localhost:38281",
    "snapshotTimeout": 30.0,
    "logging": {
        "logDir": None,
        "level": "INFO",
        "console": True,
        "file": True
    }
}

"""apsync - multiworld client state reconciliation

Keeps a slot's received items and known hints consistent with the server:
    - transport: socket adapters (websocket, loopback)
    - storage: data storage subscribe-and-notify
    - managers: ItemsManager (item stream + hint state)
    - logging: structured hierarchical logging
"""

__version__ = "1.0-beta"
__versionInfo__ = (1, 0, 0, "beta")
__changelog__ = {
    "1.0-beta": "Item stream reconciliation, hint synchronization with generation guard"
}

from .client import Client
from .config import ClientConfig, loadClientConfig
from .events import ItemEvents
from .managers import ItemsManager
from .models import Hint, HintStatus, Item, ItemFlags
from .players import Player, PlayersManager

__all__ = [
    'Client', 'ClientConfig', 'loadClientConfig', 'ItemEvents', 'ItemsManager',
    'Hint', 'HintStatus', 'Item', 'ItemFlags', 'Player', 'PlayersManager'
]

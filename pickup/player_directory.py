import logging
from typing import Any, Dict, List

from .store import SERVER_TIMESTAMP, DocumentStore

logger = logging.getLogger(__name__)

PLAYERS_COLLECTION = 'players'


class PlayerDirectory:
    """Player profile cards. Create and list only."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def create_player(self, fields: Dict[str, Any]) -> str:
        """Store the submitted fields as-is plus a creation timestamp."""
        player = dict(fields)
        player['createdAt'] = SERVER_TIMESTAMP
        player_id = self.store.collection(PLAYERS_COLLECTION).add(player)
        logger.info(f"Created player card {player_id}")
        return player_id

    def list_players(self) -> List[Dict[str, Any]]:
        return self.store.collection(PLAYERS_COLLECTION).list()

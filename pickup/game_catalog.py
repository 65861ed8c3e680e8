from typing import Any, Dict, List

from .game_roster import GAMES_COLLECTION, game_state
from .store import DocumentStore


def _matches_search(game: Dict[str, Any], needle: str) -> bool:
    for field in ('title', 'location'):
        if needle in str(game.get(field) or '').lower():
            return True
    return False


class GameCatalog:
    """Read-only views over the games collection."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def list_games(self, sport: str = None, search: str = None) -> List[Dict[str, Any]]:
        """
        List games newest first, optionally narrowed to one sport and/or a
        case-insensitive search over title and location.
        """
        games = self.store.collection(GAMES_COLLECTION).list(order_by='createdAt', descending=True)

        if sport:
            games = [g for g in games if g.get('sport') == sport]

        if search:
            needle = search.lower()
            games = [g for g in games if _matches_search(g, needle)]

        for game in games:
            game['state'] = game_state(game).value

        return games

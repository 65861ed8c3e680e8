import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from shared.state_machine import GameStateMachine, GameState, TransitionError, open_slots
from .store import SERVER_TIMESTAMP, ArrayUnion, DocumentStore, Increment

logger = logging.getLogger(__name__)

GAMES_COLLECTION = 'games'
DEFAULT_PARTICIPANT_NAME = 'Anonymous'


class JoinResult(str, Enum):
    JOINED = 'joined'
    ALREADY_JOINED = 'already_joined'
    FULL = 'full'
    NOT_FOUND = 'not_found'


class GameValidationError(ValueError):
    pass


@dataclass
class Participant:
    name: str
    phone: str = ''

    @classmethod
    def from_form(cls, name: str = None, phone: str = None) -> 'Participant':
        return cls(
            name=(name or '').strip() or DEFAULT_PARTICIPANT_NAME,
            phone=(phone or '').strip()
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def parse_players_needed(value: Any) -> int:
    try:
        count = int(str(value).strip())
    except (TypeError, ValueError):
        raise GameValidationError(f"Players needed must be a whole number, got {value!r}")
    if count < 0:
        raise GameValidationError("Players needed cannot be negative")
    return count


class GameRoster:
    """
    Owns each game's open-slot counter and roster:
    - Create/fetch/delete game documents
    - Join a game without overbooking it or listing a name twice
    """

    def __init__(self, store: DocumentStore, enforce_ownership: bool = True):
        self.store = store
        self.enforce_ownership = enforce_ownership

    @property
    def games(self):
        return self.store.collection(GAMES_COLLECTION)

    def create_game(
        self,
        title: str,
        sport: str,
        location: str,
        date: str,
        time: str,
        players_needed: Any,
        created_by: str = None,
        creator_email: str = None,
        secret_code: str = None,
        creator_verified: bool = False
    ) -> str:
        """
        Create a game with an empty roster and return its id.

        creator_verified marks the creator claims as coming from a signed-in
        account; only then does the game belong to creator_email.
        """
        game = {
            'title': title,
            'sport': sport,
            'location': location,
            'date': date,
            'time': time,
            'playersNeeded': parse_players_needed(players_needed),
            'roster': [],
            'createdBy': created_by,
            'creatorEmail': creator_email,
            'creatorVerified': bool(creator_verified and creator_email),
            'createdAt': SERVER_TIMESTAMP,
        }
        if secret_code:
            game['secretCode'] = secret_code

        game_id = self.games.add(game)
        logger.info(f"Created game {game_id} ({sport}) needing {game['playersNeeded']} players")
        return game_id

    def get_game(self, game_id: str) -> Optional[Dict[str, Any]]:
        return self.games.get(game_id)

    def attempt_join(self, game_id: str, name: str = None, phone: str = None) -> JoinResult:
        """
        Add a participant to a game's roster and take one open slot.

        A name already on the roster is a no-op, as is a game whose state
        machine refuses the join. The checks and the write happen in one store
        transaction, so concurrent joins cannot push playersNeeded below zero.
        """
        participant = Participant.from_form(name, phone)

        def decide(game):
            if game is None:
                return None, (JoinResult.NOT_FOUND, None)

            for entry in game.get('roster') or []:
                if isinstance(entry, dict) and entry.get('name') == participant.name:
                    return None, (JoinResult.ALREADY_JOINED, None)

            sm = GameStateMachine.for_game(game)
            try:
                new_state = sm.transition('join', {'players_needed': open_slots(game)})
            except TransitionError:
                return None, (JoinResult.FULL, sm.state)

            updates = {
                'playersNeeded': Increment(-1),
                'roster': ArrayUnion([participant.to_dict()]),
            }
            return updates, (JoinResult.JOINED, new_state)

        result, state = self.games.transact(game_id, decide)

        if result == JoinResult.JOINED:
            logger.info(f"{participant.name} joined game {game_id}")
            if state == GameState.FULL:
                logger.info(f"Game {game_id} is now full")
        else:
            logger.debug(f"Join of game {game_id} by {participant.name} skipped: {result.value}")
        return result

    def delete_game(self, game_id: str, requester_email: str = None, code: str = None) -> Tuple[bool, str]:
        """
        Delete a game and its roster. Deleting a missing game succeeds.

        A secret code, if set, must match. A game whose creator was signed in
        can only be deleted by that account while ownership is enforced.
        """
        game = self.get_game(game_id)

        if game is None:
            return True, "Game already deleted"

        secret_code = game.get('secretCode')
        if secret_code and code != secret_code:
            logger.warning(f"Rejected delete of game {game_id}: wrong code")
            return False, "Wrong code"

        owner = game.get('creatorEmail') if game.get('creatorVerified') else None
        if self.enforce_ownership and owner:
            if (requester_email or '').lower() != owner.lower():
                logger.warning(f"Rejected delete of game {game_id} by {requester_email or 'anonymous'}")
                return False, "Only the game's creator can delete it"

        self.games.delete(game_id)
        logger.info(f"Deleted game {game_id}")
        return True, "Game deleted"


def game_state(game: Dict[str, Any]) -> GameState:
    return GameStateMachine.for_game(game).state

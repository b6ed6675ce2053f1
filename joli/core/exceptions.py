"""Domain exceptions for games and join codes.

Services raise these; the HTTP layer turns them into responses using
``status_code`` and ``detail``. ``detail`` is what the caller sees, the
exception message may carry more context for the logs.
"""


class JoliError(Exception):
    """Base exception for all Joli domain errors."""

    status_code = 500
    detail = "Internal server error"

    def __init__(self, detail: str = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class AllocationExhausted(JoliError):
    """Raised when every allocation attempt produced a code already in use."""

    status_code = 503
    detail = "Unable to generate a unique join code, please try again"

    def __init__(self, attempts: int):
        self.attempts = attempts
        Exception.__init__(self, f"Unable to generate unique join code after {attempts} attempts")


class BindConflict(JoliError):
    """Raised when storage rejects a join code because another game holds it."""

    status_code = 409
    detail = "Join code already in use"

    def __init__(self, game_id: str, code: str):
        self.game_id = game_id
        self.code = code
        Exception.__init__(self, f"Join code {code} is already bound to another game (game {game_id})")


class InvalidJoinCodeFormat(JoliError):
    """Raised when a participant-supplied join code fails local validation."""

    status_code = 400
    detail = "Invalid join code format"


class GameNotFound(JoliError):
    """Raised when a game (or an active game behind a join code) does not exist.

    Unknown codes and codes of inactive games share one message so callers
    cannot probe which codes were ever issued.
    """

    status_code = 404
    detail = "Game not found or join code is invalid"


class InvalidStatusTransition(JoliError):
    """Raised when a lifecycle action is not allowed from the game's status."""

    status_code = 400

    def __init__(self, action: str, status: str):
        self.action = action
        self.status = status
        super().__init__(f"Game cannot be {action} from status '{status}'")

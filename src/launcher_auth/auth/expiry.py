"""Token expiry arithmetic and the federated refresh decision."""

import time

from launcher_auth.auth.federated import AuthMode

# Tokens are treated as expired this many seconds before the provider says so
EXPIRY_MARGIN_SECONDS = 10


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def compute_expiry(now: int, expires_in: int) -> int:
    """Absolute expiry (epoch ms) of a token valid for ``expires_in`` seconds."""
    return now + (expires_in - EXPIRY_MARGIN_SECONDS) * 1000


def select_refresh_mode(now: int, game_expires_at: int, ms_expires_at: int) -> AuthMode | None:
    """Pick the cheapest refresh that makes a federated account usable.

    Returns:
        None if the game token is still valid, MC_REFRESH if only the game
        token expired, MS_REFRESH if the Microsoft session expired as well
    """
    if game_expires_at > now:
        return None
    if ms_expires_at > now:
        return AuthMode.MC_REFRESH
    return AuthMode.MS_REFRESH

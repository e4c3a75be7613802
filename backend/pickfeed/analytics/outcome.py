from __future__ import annotations

from pickfeed.models.game import Game


def resolve_winner(game: Game) -> str | None:
    """Winning team id for a final game, or None while undecided.

    A tied final also returns None; no sport-specific tie-break is applied.
    """
    if not game.is_final or not game.has_scores:
        return None
    if game.home_score > game.away_score:
        return game.home_team.id
    if game.away_score > game.home_score:
        return game.away_team.id
    return None

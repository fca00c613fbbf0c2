"""
Round resolution: player's predicted move vs a random computer move.

Precedence is table-driven: BEATS[x] is the move x defeats.
  paper    beats rock
  rock     beats scissors
  scissors beats paper
Identical moves draw; anything else loses.
"""
import random
from typing import Optional, Sequence

from knn_rps.orchestrator.contracts import CLASS_NAMES, Outcome, RoundResult
from knn_rps.orchestrator.errors import InvalidState

BEATS: dict[str, str] = {
    "paper": "rock",
    "rock": "scissors",
    "scissors": "paper",
}

_VERDICT = {
    Outcome.WIN: "YOU WIN",
    Outcome.DRAW: "DRAW",
    Outcome.LOSE: "YOU LOSE",
}


def resolve(player: str, computer: str, beats: dict[str, str] = BEATS) -> Outcome:
    if player not in beats or computer not in beats:
        raise ValueError(f"unknown move: player={player!r} computer={computer!r}")
    if player == computer:
        return Outcome.DRAW
    if beats[player] == computer:
        return Outcome.WIN
    return Outcome.LOSE


def pick_computer_move(rng: random.Random, labels: Sequence[str] = CLASS_NAMES) -> str:
    return rng.choice(list(labels))


def format_message(player: str, computer: str, outcome: Outcome) -> str:
    return f"You played...{player}\n Computer played {computer}\n{_VERDICT[outcome]}"


def play_round(
    player: Optional[str],
    rng: random.Random,
    labels: Sequence[str] = CLASS_NAMES,
    beats: dict[str, str] = BEATS,
) -> RoundResult:
    """Draw the computer's move and resolve it against *player*.

    Raises InvalidState when the player has not been classified yet; a round
    is never resolved against a default move.
    """
    if player is None:
        raise InvalidState("classify first")
    computer = pick_computer_move(rng, labels)
    outcome = resolve(player, computer, beats)
    return RoundResult(
        player=player,
        computer=computer,
        outcome=outcome,
        message=format_message(player, computer, outcome),
    )

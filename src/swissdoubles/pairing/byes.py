"""Bye selection for doubles rounds.

A doubles match seats four players, so ``active % 4`` players sit out each
round. Round 1 picks them at random. Later rounds hand byes to whoever has
had the fewest, and among those to the lowest ranked, so nobody gets a second
bye while an active player still has none.
"""

# Swiss Doubles
# Copyright (C) 2025  Swiss Doubles developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from swissdoubles.constants import (
    BYE_RULE_LOWEST_RANKED,
    BYE_RULE_RANDOM_FIRST_ROUND,
    BYE_RULE_RANDOM_TIE_BREAK,
    BYE_RULE_SHARE_BEFORE_REPEAT,
    PHASE_BYE_SELECTION,
    PLAYERS_PER_MATCH,
)
from swissdoubles.models.match import Match
from swissdoubles.models.tournament import TournamentSettings
from swissdoubles.pairing.decision_log import DecisionLogRecorder, format_diff
from swissdoubles.pairing.standings import Standing
from swissdoubles.utils import generate_id, setup_logger

logger = setup_logger(__name__)


@dataclass
class ByeAssignment:
    """A player chosen to sit out, with the rules that put them there."""

    standing: Standing
    rules: List[str]

    @property
    def reasoning(self) -> str:
        rank = self.standing.rank
        return (
            f"Bye: {'; '.join(self.rules)} "
            f"(rank {rank}, {self.standing.stats.bye_count} previous byes)"
        )


def byes_needed(active_count: int) -> int:
    """Number of players who must sit out so the rest fill whole matches."""
    return active_count % PLAYERS_PER_MATCH


def _bye_order_key(standing: Standing):
    # fewest byes first, then worst ranked first
    return (standing.stats.bye_count, -standing.rank)


def _tie_key(standing: Standing):
    return (standing.stats.bye_count, standing.key)


def select_byes(
    standings: Sequence[Standing],
    round_number: int,
    count: int,
    rng: random.Random,
    recorder: DecisionLogRecorder,
) -> List[ByeAssignment]:
    """Choose ``count`` players to receive a bye.

    Args:
        standings: Active players in standings order, leader first
        round_number: Round being paired
        count: Number of byes to hand out
        rng: Seeded generator for round 1 and tie-breaks
        recorder: Decision log for the round

    Returns:
        Chosen players, in the order they were selected
    """
    if count <= 0:
        recorder.record(
            PHASE_BYE_SELECTION,
            "No byes needed",
            [f"{len(standings)} active players fill whole matches"],
        )
        return []

    if round_number == 1:
        chosen = rng.sample(list(standings), count)
        for standing in chosen:
            recorder.record(
                PHASE_BYE_SELECTION,
                f"Selected {standing.name} for bye",
                [
                    f"Rule: {BYE_RULE_RANDOM_FIRST_ROUND}",
                    f"Randomly selected from {len(standings)} players",
                ],
            )
        logger.debug(f"Round 1 byes: {', '.join(s.name for s in chosen)}")
        return [ByeAssignment(s, [BYE_RULE_RANDOM_FIRST_ROUND]) for s in chosen]

    bye_counts = [s.stats.bye_count for s in standings]
    min_byes, max_byes = min(bye_counts), max(bye_counts)
    candidates = sorted(standings, key=_bye_order_key)

    recorder.record(
        PHASE_BYE_SELECTION,
        "Evaluating bye candidates",
        [
            f"Byes needed: {count}",
            f"Minimum bye count: {min_byes}",
            f"Players eligible (have {min_byes} byes): "
            f"{bye_counts.count(min_byes)}",
            "Searching from bottom of standings upward",
        ],
    )

    chosen = list(candidates[:count])
    random_picks: List[Standing] = []
    if count < len(candidates) and _tie_key(candidates[count - 1]) == _tie_key(
        candidates[count]
    ):
        # The cut falls inside a group of indistinguishable players
        boundary = _tie_key(candidates[count - 1])
        group = [c for c in candidates if _tie_key(c) == boundary]
        fixed = [c for c in chosen if _tie_key(c) != boundary]
        random_picks = rng.sample(group, count - len(fixed))
        chosen = fixed + random_picks
        recorder.record(
            PHASE_BYE_SELECTION,
            f"{len(group)} players tied for the last "
            f"{len(random_picks)} bye slot(s)",
            [
                f"Rule: {BYE_RULE_RANDOM_TIE_BREAK}",
                "Tied on: " + ", ".join(s.name for s in group),
            ],
        )

    assignments = []
    for standing in chosen:
        rules = []
        if min_byes < max_byes:
            rules.append(BYE_RULE_SHARE_BEFORE_REPEAT)
        rules.append(
            BYE_RULE_RANDOM_TIE_BREAK
            if standing in random_picks
            else BYE_RULE_LOWEST_RANKED
        )
        stats = standing.stats
        recorder.record(
            PHASE_BYE_SELECTION,
            f"Selected {standing.name} for bye",
            [
                f"Rank: {standing.rank} of {len(standings)} (lower = worse)",
                f"Record: {stats.record}",
                f"Point diff: {format_diff(stats.point_diff)}",
                f"Previous byes: {stats.bye_count}",
            ]
            + [f"Rule: {rule}" for rule in rules],
        )
        assignments.append(ByeAssignment(standing, rules))

    logger.debug(
        f"Round {round_number} byes: {', '.join(s.name for s in chosen)}"
    )
    return assignments


def create_bye_match(
    player_id: str,
    round_number: int,
    settings: TournamentSettings,
    twenties: int,
    rng: Optional[random.Random] = None,
) -> Match:
    """Build the completed pseudo-match that records a bye.

    Both sides store half of ``points_per_match``; whether the bye reads as
    a win or a tie is decided when standings are computed.
    """
    return Match(
        id=generate_id(rng),
        round_number=round_number,
        team1=(player_id,),
        team2=None,
        score1=settings.bye_score,
        score2=settings.bye_score,
        twenties1=twenties,
        twenties2=0,
        completed=True,
        is_bye=True,
    )

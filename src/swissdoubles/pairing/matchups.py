"""Opponent (match) formation and table assignment."""

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
from typing import List, Optional, Sequence, Tuple

from swissdoubles.constants import PHASE_MATCH_PAIRING
from swissdoubles.models.table import Table
from swissdoubles.models.tournament import MatchupHistory
from swissdoubles.pairing.decision_log import DecisionLogRecorder
from swissdoubles.pairing.search import (
    find_repeat_free_pairing,
    greedy_pairing,
    skipped_over,
)
from swissdoubles.pairing.teams import DoublesTeam
from swissdoubles.utils import setup_logger

logger = setup_logger(__name__)

TeamPairing = Tuple[DoublesTeam, DoublesTeam]


def order_by_strength(teams: Sequence[DoublesTeam]) -> List[DoublesTeam]:
    """Sort teams strongest first; equal teams keep formation order."""
    return sorted(teams, key=lambda t: t.strength, reverse=True)


def form_random_matchups(
    teams: Sequence[DoublesTeam],
    rng: random.Random,
    recorder: DecisionLogRecorder,
) -> List[TeamPairing]:
    """Shuffle the teams and match them up two at a time."""
    shuffled = list(teams)
    rng.shuffle(shuffled)
    pairings = [(shuffled[i], shuffled[i + 1]) for i in range(0, len(shuffled), 2)]
    for team1, team2 in pairings:
        recorder.record(
            PHASE_MATCH_PAIRING,
            f"Match: {team1.display_name} vs {team2.display_name}",
            ["Random matchup (Round 1)"],
        )
    return pairings


def form_swiss_matchups(
    teams: Sequence[DoublesTeam],
    history: MatchupHistory,
    recorder: DecisionLogRecorder,
) -> List[TeamPairing]:
    """Match each team against the closest-strength team it has not played.

    Teams are ranked by combined strength (summed standings points, then
    summed point differential, then summed points for). The walk goes down
    that ranking and each unmatched team meets the next unmatched team that
    is not a repeat opponent. If no repeat-free schedule exists the walk
    falls back to greedy matching that accepts the closest team regardless
    of history for anyone left without a fresh opponent.

    Args:
        teams: Teams in formation order
        history: Team matchups from earlier rounds
        recorder: Decision log for the round

    Returns:
        Team pairings, strongest pairing first
    """
    ranked = order_by_strength(teams)

    def compatible(a: DoublesTeam, b: DoublesTeam) -> bool:
        return not history.have_played(a.key, b.key)

    recorder.record(
        PHASE_MATCH_PAIRING,
        "Pairing teams by combined standings (Swiss)",
        ["Strength order: " + ", ".join(t.describe_strength() for t in ranked)],
    )

    pairs = find_repeat_free_pairing(ranked, compatible)
    if pairs is not None:
        for (team1, team2), skipped in zip(pairs, skipped_over(ranked, pairs)):
            details = [
                team1.describe_strength(),
                team2.describe_strength(),
                "Closest-strength team not yet played",
            ]
            for other in skipped:
                if compatible(team1, other):
                    details.append(
                        f"Passed over {other.display_name} to keep a repeat-free "
                        "pairing possible"
                    )
                else:
                    details.append(
                        f"Skipped {other.display_name} (already played "
                        f"{team1.display_name})"
                    )
            recorder.record(
                PHASE_MATCH_PAIRING,
                f"Match: {team1.display_name} vs {team2.display_name}",
                details,
            )
        return list(pairs)

    logger.info("No repeat-free set of matchups exists, relaxing matchup history")
    pairings = []
    for team1, team2, relaxed in greedy_pairing(ranked, compatible):
        details = [team1.describe_strength(), team2.describe_strength()]
        if relaxed:
            details.append(
                f"Constraint relaxed: every remaining team has already played "
                f"{team1.display_name}"
            )
            details.append("Matched with the closest-strength remaining team")
            decision = f"Repeat matchup: {team1.display_name} vs {team2.display_name}"
        else:
            details.append("Closest-strength team not yet played")
            decision = f"Match: {team1.display_name} vs {team2.display_name}"
        recorder.record(PHASE_MATCH_PAIRING, decision, details)
        pairings.append((team1, team2))
    return pairings


def form_matchups(
    teams: Sequence[DoublesTeam],
    round_number: int,
    history: MatchupHistory,
    rng: random.Random,
    recorder: DecisionLogRecorder,
) -> List[TeamPairing]:
    """Form this round's matchups: random in round 1, Swiss afterwards."""
    if round_number == 1:
        return form_random_matchups(teams, rng, recorder)
    return form_swiss_matchups(teams, history, recorder)


def assign_tables(
    match_count: int,
    tables: Sequence[Table],
    enabled: bool,
    recorder: DecisionLogRecorder,
) -> List[Optional[Table]]:
    """Hand out tables in table order to matches in round order.

    Returns:
        One entry per match; None where no table is assigned
    """
    if not enabled:
        return [None] * match_count

    ordered = sorted(tables, key=lambda t: t.order)
    slots: List[Optional[Table]] = list(ordered[:match_count])
    if len(slots) < match_count:
        missing = match_count - len(slots)
        logger.warning(
            f"Only {len(ordered)} tables for {match_count} matches, "
            f"{missing} match(es) without a table"
        )
        recorder.record(
            PHASE_MATCH_PAIRING,
            f"{missing} match(es) have no table",
            [f"{len(ordered)} tables available for {match_count} matches"],
        )
        slots.extend([None] * missing)
    return slots

"""Partner (team) formation."""

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
from typing import List, Sequence, Tuple

from swissdoubles.constants import PHASE_TEAM_FORMATION
from swissdoubles.models.tournament import PartnerHistory
from swissdoubles.pairing.decision_log import DecisionLogRecorder, format_diff
from swissdoubles.pairing.search import (
    find_repeat_free_pairing,
    greedy_pairing,
    skipped_over,
)
from swissdoubles.pairing.standings import Standing
from swissdoubles.type_hints import PlayerId, StandingsKey, TeamKey
from swissdoubles.utils import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class DoublesTeam:
    """Two players teamed up for one round.

    Attributes
    ----------
    first : Standing
        Higher ranked member (walk order in round 1).
    second : Standing
        The partner.
    """

    first: Standing
    second: Standing

    @property
    def ids(self) -> Tuple[PlayerId, PlayerId]:
        return (self.first.player_id, self.second.player_id)

    @property
    def key(self) -> TeamKey:
        return frozenset(self.ids)

    @property
    def names(self) -> List[str]:
        return [self.first.name, self.second.name]

    @property
    def display_name(self) -> str:
        return " + ".join(self.names)

    @property
    def strength(self) -> StandingsKey:
        """Combined standings key: summed score, point diff and points for."""
        a, b = self.first.key, self.second.key
        return (a[0] + b[0], a[1] + b[1], a[2] + b[2])

    def describe_strength(self) -> str:
        score, diff, _ = self.strength
        return f"{self.display_name} ({score} pts, {format_diff(diff)})"


def _describe(standing: Standing) -> str:
    return f"{standing.name}: Rank {standing.rank}, {standing.stats.record}"


def form_random_teams(
    players: Sequence[Standing],
    rng: random.Random,
    recorder: DecisionLogRecorder,
) -> List[DoublesTeam]:
    """Shuffle the players and team them up two at a time."""
    shuffled = list(players)
    rng.shuffle(shuffled)
    teams = [
        DoublesTeam(shuffled[i], shuffled[i + 1]) for i in range(0, len(shuffled), 2)
    ]
    recorder.record(
        PHASE_TEAM_FORMATION,
        "Forming teams at random",
        [f"{len(players)} players shuffled into {len(teams)} teams"],
    )
    for team in teams:
        recorder.record(
            PHASE_TEAM_FORMATION,
            f"Team formed: {team.display_name}",
            ["Random partner assignment (Round 1)"],
        )
    return teams


def form_swiss_teams(
    players: Sequence[Standing],
    history: PartnerHistory,
    recorder: DecisionLogRecorder,
) -> List[DoublesTeam]:
    """Team each player with the nearest-ranked player not yet partnered.

    Players are walked in standings order. When no repeat-free set of teams
    exists the walk falls back to a plain greedy pass that relaxes the rule
    for whoever is left without a new partner, and logs each relaxation.

    Args:
        players: Non-bye players in standings order
        history: Partnerships from earlier rounds
        recorder: Decision log for the round

    Returns:
        Teams in formation order
    """

    def compatible(a: Standing, b: Standing) -> bool:
        return not history.have_partnered(a.player_id, b.player_id)

    recorder.record(
        PHASE_TEAM_FORMATION,
        "Forming teams based on standings (Swiss)",
        [
            "Pairing each player with the nearest-ranked available player",
            "Avoiding repeat partners when possible",
        ],
    )

    pairs = find_repeat_free_pairing(players, compatible)
    if pairs is not None:
        teams = []
        for (first, second), skipped in zip(pairs, skipped_over(players, pairs)):
            details = [_describe(first), _describe(second), "First time as partners"]
            for other in skipped:
                if compatible(first, other):
                    details.append(
                        f"Passed over {other.name} to keep a repeat-free "
                        "pairing possible"
                    )
                else:
                    details.append(
                        f"Skipped {other.name} (already partnered {first.name})"
                    )
            team = DoublesTeam(first, second)
            recorder.record(
                PHASE_TEAM_FORMATION, f"Team formed: {team.display_name}", details
            )
            teams.append(team)
        return teams

    logger.info("No repeat-free set of teams exists, relaxing partner history")
    teams = []
    for first, second, relaxed in greedy_pairing(players, compatible):
        team = DoublesTeam(first, second)
        details = [_describe(first), _describe(second)]
        if relaxed:
            details.append(
                f"Constraint relaxed: every available player has already "
                f"partnered {first.name}"
            )
            details.append(
                f"Paired with nearest-ranked available player {second.name}"
            )
            decision = f"Repeat partners: {team.display_name}"
        else:
            details.append("First time as partners")
            decision = f"Team formed: {team.display_name}"
        recorder.record(PHASE_TEAM_FORMATION, decision, details)
        teams.append(team)
    return teams


def form_teams(
    players: Sequence[Standing],
    round_number: int,
    history: PartnerHistory,
    rng: random.Random,
    recorder: DecisionLogRecorder,
) -> List[DoublesTeam]:
    """Form this round's teams: random in round 1, Swiss afterwards."""
    if round_number == 1:
        return form_random_teams(players, rng, recorder)
    return form_swiss_teams(players, history, recorder)

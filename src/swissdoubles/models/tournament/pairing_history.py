"""Partner and opponent history for doubles pairing."""

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

from dataclasses import dataclass, field
from typing import Iterable, Set

from swissdoubles.models.match import Match
from swissdoubles.type_hints import PlayerId, TeamKey


@dataclass
class PartnerHistory:
    """
    Tracks which players have already been teamed together.

    Attributes
    ----------
    partnerships : set of frozenset of str
        Player id pairs that have shared a team.
    """

    partnerships: Set[frozenset] = field(default_factory=set)

    def add_partnership(self, player1_id: PlayerId, player2_id: PlayerId) -> None:
        """Record that two players have been teamed."""
        self.partnerships.add(frozenset({player1_id, player2_id}))

    def have_partnered(self, player1_id: PlayerId, player2_id: PlayerId) -> bool:
        """Check if two players have previously been teamed."""
        return frozenset({player1_id, player2_id}) in self.partnerships

    @classmethod
    def from_matches(cls, matches: Iterable[Match]) -> "PartnerHistory":
        """Build partner history from regular matches."""
        history = cls()
        for match in matches:
            if match.is_bye:
                continue
            history.add_partnership(*match.team1)
            history.add_partnership(*match.team2)
        return history


@dataclass
class MatchupHistory:
    """
    Tracks which teams have already played each other.

    Teams are identified by the frozenset of their two player ids, so the
    same two players facing the same two opponents counts as a repeat no
    matter who was listed first.

    Attributes
    ----------
    matchups : set of frozenset of TeamKey
        Team pairs that have met.
    """

    matchups: Set[frozenset] = field(default_factory=set)

    def add_matchup(self, team_a: TeamKey, team_b: TeamKey) -> None:
        """Record that two teams have played."""
        self.matchups.add(frozenset({frozenset(team_a), frozenset(team_b)}))

    def have_played(self, team_a: TeamKey, team_b: TeamKey) -> bool:
        """Check if two teams have previously played each other."""
        return frozenset({frozenset(team_a), frozenset(team_b)}) in self.matchups

    @classmethod
    def from_matches(cls, matches: Iterable[Match]) -> "MatchupHistory":
        """Build matchup history from regular matches."""
        history = cls()
        for match in matches:
            if match.is_bye:
                continue
            history.add_matchup(match.team1_key, match.team2_key)
        return history

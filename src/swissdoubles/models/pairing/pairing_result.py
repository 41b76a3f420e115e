"""PairingResult data class."""

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

from dataclasses import dataclass
from typing import List

from swissdoubles.models.match import Match
from swissdoubles.models.pairing.round_log import RoundLog
from swissdoubles.type_hints import PlayerId


@dataclass(slots=True)
class PairingResult:
    """Result of a pairing computation for a single round."""

    matches: List[Match]
    log: RoundLog

    @property
    def regular_matches(self) -> List[Match]:
        return [m for m in self.matches if not m.is_bye]

    @property
    def bye_player_ids(self) -> List[PlayerId]:
        return [m.team1[0] for m in self.matches if m.is_bye]


#  LocalWords:  PairingResult

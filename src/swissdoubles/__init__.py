"""Swiss Doubles: round pairing for doubles Swiss tournaments."""

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

from swissdoubles.models import Match, Player, Table
from swissdoubles.models.pairing import PairingResult, RoundLog
from swissdoubles.models.tournament import TournamentSettings
from swissdoubles.models.tournament.tournament import Tournament
from swissdoubles.pairing import calculate_standings, generate_round_pairings

__version__ = "0.1.0"

__all__ = [
    "Match",
    "PairingResult",
    "Player",
    "RoundLog",
    "Table",
    "Tournament",
    "TournamentSettings",
    "calculate_standings",
    "generate_round_pairings",
]

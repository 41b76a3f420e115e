"""Tournament level data models.

The :class:`~swissdoubles.models.tournament.tournament.Tournament` aggregate
lives in its own module and is imported from there, since it pulls in the
round controllers which themselves depend on the models below.
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

from swissdoubles.models.tournament.pairing_history import (
    MatchupHistory,
    PartnerHistory,
)
from swissdoubles.models.tournament.tournament_config import TournamentSettings

__all__ = ["MatchupHistory", "PartnerHistory", "TournamentSettings"]

"""Result recording for tournaments."""

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

import dataclasses
from typing import Any

from swissdoubles.exceptions import DuplicateResultException, InvalidResultException
from swissdoubles.models.match import Match
from swissdoubles.models.tournament import TournamentSettings
from swissdoubles.utils import setup_logger

logger = setup_logger(__name__)


def _is_count(value: Any) -> bool:
    # bool is an int subclass but never a valid score
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ResultRecorder:
    """Handles validating and recording match results.

    This class is responsible for:
    - Checking that scores are whole, non-negative and add up to the
      configured points per match
    - Refusing scores for byes, which are settled when they are created
    - Preventing a result from being entered twice by accident

    Recording never mutates the match it is given; it returns a new Match
    for the caller to store.
    """

    def __init__(self, settings: TournamentSettings):
        self.settings = settings

    def validate(
        self, match: Match, score1: Any, score2: Any, twenties1: Any, twenties2: Any
    ) -> None:
        """Raise InvalidResultException if the result cannot be stored."""
        if match.is_bye:
            raise InvalidResultException(
                f"Match {match.id} is a bye and takes no score"
            )
        if not _is_count(score1) or not _is_count(score2):
            raise InvalidResultException(
                f"Scores must be non-negative whole numbers, got {score1!r} "
                f"and {score2!r}"
            )
        if score1 + score2 != self.settings.points_per_match:
            raise InvalidResultException(
                f"Scores must add up to {self.settings.points_per_match}, "
                f"got {score1} + {score2}"
            )
        if not _is_count(twenties1) or not _is_count(twenties2):
            raise InvalidResultException(
                f"Twenties must be non-negative whole numbers, got {twenties1!r} "
                f"and {twenties2!r}"
            )

    def record(
        self,
        match: Match,
        score1: int,
        score2: int,
        twenties1: int = 0,
        twenties2: int = 0,
        overwrite: bool = False,
    ) -> Match:
        """Validate a result and return the completed match.

        Args:
            match: Match being scored
            score1: Points for team1
            score2: Points for team2
            twenties1: Twenties for team1
            twenties2: Twenties for team2
            overwrite: Allow replacing an existing result (score edits)

        Returns:
            Copy of ``match`` holding the result, marked completed

        Raises:
            InvalidResultException: The result fails validation
            DuplicateResultException: The match already has a result and
                ``overwrite`` is False
        """
        if match.completed and not overwrite and not match.is_bye:
            raise DuplicateResultException(
                f"Match {match.id} already has a result ({match.score1}-{match.score2})"
            )
        self.validate(match, score1, score2, twenties1, twenties2)

        if match.completed:
            logger.info(
                f"Edited match {match.id}: {match.score1}-{match.score2} -> "
                f"{score1}-{score2}"
            )
        else:
            logger.debug(f"Recorded match {match.id}: {score1}-{score2}")

        return dataclasses.replace(
            match,
            score1=score1,
            score2=score2,
            twenties1=twenties1,
            twenties2=twenties2,
            completed=True,
        )

    def clear(self, match: Match) -> Match:
        """Return ``match`` with its result removed, pending play again."""
        if match.is_bye:
            raise InvalidResultException(
                f"Match {match.id} is a bye and takes no score"
            )
        logger.info(f"Cleared result of match {match.id}")
        return dataclasses.replace(
            match, score1=None, score2=None, twenties1=0, twenties2=0, completed=False
        )

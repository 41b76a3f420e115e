"""Random Tournament Generator (RTG) - Internal testing system for doubles pairings.

This module plays complete seeded tournaments through the Tournament aggregate,
with simulated scores, late entrants and withdrawals, so the pairing engine can
be checked against the PairingValidator over many realistic events.
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

import json
import math
import random
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

from swissdoubles.constants import DEFAULT_POINTS_PER_MATCH, MIN_PLAYERS
from swissdoubles.models.tournament import TournamentSettings
from swissdoubles.models.tournament.tournament import Tournament
from swissdoubles.pairing.doubles_swiss import SEED_RANGE
from swissdoubles.utils import setup_logger
from swissdoubles.validation import PairingValidator, ValidationReport

logger = setup_logger(__name__)

# Rounds of a generated event are stamped this far apart
ROUND_INTERVAL = timedelta(minutes=45)
EVENT_START = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)


class SkillDistribution(Enum):
    """Hidden skill patterns for simulated fields."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    CLUB = "club"


class ResultPattern(Enum):
    """Result generation patterns for tournaments."""

    REALISTIC = "realistic"
    BALANCED = "balanced"
    RANDOM = "random"


@dataclass
class RTGConfig:
    """Configuration for Random Tournament Generator."""

    num_players: int
    num_rounds: int
    skill_distribution: SkillDistribution = SkillDistribution.NORMAL
    result_pattern: ResultPattern = ResultPattern.REALISTIC
    seed: Optional[int] = None
    points_per_match: int = DEFAULT_POINTS_PER_MATCH
    tie_percentage: int = 10
    twenty_rate: float = 0.3
    table_count: int = 0
    late_entrants: int = 0
    withdrawals: int = 0
    validate: bool = True


@dataclass
class SimulatedPlayer:
    """A generated player and the hidden skill that drives their results."""

    player_id: str
    name: str
    skill: float


@dataclass
class RosterSchedule:
    """Players joining or leaving before given rounds."""

    entrants: Counter = field(default_factory=Counter)
    withdrawals: Counter = field(default_factory=Counter)


class PlayerFactory:
    """Factory for creating simulated players."""

    def __init__(self, config: RTGConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )
        self.created = 0

    def create_players(self, count: Optional[int] = None) -> List[SimulatedPlayer]:
        """Create ``count`` players, numbering on from any created before."""
        count = self.config.num_players if count is None else count
        players = []
        for _ in range(count):
            self.created += 1
            skill = self._generate_skill()
            players.append(
                SimulatedPlayer(
                    player_id=f"P{self.created:03d}",
                    name=self._generate_name(self.created, skill),
                    skill=skill,
                )
            )
        logger.info(
            "Created %s players with %s distribution",
            len(players),
            self.config.skill_distribution.value,
        )
        return players

    def _generate_skill(self) -> float:
        if self.config.skill_distribution == SkillDistribution.UNIFORM:
            return self.random.uniform(0.0, 100.0)
        if self.config.skill_distribution == SkillDistribution.CLUB:
            base = self.random.choice([30.0, 50.0, 70.0])
            return base + self.random.uniform(-10.0, 10.0)
        return max(0.0, min(100.0, self.random.gauss(50.0, 15.0)))

    def _generate_name(self, number: int, skill: float) -> str:
        if skill < 35:
            prefix = "Rookie"
        elif skill < 55:
            prefix = "Club"
        elif skill < 75:
            prefix = "Strong"
        else:
            prefix = "Expert"
        return f"{prefix}-{number:03d}"


class ResultSimulator:
    """Simulates crokinole-style doubles results.

    A match is played as ``points_per_match // 2`` games worth two points
    each, split one-one on a tied game; an odd leftover point goes to the
    winner of a final coin flip weighted like the games. The two scores
    therefore always add up to ``points_per_match``.
    """

    def __init__(self, config: RTGConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )

    def simulate_match(
        self, team1_skill: float, team2_skill: float
    ) -> Tuple[int, int, int, int]:
        """Return team1 score, team2 score, team1 twenties, team2 twenties."""
        win_probability = self._win_probability(team1_skill, team2_skill)
        tie_probability = self.config.tie_percentage / 100.0
        games = self.config.points_per_match // 2

        score1 = 0
        for _ in range(games):
            roll = self.random.random()
            if roll < tie_probability:
                score1 += 1
            elif roll < tie_probability + (1 - tie_probability) * win_probability:
                score1 += 2
        if self.config.points_per_match % 2:
            score1 += int(self.random.random() < win_probability)
        score2 = self.config.points_per_match - score1

        twenties1 = self._twenties(team1_skill, games)
        twenties2 = self._twenties(team2_skill, games)
        return score1, score2, twenties1, twenties2

    def _win_probability(self, team1_skill: float, team2_skill: float) -> float:
        if self.config.result_pattern == ResultPattern.RANDOM:
            return 0.5
        if self.config.result_pattern == ResultPattern.BALANCED:
            diff = team1_skill - team2_skill
            return max(0.2, min(0.8, 0.5 + diff / 200))
        # logistic curve: a 20 point skill gap is roughly a 73% favourite
        return 1.0 / (1.0 + math.exp(-(team1_skill - team2_skill) / 20.0))

    def _twenties(self, team_skill: float, games: int) -> int:
        rate = self.config.twenty_rate * (0.5 + team_skill / 100.0)
        return sum(1 for _ in range(games * 2) if self.random.random() < rate)


class RandomTournamentGenerator:
    """Main tournament generator orchestrating players, rounds and results."""

    def __init__(self, config: RTGConfig):
        self.config = config
        self.player_factory = PlayerFactory(config)
        self.result_simulator = ResultSimulator(config)
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )
        self.players: Dict[str, SimulatedPlayer] = {}
        self.tournament: Optional[Tournament] = None

    def generate_complete_tournament(self) -> Dict:
        """Play a complete tournament and return its data.

        Returns:
            Dict with the config, the simulated players, the Tournament, one
            summary per round and, when enabled, the validation report
        """
        logger.info(
            "Generating tournament: %s players, %s rounds",
            self.config.num_players,
            self.config.num_rounds,
        )
        tournament = Tournament(
            name=f"RTG {self.config.seed}",
            total_rounds=self.config.num_rounds,
            settings=TournamentSettings(
                points_per_match=self.config.points_per_match,
                table_assignment=self.config.table_count > 0,
            ),
        )
        self.tournament = tournament
        for number in range(1, self.config.table_count + 1):
            tournament.add_table(f"Table {number}", table_id=f"T{number:02d}")
        self._register(self.player_factory.create_players())
        schedule = self._build_roster_schedule()

        tournament_data = {
            "config": self.config,
            "players": self.players,
            "tournament": tournament,
            "rounds": [],
        }

        for round_number in range(1, tournament.total_rounds + 1):
            self._apply_roster_changes(round_number, schedule)
            round_data = self._simulate_round(round_number)
            tournament_data["rounds"].append(round_data)
        tournament.complete()

        if self.config.validate:
            report = PairingValidator().validate_tournament(tournament)
            tournament_data["validation_report"] = {
                "summary": report.summary,
                "compliance_percentage": report.compliance_percentage,
                "warnings": summarize_warnings(report),
                "absolute_violations": [v.criterion for v in report.violations],
            }

        logger.info("Tournament generation complete")
        return tournament_data

    def _register(self, players: List[SimulatedPlayer]) -> None:
        for player in players:
            self.tournament.add_player(player.name, player_id=player.player_id)
            self.players[player.player_id] = player

    def _simulate_round(self, round_number: int) -> Dict:
        """Pair one round through the aggregate and score every match."""
        tournament = self.tournament
        seed = self.random.randrange(SEED_RANGE)
        generated_at = EVENT_START + ROUND_INTERVAL * (round_number - 1)
        if round_number == 1:
            matches = tournament.start(seed=seed, generated_at=generated_at)
        else:
            matches = tournament.generate_next_round(
                seed=seed, generated_at=generated_at
            )

        results = []
        for match in matches:
            if match.is_bye:
                continue
            score1, score2, twenties1, twenties2 = self.result_simulator.simulate_match(
                self._team_skill(match.team1), self._team_skill(match.team2)
            )
            tournament.submit_score(match.id, score1, score2, twenties1, twenties2)
            results.append((match.id, score1, score2, twenties1, twenties2))

        return {
            "round_number": round_number,
            "seed": seed,
            "matches": [m for m in matches if m.is_regular],
            "bye_player_ids": [m.team1[0] for m in matches if m.is_bye],
            "results": results,
        }

    def _team_skill(self, team: Tuple[str, ...]) -> float:
        return sum(self.players[pid].skill for pid in team) / len(team)

    def _build_roster_schedule(self) -> RosterSchedule:
        schedule = RosterSchedule()
        later_rounds = list(range(2, self.config.num_rounds + 1))
        if not later_rounds:
            return schedule
        for _ in range(self.config.late_entrants):
            schedule.entrants[self.random.choice(later_rounds)] += 1
        for _ in range(self.config.withdrawals):
            schedule.withdrawals[self.random.choice(later_rounds)] += 1
        return schedule

    def _apply_roster_changes(
        self, round_number: int, schedule: RosterSchedule
    ) -> None:
        entrants = schedule.entrants[round_number]
        if entrants:
            self._register(self.player_factory.create_players(entrants))
            logger.info("Round %s: %s late entrant(s)", round_number, entrants)

        active = sorted(
            p.id for p in self.tournament.get_player_list(active_only=True)
        )
        # never drop below one full match
        leaving = min(schedule.withdrawals[round_number], len(active) - MIN_PLAYERS)
        for player_id in self.random.sample(active, max(0, leaving)):
            self.tournament.set_player_active(player_id, False)
        if leaving > 0:
            logger.info("Round %s: %s withdrawal(s)", round_number, leaving)

    def export_json_format(self, tournament_data: Dict) -> str:
        """Serialize generated data as JSON readable by the validate command."""
        export_data = {
            "rtg_config": {
                "num_players": self.config.num_players,
                "num_rounds": self.config.num_rounds,
                "skill_distribution": self.config.skill_distribution.value,
                "result_pattern": self.config.result_pattern.value,
                "seed": self.config.seed,
                "points_per_match": self.config.points_per_match,
                "tie_percentage": self.config.tie_percentage,
                "table_count": self.config.table_count,
                "late_entrants": self.config.late_entrants,
                "withdrawals": self.config.withdrawals,
            },
            "skills": {
                pid: round(player.skill, 2) for pid, player in self.players.items()
            },
            "tournament": tournament_data["tournament"].to_dict(),
        }
        if "validation_report" in tournament_data:
            export_data["validation_report"] = tournament_data["validation_report"]
        return json.dumps(export_data, indent=2)


def load_tournament(data: Dict) -> Tournament:
    """Rebuild a Tournament from exported JSON, wrapped or bare."""
    return Tournament.from_dict(data.get("tournament", data))


def summarize_warnings(report: ValidationReport) -> Dict[str, int]:
    """Summarize quality warnings by criterion."""
    return {
        warning.criterion: len(warning.details.get("problems", []))
        for warning in report.quality_warnings
    }


def create_rtg_generator(config: RTGConfig) -> RandomTournamentGenerator:
    """Create RTG tournament generator with given configuration."""
    return RandomTournamentGenerator(config)


def create_small_tournament(
    num_players: int = 8, seed: Optional[int] = None
) -> RandomTournamentGenerator:
    """Create small tournament for testing."""
    config = RTGConfig(num_players=num_players, num_rounds=3, seed=seed)
    return create_rtg_generator(config)


def create_normal_tournament(
    num_players: int = 24, seed: Optional[int] = None
) -> RandomTournamentGenerator:
    """Create standard tournament for development testing."""
    config = RTGConfig(
        num_players=num_players,
        num_rounds=min(7, max(3, num_players // 4)),
        seed=seed,
        table_count=num_players // 4,
    )
    return create_rtg_generator(config)


def create_drop_in_tournament(
    num_players: int = 18, seed: Optional[int] = None
) -> RandomTournamentGenerator:
    """Create a tournament whose field changes between rounds."""
    config = RTGConfig(
        num_players=num_players,
        num_rounds=5,
        seed=seed,
        late_entrants=3,
        withdrawals=2,
    )
    return create_rtg_generator(config)

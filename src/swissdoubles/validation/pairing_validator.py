"""Pairing validator for doubles Swiss tournaments.

Checks a finished or in-progress tournament against the rules every round
must satisfy. Absolute criteria are hard guarantees of the pairing engine:

- A1: each round seats every player of that round exactly once
- A2: each completed regular match adds up to the points per match
- A3: byes are completed, evenly split, and fewer than four per round
- A4: nobody gets a second bye while a player in the same round has none
- A5: each round's log lists the same pairings as its matches

Quality criteria are preferences that can be relaxed in crowded fields:

- Q1: no two players teamed twice
- Q2: no two teams meet twice
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


from collections import Counter, defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from swissdoubles.constants import PLAYERS_PER_MATCH
from swissdoubles.models.match import Match
from swissdoubles.models.pairing import RoundLog
from swissdoubles.models.tournament import TournamentSettings
from swissdoubles.utils import setup_logger

logger = setup_logger(__name__)


class CriterionStatus(Enum):
    """Status of criterion validation."""

    COMPLIANT = "COMPLIANT"
    VIOLATION = "VIOLATION"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class ViolationType(Enum):
    """Types of criterion violations."""

    ABSOLUTE = "ABSOLUTE"  # A1-A5: must not violate
    QUALITY = "QUALITY"  # Q1-Q2: should minimize


@dataclass
class CriterionResult:
    """Result of validating a single criterion."""

    criterion: str
    status: CriterionStatus
    violation_type: Optional[ViolationType] = None
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def criterion_id(self) -> str:
        """Extract criterion ID from criterion string."""
        return self.criterion.split(":")[0].strip()

    @property
    def is_violation(self) -> bool:
        return self.status == CriterionStatus.VIOLATION


@dataclass
class ValidationReport:
    """Complete validation report for a tournament."""

    total_criteria: int
    compliant_count: int
    violations: List[CriterionResult]
    overall_status: CriterionStatus
    summary: str
    quality_warnings: List[CriterionResult] = field(default_factory=list)
    criteria_results: List[CriterionResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.overall_status != CriterionStatus.VIOLATION

    @property
    def compliance_percentage(self) -> float:
        """Calculate compliance percentage."""
        if self.total_criteria == 0:
            return 100.0
        return (self.compliant_count / self.total_criteria) * 100.0


def _result(
    criterion: str,
    violation_type: ViolationType,
    problems: Sequence[str],
    ok_message: str,
) -> CriterionResult:
    if not problems:
        return CriterionResult(
            criterion=criterion,
            status=CriterionStatus.COMPLIANT,
            description=ok_message,
        )
    return CriterionResult(
        criterion=criterion,
        status=CriterionStatus.VIOLATION,
        violation_type=violation_type,
        description=f"{len(problems)} problem(s): {problems[0]}",
        details={"problems": list(problems)},
    )


def _by_round(matches: Sequence[Match]) -> Dict[int, List[Match]]:
    rounds: Dict[int, List[Match]] = defaultdict(list)
    for match in matches:
        rounds[match.round_number].append(match)
    return dict(sorted(rounds.items()))


class PairingValidator:
    """Validates tournament matches against the pairing invariants."""

    def __init__(self, settings: Optional[TournamentSettings] = None):
        self.settings = settings or TournamentSettings()

    # ========== Absolute Criteria ==========

    def check_a1_partition(self, matches: Sequence[Match]) -> CriterionResult:
        problems = []
        for round_number, in_round in _by_round(matches).items():
            seats = Counter(pid for m in in_round for pid in m.player_ids)
            repeated = sorted(pid for pid, n in seats.items() if n > 1)
            if repeated:
                problems.append(
                    f"Round {round_number}: seated more than once: "
                    f"{', '.join(repeated)}"
                )
        return _result(
            "A1: Partition",
            ViolationType.ABSOLUTE,
            problems,
            "Every player is seated exactly once per round",
        )

    def check_a2_score_sum(self, matches: Sequence[Match]) -> CriterionResult:
        target = self.settings.points_per_match
        problems = [
            f"Round {m.round_number} match {m.id}: {m.score1} + {m.score2} != {target}"
            for m in matches
            if m.is_regular
            and m.completed
            and ((m.score1 or 0) + (m.score2 or 0) != target)
        ]
        return _result(
            "A2: Score sum",
            ViolationType.ABSOLUTE,
            problems,
            f"All completed matches add up to {target}",
        )

    def check_a3_bye_records(self, matches: Sequence[Match]) -> CriterionResult:
        problems = []
        half = self.settings.bye_score
        for round_number, in_round in _by_round(matches).items():
            byes = [m for m in in_round if m.is_bye]
            if len(byes) >= PLAYERS_PER_MATCH:
                problems.append(
                    f"Round {round_number}: {len(byes)} byes, enough for another match"
                )
            for bye in byes:
                if not bye.completed or bye.score1 != half or bye.score2 != half:
                    problems.append(
                        f"Round {round_number}: bye {bye.id} is not a completed "
                        f"{half}-{half} split"
                    )
        return _result(
            "A3: Bye records",
            ViolationType.ABSOLUTE,
            problems,
            "Bye counts and bye scores are correct",
        )

    def check_a4_bye_equity(self, matches: Sequence[Match]) -> CriterionResult:
        problems = []
        byes_so_far: Counter = Counter()
        for round_number, in_round in _by_round(matches).items():
            players = [pid for m in in_round for pid in m.player_ids]
            receivers = [m.team1[0] for m in in_round if m.is_bye]
            if round_number > 1:
                # players still without a bye after this round
                without = [
                    pid
                    for pid in players
                    if byes_so_far[pid] == 0 and pid not in receivers
                ]
                for pid in receivers:
                    if byes_so_far[pid] > 0 and without:
                        problems.append(
                            f"Round {round_number}: {pid} got bye number "
                            f"{byes_so_far[pid] + 1} while {len(without)} "
                            "player(s) had none"
                        )
            byes_so_far.update(receivers)
        return _result(
            "A4: Bye equity",
            ViolationType.ABSOLUTE,
            problems,
            "No second bye while a player had none",
        )

    def check_a5_log_consistency(
        self, matches: Sequence[Match], logs: Mapping[int, RoundLog]
    ) -> CriterionResult:
        problems = []
        for round_number, in_round in _by_round(matches).items():
            log = logs.get(round_number)
            if log is None:
                problems.append(f"Round {round_number}: no pairing log")
                continue
            if len(log.final_pairings) != len(in_round):
                problems.append(
                    f"Round {round_number}: log lists {len(log.final_pairings)} "
                    f"pairings for {len(in_round)} matches"
                )
            logged_byes = sum(1 for p in log.final_pairings if p.is_bye)
            actual_byes = sum(1 for m in in_round if m.is_bye)
            if logged_byes != actual_byes:
                problems.append(
                    f"Round {round_number}: log lists {logged_byes} bye(s), "
                    f"round has {actual_byes}"
                )
        stale = sorted(set(logs) - {m.round_number for m in matches})
        problems += [f"Round {n}: log without matches" for n in stale]
        return _result(
            "A5: Log consistency",
            ViolationType.ABSOLUTE,
            problems,
            "Every round log matches its round",
        )

    # ========== Quality Criteria ==========

    def check_q1_repeat_partners(self, matches: Sequence[Match]) -> CriterionResult:
        teams = Counter(
            key for m in matches if m.is_regular for key in (m.team1_key, m.team2_key)
        )
        problems = [
            f"{' & '.join(sorted(team))} teamed {n} times"
            for team, n in sorted(teams.items(), key=lambda kv: sorted(kv[0]))
            if n > 1
        ]
        return _result(
            "Q1: Repeat partners",
            ViolationType.QUALITY,
            problems,
            "No players teamed twice",
        )

    def check_q2_repeat_matchups(self, matches: Sequence[Match]) -> CriterionResult:
        meetings = Counter(
            frozenset({m.team1_key, m.team2_key}) for m in matches if m.is_regular
        )
        problems = [
            " vs ".join(sorted(" & ".join(sorted(team)) for team in pair))
            + f" met {n} times"
            for pair, n in meetings.items()
            if n > 1
        ]
        return _result(
            "Q2: Repeat matchups",
            ViolationType.QUALITY,
            sorted(problems),
            "No teams met twice",
        )

    # ========== Reports ==========

    def validate(
        self,
        matches: Sequence[Match],
        logs: Optional[Mapping[int, RoundLog]] = None,
    ) -> ValidationReport:
        """Validate a full match history.

        Args:
            matches: Every match of the tournament
            logs: Round logs keyed by round number; the log check is skipped
                when omitted

        Returns:
            ValidationReport with every criterion's result
        """
        rounds = len(_by_round(matches))
        logger.info(f"Starting pairing validation for {rounds} round(s)")
        if not matches:
            return ValidationReport(
                total_criteria=0,
                compliant_count=0,
                violations=[],
                overall_status=CriterionStatus.NOT_APPLICABLE,
                summary="No matches to validate",
            )

        all_results = [
            self.check_a1_partition(matches),
            self.check_a2_score_sum(matches),
            self.check_a3_bye_records(matches),
            self.check_a4_bye_equity(matches),
        ]
        if logs is not None:
            all_results.append(self.check_a5_log_consistency(matches, logs))
        all_results += [
            self.check_q1_repeat_partners(matches),
            self.check_q2_repeat_matchups(matches),
        ]

        compliant_count = sum(
            1 for r in all_results if r.status == CriterionStatus.COMPLIANT
        )
        absolute_violations = [
            r
            for r in all_results
            if r.is_violation and r.violation_type == ViolationType.ABSOLUTE
        ]
        quality_warnings = [
            r
            for r in all_results
            if r.is_violation and r.violation_type == ViolationType.QUALITY
        ]
        overall_status = (
            CriterionStatus.VIOLATION
            if absolute_violations
            else CriterionStatus.COMPLIANT
        )

        if overall_status == CriterionStatus.COMPLIANT:
            summary = (
                f"Absolute criteria satisfied over {rounds} round(s); "
                f"{len(quality_warnings)} quality criteria flagged"
            )
        else:
            summary = (
                f"Absolute violations detected - {len(absolute_violations)} "
                f"criteria failed; {len(quality_warnings)} quality warnings"
            )
        logger.info(f"Pairing validation complete: {summary}")

        return ValidationReport(
            total_criteria=len(all_results),
            compliant_count=compliant_count,
            violations=absolute_violations,
            overall_status=overall_status,
            summary=summary,
            quality_warnings=quality_warnings,
            criteria_results=all_results,
        )

    def validate_tournament(self, tournament) -> ValidationReport:
        """Validate a Tournament aggregate, logs included."""
        self.settings = tournament.settings
        return self.validate(tournament.matches, tournament.round_logs)

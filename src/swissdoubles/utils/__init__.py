"""Utilities shared across Swiss Doubles."""

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
from typing import Optional

from swissdoubles.constants import ID_ALPHABET, ID_LENGTH
from swissdoubles.utils.logging import setup_logger


def generate_id(rng: Optional[random.Random] = None, length: int = ID_LENGTH) -> str:
    """Generate a short random identifier.

    Parameters
    ----------
    rng : random.Random, optional
        Generator to draw from. Pairing code always passes its seeded
        generator so that replaying a round reproduces the same match ids.
        When omitted a fresh, unseeded generator is used.
    length : int
        Number of characters in the identifier.

    Returns
    -------
    str
        The identifier.
    """
    source = rng if rng is not None else random.Random()
    return "".join(source.choice(ID_ALPHABET) for _ in range(length))


__all__ = ["generate_id", "setup_logger"]

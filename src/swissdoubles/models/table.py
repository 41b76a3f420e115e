"""Table data class."""

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
from typing import Any, Dict


@dataclass
class Table:
    """A physical playing table.

    Attributes
    ----------
    id : str
        Unique identifier for the table.
    name : str
        Display name, e.g. "Table 3".
    order : int
        Position used when handing out tables, lowest first.
    """

    id: str
    name: str
    order: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize table to dictionary."""
        return {"id": self.id, "name": self.name, "order": self.order}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        """Deserialize table from dictionary."""
        return cls(id=str(data["id"]), name=data["name"], order=data.get("order", 0))

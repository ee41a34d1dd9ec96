"""Referential gap between two joined relations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ReferentialGap:
    """A record whose foreign key matches no record of the referenced relation.

    For example a membership whose ``customer_id`` names no customer. Gaps
    are not errors: outer joins keep the record with nulls on the
    referenced side and an inner join drops it. Either way the gap is
    reported.

    Attributes:
        left: Name of the referencing relation
        right: Name of the referenced relation
        left_key: Primary key of the unmatched referencing record, if any
    """

    left: str
    right: str
    left_key: Any = None

    def __str__(self) -> str:
        return f"{self.left}[{self.left_key}] has no match in {self.right}"

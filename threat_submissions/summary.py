"""Summary statistics over a set of canonical records."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field

from .models import CanonicalRecord

UNSET_LABEL = "(none)"


@dataclass(frozen=True)
class SubmissionSummary:
    total: int = 0
    by_category: dict[str, int] = field(default_factory=dict)
    by_source: dict[str, int] = field(default_factory=dict)
    by_verdict: dict[str, int] = field(default_factory=dict)
    by_provenance: dict[str, int] = field(default_factory=dict)
    attack_simulations: int = 0

    def as_dict(self) -> dict[str, object]:
        return asdict(self)

    def format_lines(self) -> list[str]:
        """Plain-text rendering for the console."""
        lines = [f"Total submissions: {self.total}"]
        for title, counts in (
            ("By category", self.by_category),
            ("By source", self.by_source),
            ("By verdict", self.by_verdict),
            ("Message-ID provenance", self.by_provenance),
        ):
            if counts:
                lines.append(f"{title}:")
                lines.extend(f"  {name}: {count}" for name, count in counts.items())
        lines.append(f"Attack simulations: {self.attack_simulations}")
        return lines


def _counts(values: Iterable[str]) -> dict[str, int]:
    return dict(Counter(v or UNSET_LABEL for v in values).most_common())


def summarize(records: list[CanonicalRecord]) -> SubmissionSummary:
    return SubmissionSummary(
        total=len(records),
        by_category=_counts(r.category for r in records),
        by_source=_counts(r.source for r in records),
        by_verdict=_counts(r.result_category for r in records),
        by_provenance=_counts(r.message_id_provenance for r in records),
        attack_simulations=sum(1 for r in records if r.is_attack_simulation == "Yes"),
    )

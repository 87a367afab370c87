"""Simulation problem definition."""

from dataclasses import dataclass

from seqsim.data.interfaces import Domain
from seqsim.data.table import GeoTable


VALUE_TYPES: tuple[str, ...] = ("continuous", "categorical")


@dataclass(frozen=True)
class SeqSimProblem:
    """What to simulate, where, and conditioned on which data.

    Attributes:
        domain: Simulation domain, read-only during the run
        variables: Mapping from variable name to value type
            ("continuous" or "categorical")
        data: Optional hard data to honor
        nreals: Number of realizations to produce
    """

    domain: Domain
    variables: dict[str, str]
    data: GeoTable | None = None
    nreals: int = 1

    def __post_init__(self):
        """Validate problem definition."""
        if not self.variables:
            raise ValueError("At least one variable must be simulated")
        for name, vtype in self.variables.items():
            if vtype not in VALUE_TYPES:
                raise ValueError(
                    f"Variable '{name}' has unknown type '{vtype}'. "
                    f"Available: {', '.join(VALUE_TYPES)}"
                )
        if self.nreals < 1:
            raise ValueError(f"nreals must be >= 1, got {self.nreals}")
        if len(self.domain) == 0:
            raise ValueError("Domain has no locations")

    @property
    def has_data(self) -> bool:
        return self.data is not None and len(self.data) > 0

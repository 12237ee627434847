"""Analysis configuration."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from ..utils.logging import get_logger
from .types import VALID_ECOSYSTEMS, ConfigurationError, Ecosystem

logger = get_logger("AnalysisConfig")

ALL_ECOSYSTEMS = "all"

DEFAULT_MAX_CONCURRENCY = 8


def validate_ecosystem(ecosystem: str) -> bool:
    """Check an ecosystem name against the supported list."""
    return ecosystem in VALID_ECOSYSTEMS


def parse_ecosystems(value: Union[str, Sequence[str], None]) -> Tuple[Ecosystem, ...]:
    """Turn user input into the ecosystems to report on.

    Accepts ``"all"``, a comma separated string or a sequence of names. Unknown
    names are dropped with a warning; if nothing valid remains every ecosystem
    is used.

    Args:
        value: Raw ecosystem selection

    Returns:
        Selected ecosystems in their canonical order
    """
    if value is None:
        return tuple(Ecosystem)

    if isinstance(value, str):
        if value.strip().lower() == ALL_ECOSYSTEMS:
            return tuple(Ecosystem)
        requested = [item.strip().lower() for item in value.split(",")]
    else:
        requested = [str(item).strip().lower() for item in value]

    requested = [item for item in requested if item]
    if ALL_ECOSYSTEMS in requested:
        return tuple(Ecosystem)

    valid = [item for item in requested if validate_ecosystem(item)]
    invalid = [item for item in requested if not validate_ecosystem(item)]

    if not valid:
        logger.warning(
            f"No valid ecosystems specified. Valid options: {', '.join(VALID_ECOSYSTEMS)}. Using 'all' instead."
        )
        return tuple(Ecosystem)

    if invalid:
        logger.warning(f"Ignoring invalid ecosystems: {', '.join(invalid)}")

    return tuple(ecosystem for ecosystem in Ecosystem if ecosystem.value in valid)


@dataclass
class AnalysisConfig:
    """Options controlling which changes an analysis reports."""

    ecosystems: Tuple[Ecosystem, ...] = field(default_factory=lambda: tuple(Ecosystem))
    include_dev_dependencies: bool = True
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if self.max_concurrency < 1:
            raise ConfigurationError("max_concurrency must be at least 1")

    @classmethod
    def from_inputs(
        cls,
        ecosystems: Union[str, Sequence[str], None] = ALL_ECOSYSTEMS,
        include_dev_dependencies: bool = True,
        max_concurrency: Optional[int] = None,
    ) -> "AnalysisConfig":
        """Build a configuration from raw user input.

        Args:
            ecosystems: ``"all"`` or a comma separated list of ecosystem names
            include_dev_dependencies: Report non-production dependency groups too
            max_concurrency: Number of files analysed at once

        Returns:
            Validated configuration
        """
        return cls(
            ecosystems=parse_ecosystems(ecosystems),
            include_dev_dependencies=include_dev_dependencies,
            max_concurrency=max_concurrency or DEFAULT_MAX_CONCURRENCY,
        )

    @property
    def ecosystem_names(self) -> List[str]:
        return [ecosystem.value for ecosystem in self.ecosystems]

    def allows(self, ecosystem: Ecosystem) -> bool:
        return ecosystem in self.ecosystems

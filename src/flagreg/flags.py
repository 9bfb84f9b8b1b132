"""Core flag types shared by the registry, catalog and CLI."""

from dataclasses import dataclass
from enum import Enum


class Origin(str, Enum):
    """Where a flag's value comes from."""

    TARGET = "target"  # derived from the target (or host) triple
    OPTION = "option"  # derived from a compiler command-line option
    USER = "user"  # introduced with -D / --define


class Context(str, Enum):
    """Query scope: the platform compiled for, or the one running the compiler."""

    TARGET = "target"
    HOST = "host"


@dataclass(frozen=True)
class Flag:
    """A named boolean compile-time fact."""

    name: str
    value: bool
    origin: Origin
    derived: bool = False

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON output."""
        return {
            "name": self.name,
            "value": self.value,
            "origin": self.origin.value,
            "derived": self.derived,
        }

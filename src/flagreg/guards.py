"""guards.py – Safety-guard convention for risky build configurations.

A guard says "flag X may only be set when acknowledgement flag Y is also
set".  Guards are checked by ``flagreg check``, outside the query
primitive: querying a guarded flag always succeeds.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from flagreg.catalog import Category, flags_in
from flagreg.registry import FlagRegistry

ACKNOWLEDGE_FLAG = "i_know_what_im_doing"


@dataclass(frozen=True)
class GuardRule:
    flag: str
    requires: str
    reason: str = ""


@dataclass(frozen=True)
class GuardViolation:
    rule: GuardRule

    @property
    def message(self) -> str:
        msg = f"Flag '{self.rule.flag}' requires '{self.rule.requires}' to be set"
        if self.rule.reason:
            msg += f" ({self.rule.reason})"
        return msg

    def to_dict(self) -> dict[str, str]:
        """Serialize to a plain dict for JSON output."""
        return {
            "flag": self.rule.flag,
            "requires": self.rule.requires,
            "message": self.message,
        }


BUILTIN_RULES: tuple[GuardRule, ...] = tuple(
    GuardRule(info.name, ACKNOWLEDGE_FLAG, "unusual compiler build configuration")
    for info in flags_in(Category.COMPILER_BUILD_FEATURE)
    if info.name != ACKNOWLEDGE_FLAG
)


def rules_from_mapping(mapping: Mapping[str, str]) -> list[GuardRule]:
    """Build rules from a ``{guarded flag: acknowledgement flag}`` table."""
    return [GuardRule(flag, requires) for flag, requires in mapping.items()]


def check_guards(
    registry: FlagRegistry,
    rules: Iterable[GuardRule] = BUILTIN_RULES,
) -> list[GuardViolation]:
    """Return a violation for every rule whose flag is set without its acknowledgement."""
    return [
        GuardViolation(rule)
        for rule in rules
        if registry.is_set(rule.flag) and not registry.is_set(rule.requires)
    ]

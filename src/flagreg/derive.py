"""derive.py – Derived-flag resolution policy.

Derived flags are boolean combinations of primary platform flags.  Rules
are evaluated in declaration order, so a rule may depend on a flag derived
by an earlier one (``unix`` uses ``bsd``).
"""

from collections.abc import Callable, Set
from dataclasses import dataclass

BITS64_ARCHS = frozenset({"aarch64", "x86_64"})
BITS32_ARCHS = frozenset({"arm", "i386", "wasm32", "avr"})
BSD_FAMILY = frozenset({"freebsd", "netbsd", "openbsd", "dragonfly"})
UNIX_FAMILY = frozenset({"darwin", "linux", "solaris"})
HARD_FLOAT_ABIS = frozenset({"gnueabihf", "musleabihf", "eabihf"})


@dataclass(frozen=True)
class DerivationRule:
    """``name`` is set iff ``predicate(flags)`` holds for the flags resolved so far."""

    name: str
    predicate: Callable[[Set[str]], bool]
    description: str


def _any_of(names: Set[str]) -> Callable[[Set[str]], bool]:
    return lambda flags: not names.isdisjoint(flags)


DERIVATION_RULES: tuple[DerivationRule, ...] = (
    DerivationRule("bits64", _any_of(BITS64_ARCHS), "architecture is 64-bit"),
    DerivationRule("bits32", _any_of(BITS32_ARCHS), "architecture is 32-bit"),
    DerivationRule("bsd", _any_of(BSD_FAMILY), "any BSD operating system"),
    DerivationRule(
        "unix",
        lambda flags: "bsd" in flags or not UNIX_FAMILY.isdisjoint(flags),
        "bsd, darwin, linux or solaris",
    ),
    DerivationRule("win32", _any_of({"windows"}), "Windows API"),
    DerivationRule(
        "armhf",
        lambda flags: "arm" in flags and not HARD_FLOAT_ABIS.isdisjoint(flags),
        "32-bit ARM with a hard-float ABI",
    ),
)

DERIVED_NAMES = frozenset(rule.name for rule in DERIVATION_RULES)


def derive_flags(primary: Set[str]) -> list[str]:
    """Return the derived flag names that hold for the *primary* platform flags."""
    resolved = set(primary)
    derived: list[str] = []
    for rule in DERIVATION_RULES:
        if rule.predicate(resolved):
            resolved.add(rule.name)
            derived.append(rule.name)
    return derived

"""registry.py – Resolved flag registry and the flag query primitive.

Flags are resolved once per invocation, from the target triple, the
compiler options and the user defines, before anything queries them::

    ctx = build_context(parse_triple("x86_64-unknown-linux-gnu"))
    ctx.flag("unix")        # True
    ctx.flag(":windows")    # False
    ctx.host_flag("linux")  # same as flag() unless cross-compiling

Querying a name that is neither built in nor defined returns ``False``;
the query never raises.
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from flagreg.catalog import EXCLUSIVE_CATEGORIES, Category, category_of
from flagreg.derive import derive_flags
from flagreg.flags import Context, Flag, Origin
from flagreg.options import CompilerOptions
from flagreg.triple import Triple


class FlagConflictError(ValueError):
    """Raised when a mutually exclusive platform category has several flags set."""


def normalize_flag_name(token: str) -> str:
    """Strip symbol (``:unix``) or string literal (``"unix"``) syntax from a flag token."""
    name = token.strip()
    if len(name) >= 2 and name[0] == name[-1] and name[0] in "\"'":
        return name[1:-1]
    if name.startswith(":"):
        return name[1:]
    return name


def validate_define(name: str) -> str:
    """Return *name* if it is usable as a user flag, else raise ``ValueError``."""
    if not name:
        raise ValueError("Empty flag name in define")
    if any(ch.isspace() for ch in name):
        raise ValueError(f"Flag name {name!r} contains whitespace")
    if "=" in name:
        raise ValueError(f"Flag name {name!r} contains '='; flags are boolean and take no value")
    return name


@dataclass(frozen=True)
class FlagRegistry:
    """Immutable set of resolved flags for one context."""

    triple: Triple
    flags: Mapping[str, Flag]
    # Category of each primary platform flag, as assigned by the triple
    platform: tuple[tuple[Category, str], ...] = ()

    def is_set(self, name: str) -> bool:
        flag = self.flags.get(normalize_flag_name(name))
        return flag is not None and flag.value

    def get(self, name: str) -> Flag | None:
        return self.flags.get(normalize_flag_name(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_set(name)

    def names(self) -> list[str]:
        """Sorted names of the set flags."""
        return sorted(name for name, flag in self.flags.items() if flag.value)

    def set_flags(self) -> list[Flag]:
        return [self.flags[name] for name in self.names()]

    def category(self, name: str) -> Category:
        """Category of *name*: the triple component it came from, else the catalog's."""
        for category, platform_name in self.platform:
            if platform_name == name:
                return category
        return category_of(name)


def build_registry(
    triple: Triple,
    options: CompilerOptions | None = None,
    defines: Iterable[str] = (),
) -> FlagRegistry:
    """Resolve every flag for *triple* under *options* and user *defines*.

    Later sources never unset earlier ones: a define that repeats a
    platform or option flag keeps the original origin.
    """
    options = options or CompilerOptions()
    resolved: dict[str, Flag] = {}

    primary = triple.platform_flags()
    for name in primary:
        resolved[name] = Flag(name, True, Origin.TARGET)
    for name in derive_flags(set(primary)):
        resolved[name] = Flag(name, True, Origin.TARGET, derived=True)
    for name in options.option_flags():
        resolved.setdefault(name, Flag(name, True, Origin.OPTION))
    for raw in defines:
        name = validate_define(normalize_flag_name(raw))
        resolved.setdefault(name, Flag(name, True, Origin.USER))

    return FlagRegistry(
        triple=triple,
        flags=MappingProxyType(resolved),
        platform=tuple(triple.components()),
    )


def check_exclusive(registry: FlagRegistry) -> None:
    """Verify that each exclusive category has at most one primary platform flag set.

    Raises:
        FlagConflictError: naming the first offending category.
    """
    counts: Counter[Category] = Counter()
    members: dict[Category, list[str]] = {}
    for category, name in registry.platform:
        flag = registry.flags.get(name)
        if category not in EXCLUSIVE_CATEGORIES or flag is None:
            continue
        if flag.value and flag.origin is Origin.TARGET and not flag.derived:
            counts[category] += 1
            members.setdefault(category, []).append(name)
    for category, count in counts.items():
        if count > 1:
            raise FlagConflictError(
                f"Category '{category.value}' has {count} flags set: {members[category]}"
            )


@dataclass(frozen=True)
class FlagContext:
    """Target and host registries of one compiler invocation."""

    target: FlagRegistry
    host: FlagRegistry = field(repr=False)

    @property
    def cross_compiling(self) -> bool:
        return self.target.triple != self.host.triple

    def registry(self, context: Context) -> FlagRegistry:
        return self.host if context is Context.HOST else self.target

    def flag(self, name: str) -> bool:
        """Is *name* set for the target platform?"""
        return self.target.is_set(name)

    def host_flag(self, name: str) -> bool:
        """Is *name* set for the host platform?"""
        return self.host.is_set(name)

    def query(self, name: str, context: Context = Context.TARGET) -> bool:
        return self.registry(context).is_set(name)


def build_context(
    target: Triple,
    host: Triple | None = None,
    options: CompilerOptions | None = None,
    defines: Iterable[str] = (),
) -> FlagContext:
    """Resolve target and host registries.

    Options and defines apply to both contexts; only platform flags differ.
    Without a *host*, the invocation is not cross-compiling and the host
    shares the target registry.
    """
    defines = list(defines)
    target_registry = build_registry(target, options, defines)
    if host is None or host == target:
        return FlagContext(target=target_registry, host=target_registry)
    return FlagContext(
        target=target_registry,
        host=build_registry(host, options, defines),
    )

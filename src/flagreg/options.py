"""Compiler options that surface as compile-time flags."""

from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class CompilerOptions:
    """Option switches of one compiler invocation.

    Every field that is ``True`` becomes a flag of the same name.
    """

    release: bool = False
    debug: bool = True
    static: bool = False
    docs: bool = False
    interpreted: bool = False

    def option_flags(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name)]

    def merged(self, **overrides: bool | None) -> "CompilerOptions":
        """Return a copy with every non-``None`` override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise KeyError(f"Unknown compiler option(s): {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


OPTION_NAMES = frozenset(f.name for f in fields(CompilerOptions))

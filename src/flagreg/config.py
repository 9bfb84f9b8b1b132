"""Project configuration loader for flagreg.

Reads ``flagreg.toml`` from the project root.  The file is optional: when
none is found every setting falls back to its default (no default target,
host equal to the target, no defines, default compiler options).

Example::

    [target]
    triple = "x86_64-unknown-linux-gnu"

    [host]
    triple = "x86_64-unknown-linux-gnu"

    [options]
    release = true

    [defines]
    flags = ["preview_mt"]

    [targets.rpi]
    triple = "arm-unknown-linux-gnueabihf"
    defines = ["without_openssl"]

    [guards]
    gc_none = "i_know_what_im_doing"

Usage::

    from flagreg.config import load_config
    cfg = load_config()
    triple, defines = cfg.resolve_target("rpi")
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from flagreg.options import OPTION_NAMES, CompilerOptions

CONFIG_FILENAME = "flagreg.toml"


@dataclass
class TargetProfile:
    """A named target under ``[targets.<name>]``."""

    name: str
    triple: str
    defines: list[str] = field(default_factory=list)


@dataclass
class ProjectConfig:
    """Parsed project configuration."""

    # Directory holding flagreg.toml, None when running without one
    root: Path | None = None

    # [target]
    triple: str | None = None

    # [host], None means "same as the target"
    host_triple: str | None = None

    # [options]
    options: CompilerOptions = field(default_factory=CompilerOptions)

    # [defines]
    defines: list[str] = field(default_factory=list)

    # [targets.<name>]
    targets: dict[str, TargetProfile] = field(default_factory=dict)

    # [guards] guarded flag -> acknowledgement flag
    guards: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> Path | None:
        return self.root / CONFIG_FILENAME if self.root is not None else None

    def resolve_target(self, target: str | None) -> tuple[str | None, list[str]]:
        """Map a ``--target`` argument to ``(triple, profile defines)``.

        A configured target name wins over a literal triple.  Without an
        argument the ``[target]`` triple is used, which may be ``None``.
        """
        if target is None:
            return self.triple, []
        profile = self.targets.get(target)
        if profile is not None:
            return profile.triple, list(profile.defines)
        return target, []


def find_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (or cwd) to find flagreg.toml, like ``git`` finds ``.git/``."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        if (candidate / CONFIG_FILENAME).exists():
            return candidate
        if candidate == candidate.parent:
            return None
        candidate = candidate.parent


def _string_list(value: Any, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{where} must be a list of strings")
    return list(value)


def _parse_options(raw: dict[str, Any]) -> CompilerOptions:
    unknown = set(raw) - OPTION_NAMES
    if unknown:
        raise KeyError(
            f"Unknown compiler option(s) in [options]: {sorted(unknown)}.  "
            f"Known options: {sorted(OPTION_NAMES)}"
        )
    for key, value in raw.items():
        if not isinstance(value, bool):
            raise ValueError(f"[options] {key} must be true or false, got {value!r}")
    return CompilerOptions().merged(**raw)


def _parse_targets(raw: dict[str, Any]) -> dict[str, TargetProfile]:
    targets: dict[str, TargetProfile] = {}
    for name, section in raw.items():
        if not isinstance(section, dict) or "triple" not in section:
            raise KeyError(f"[targets.{name}] has no 'triple' key")
        targets[name] = TargetProfile(
            name=name,
            triple=str(section["triple"]),
            defines=_string_list(section.get("defines", []), f"[targets.{name}] defines"),
        )
    return targets


def load_config(root: Path | None = None) -> ProjectConfig:
    """Load flagreg.toml.

    Args:
        root: Project root directory.  Auto-detected from the working
              directory if ``None``; defaults apply when nothing is found.

    Raises:
        FileNotFoundError: *root* was given but holds no flagreg.toml.
        KeyError / ValueError: the file has unknown or mistyped settings.
    """
    if root is None:
        root = find_root()
        if root is None:
            return ProjectConfig()
    toml_path = root / CONFIG_FILENAME
    if not toml_path.exists():
        raise FileNotFoundError(f"Config not found: {toml_path}")

    with open(toml_path, "rb") as f:
        raw = tomllib.load(f)

    target = raw.get("target", {})
    guards = raw.get("guards", {})
    if not all(isinstance(v, str) for v in guards.values()):
        raise ValueError("[guards] values must be flag names")

    return ProjectConfig(
        root=root,
        triple=target.get("triple"),
        host_triple=raw.get("host", {}).get("triple"),
        options=_parse_options(raw.get("options", {})),
        defines=_string_list(raw.get("defines", {}).get("flags", []), "[defines] flags"),
        targets=_parse_targets(raw.get("targets", {})),
        guards=dict(guards),
    )

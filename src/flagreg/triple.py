"""triple.py – Target triple parsing and normalization.

A target triple is a ``arch-vendor-os[-abi]`` platform identifier.  Common
short forms are accepted as well::

    x86_64-linux                -> x86_64-unknown-linux
    aarch64-linux-gnu           -> aarch64-unknown-linux-gnu
    amd64-pc-windows-msvc       -> x86_64-pc-windows-msvc
    arm64-apple-darwin23.1.0    -> aarch64-apple-darwin

Each normalized component becomes one primary platform flag.
"""

import re
from dataclasses import dataclass

from flagreg.catalog import Category, flags_in


class TripleError(ValueError):
    """Raised for malformed or unsupported target triples."""


# ---------------------------------------------------------------------------
# Normalization tables
# ---------------------------------------------------------------------------

_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "arm64e": "aarch64",
    "aarch64_be": "aarch64",
    "i386": "i386",
    "i486": "i386",
    "i586": "i386",
    "i686": "i386",
    "x86": "i386",
    "avr": "avr",
    "wasm32": "wasm32",
}

# arch -> pointer width in bits
_POINTER_WIDTH: dict[str, int] = {
    "x86_64": 64,
    "aarch64": 64,
    "arm": 32,
    "i386": 32,
    "wasm32": 32,
    "avr": 32,
}

KNOWN_VENDORS = frozenset({"unknown", "pc", "apple", "portbld", "macosx", "w64"})

KNOWN_OSES = frozenset(info.name for info in flags_in(Category.OS) if not info.derived)

_OS_ALIASES: dict[str, str] = {
    "macos": "darwin",
    "macosx": "darwin",
    "ios": "darwin",
    "win32": "windows",
    "sunos": "solaris",
}

# Trailing version numbers: darwin23.1.0, freebsd14.0, android24, solaris2.11
_VERSION_SUFFIX = re.compile(r"[0-9][0-9.]*$")


def _normalize_arch(arch: str) -> str:
    if arch in _ARCH_ALIASES:
        return _ARCH_ALIASES[arch]
    # arm64_32 and other arm64 variants are not 32-bit arm
    if arch.startswith(("arm", "thumb")) and not arch.startswith(("arm64", "aarch64")):
        return "arm"
    raise TripleError(
        f"Unsupported architecture '{arch}'. "
        f"Supported: {sorted(set(_ARCH_ALIASES.values()) | {'arm'})}"
    )


def _strip_version(component: str) -> str:
    stripped = _VERSION_SUFFIX.sub("", component)
    return stripped or component


def _normalize_os(os_name: str) -> str:
    if os_name in _OS_ALIASES:
        return _OS_ALIASES[os_name]
    stripped = _strip_version(os_name)
    return _OS_ALIASES.get(stripped, stripped)


def _is_known_os(component: str) -> bool:
    return _normalize_os(component) in KNOWN_OSES or _strip_version(component) == "mingw"


# ---------------------------------------------------------------------------
# Triple
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Triple:
    """A normalized target triple."""

    architecture: str
    vendor: str
    os: str
    abi: str = ""

    def __str__(self) -> str:
        parts = [self.architecture, self.vendor, self.os]
        if self.abi:
            parts.append(self.abi)
        return "-".join(parts)

    @property
    def pointer_width(self) -> int:
        return _POINTER_WIDTH[self.architecture]

    def components(self) -> list[tuple[Category, str]]:
        """Return ``(category, flag name)`` for every non-empty component."""
        items = [
            (Category.ARCHITECTURE, self.architecture),
            (Category.VENDOR, self.vendor),
            (Category.OS, self.os),
        ]
        if self.abi:
            items.append((Category.ABI, self.abi))
        return items

    def platform_flags(self) -> list[str]:
        """Primary (non-derived) platform flag names, without duplicates."""
        seen: list[str] = []
        for _, name in self.components():
            if name not in seen:
                seen.append(name)
        return seen

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON output."""
        return {
            "triple": str(self),
            "architecture": self.architecture,
            "vendor": self.vendor,
            "os": self.os,
            "abi": self.abi,
            "pointer_width": self.pointer_width,
        }


def parse_triple(text: str) -> Triple:
    """Parse and normalize a target triple.

    Accepts ``arch-vendor-os-abi``, ``arch-vendor-os``, ``arch-os-abi`` and
    ``arch-os``.  A three-part triple is read as ``arch-vendor-os`` when its
    middle part is a known vendor, or when its last part is a known OS and
    the middle one is not (``x86_64-redhat-linux``).

    Raises:
        TripleError: on empty input, empty components, too many components
            or an unsupported architecture.
    """
    raw = text.strip().lower()
    if not raw:
        raise TripleError("Empty target triple")

    parts = raw.split("-")
    if any(not p for p in parts):
        raise TripleError(f"Malformed target triple '{text}' (empty component)")

    if len(parts) == 2:
        arch, os_name = parts
        vendor, abi = "unknown", ""
    elif len(parts) == 3:
        if parts[1] in KNOWN_VENDORS or (
            _is_known_os(parts[2]) and not _is_known_os(parts[1])
        ):
            arch, vendor, os_name = parts
            abi = ""
        else:
            arch, os_name, abi = parts
            vendor = "unknown"
    elif len(parts) == 4:
        arch, vendor, os_name, abi = parts
    else:
        raise TripleError(
            f"Malformed target triple '{text}'. Expected arch-vendor-os[-abi]"
        )

    # MinGW spells the ABI into the OS component
    if _strip_version(os_name) == "mingw":
        os_name = "windows"
        abi = abi or "gnu"

    return Triple(
        architecture=_normalize_arch(arch),
        vendor=vendor,
        os=_normalize_os(os_name),
        abi=_strip_version(abi) if abi else "",
    )

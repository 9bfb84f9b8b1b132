"""catalog.py – Reference listing of built-in compile-time flags.

Every flag the compiler knows about, grouped by category, with a one-line
description.  This is the data behind ``flagreg reference`` and the
description column of ``flagreg list``.

Platform categories (architecture, vendor, OS, ABI) are mutually
exclusive partitions: a triple sets at most one primary flag in each.
Derived flags live in the category they describe but are computed from
other flags (see :mod:`flagreg.derive`).
"""

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    ARCHITECTURE = "architecture"
    VENDOR = "vendor"
    OS = "os"
    ABI = "abi"
    COMPILER_OPTION = "compiler-option"
    STDLIB_FEATURE = "stdlib-feature"
    LANGUAGE_FEATURE = "language-feature"
    CODEGEN_FEATURE = "codegen-feature"
    COMPILER_BUILD_FEATURE = "compiler-build-feature"
    USER_CODE_FEATURE = "user-code-feature"

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    Category.ARCHITECTURE: "Architecture",
    Category.VENDOR: "Vendor",
    Category.OS: "Operating system",
    Category.ABI: "ABI",
    Category.COMPILER_OPTION: "Compiler options",
    Category.STDLIB_FEATURE: "Stdlib features",
    Category.LANGUAGE_FEATURE: "Language features",
    Category.CODEGEN_FEATURE: "Codegen features",
    Category.COMPILER_BUILD_FEATURE: "Compiler build features",
    Category.USER_CODE_FEATURE: "User code features",
}

EXCLUSIVE_CATEGORIES = frozenset(
    {Category.ARCHITECTURE, Category.VENDOR, Category.OS, Category.ABI}
)


@dataclass(frozen=True)
class FlagInfo:
    """One row of the reference tables."""

    name: str
    category: Category
    description: str
    derived: bool = False

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON output."""
        return {
            "name": self.name,
            "category": self.category.value,
            "description": self.description,
            "derived": self.derived,
        }


def _rows(category: Category, *rows: tuple[str, str] | tuple[str, str, bool]) -> list[FlagInfo]:
    return [FlagInfo(row[0], category, row[1], *row[2:]) for row in rows]


REFERENCE: tuple[FlagInfo, ...] = tuple(
    _rows(
        Category.ARCHITECTURE,
        ("aarch64", "AArch64 (64-bit ARM)"),
        ("arm", "ARM (32-bit)"),
        ("avr", "AVR microcontrollers"),
        ("i386", "x86 (32-bit)"),
        ("wasm32", "WebAssembly (32-bit)"),
        ("x86_64", "x86-64 (64-bit)"),
        ("bits32", "32-bit architecture", True),
        ("bits64", "64-bit architecture", True),
    )
    + _rows(
        Category.VENDOR,
        ("apple", "Apple"),
        ("macosx", "Apple (legacy vendor spelling)"),
        ("pc", "Generic PC"),
        ("portbld", "FreeBSD ports build"),
        ("unknown", "Unknown vendor"),
        ("w64", "MinGW-w64"),
    )
    + _rows(
        Category.OS,
        ("darwin", "Darwin (macOS, iOS)"),
        ("dragonfly", "DragonFly BSD"),
        ("freebsd", "FreeBSD"),
        ("linux", "Linux"),
        ("netbsd", "NetBSD"),
        ("openbsd", "OpenBSD"),
        ("solaris", "Solaris / illumos"),
        ("wasi", "WebAssembly System Interface"),
        ("windows", "Windows"),
        ("bsd", "Any BSD (dragonfly, freebsd, netbsd, openbsd)", True),
        ("unix", "UNIX-like (bsd, darwin, linux, solaris)", True),
        ("win32", "Windows API", True),
    )
    + _rows(
        Category.ABI,
        ("android", "Android (Bionic C library)"),
        ("eabi", "ARM embedded ABI"),
        ("eabihf", "ARM embedded ABI, hard float"),
        ("gnu", "GNU C library"),
        ("gnueabihf", "GNU C library, ARM hard float"),
        ("msvc", "Microsoft Visual C++ runtime"),
        ("musl", "musl C library"),
        ("musleabihf", "musl C library, ARM hard float"),
        ("armhf", "ARM with hardware floating point", True),
    )
    + _rows(
        Category.COMPILER_OPTION,
        ("release", "Compiled with --release"),
        ("debug", "Compiled with debug info (unset with --no-debug)"),
        ("static", "Compiled with --static"),
        ("docs", "Code is processed by the documentation generator"),
        ("interpreted", "Code runs in the interpreter"),
    )
    + _rows(
        Category.STDLIB_FEATURE,
        ("execution_context", "Use execution contexts for the scheduler"),
        ("gc_none", "Disable garbage collection"),
        ("preview_mt", "Enable multithreading preview"),
        ("tracing", "Build with runtime tracing support"),
        ("use_pcre", "Use PCRE instead of PCRE2 for regexes"),
        ("without_iconv", "Build without iconv"),
        ("without_openssl", "Build without OpenSSL"),
        ("without_zlib", "Build without zlib"),
    )
    + _rows(
        Category.LANGUAGE_FEATURE,
        ("no_number_autocast", "Disable automatic casting of number literals"),
        ("no_restrictions_augmenter", "Disable augmenting method restrictions from ivar types"),
        ("strict_multi_assign", "Require exact element counts in multiple assignment"),
    )
    + _rows(
        Category.CODEGEN_FEATURE,
        ("preview_dll", "Link dynamic libraries on MSVC"),
        ("win7", "Target Windows 7 system APIs"),
    )
    + _rows(
        Category.COMPILER_BUILD_FEATURE,
        ("i_know_what_im_doing", "Acknowledge building the compiler in an unusual configuration"),
        ("without_ffi", "Build the compiler without libffi"),
        ("without_interpreter", "Build the compiler without the interpreter"),
        ("without_playground", "Build the compiler without the playground"),
    )
)

_BY_NAME: dict[str, FlagInfo] = {info.name: info for info in REFERENCE}


def describe(name: str) -> FlagInfo | None:
    """Return the reference entry for *name*, or ``None`` for unknown flags."""
    return _BY_NAME.get(name)


def category_of(name: str) -> Category:
    """Category of *name*; flags not in the reference are user code features."""
    info = _BY_NAME.get(name)
    return info.category if info is not None else Category.USER_CODE_FEATURE


def flags_in(category: Category) -> list[FlagInfo]:
    """All reference entries of *category*, primary flags first."""
    return [info for info in REFERENCE if info.category is category]


def is_builtin(name: str) -> bool:
    return name in _BY_NAME

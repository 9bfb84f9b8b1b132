"""Tests for the flag registry and the target/host query primitive."""

from types import MappingProxyType

import pytest

from flagreg.catalog import EXCLUSIVE_CATEGORIES, Category, flags_in
from flagreg.flags import Context, Flag, Origin
from flagreg.options import CompilerOptions
from flagreg.registry import (
    FlagConflictError,
    FlagRegistry,
    build_context,
    build_registry,
    check_exclusive,
    normalize_flag_name,
    validate_define,
)
from flagreg.triple import parse_triple

LINUX = parse_triple("x86_64-unknown-linux-gnu")
DARWIN = parse_triple("aarch64-apple-darwin")
WINDOWS = parse_triple("x86_64-pc-windows-msvc")

SAMPLE_TRIPLES = [
    "x86_64-unknown-linux-gnu",
    "aarch64-linux-android",
    "arm-unknown-linux-gnueabihf",
    "aarch64-apple-darwin",
    "x86_64-portbld-freebsd14.0",
    "x86_64-pc-windows-msvc",
    "x86_64-w64-mingw32",
    "i686-unknown-openbsd",
    "wasm32-wasi",
    "avr-unknown-unknown",
]

# ---------------------------------------------------------------------------
# Flag name tokens
# ---------------------------------------------------------------------------


class TestNormalizeFlagName:
    def test_bare(self) -> None:
        assert normalize_flag_name("unix") == "unix"

    def test_symbol(self) -> None:
        assert normalize_flag_name(":unix") == "unix"

    def test_double_quoted(self) -> None:
        assert normalize_flag_name('"unix"') == "unix"

    def test_single_quoted(self) -> None:
        assert normalize_flag_name("'unix'") == "unix"

    def test_whitespace(self) -> None:
        assert normalize_flag_name("  unix ") == "unix"

    def test_unbalanced_quote_kept(self) -> None:
        assert normalize_flag_name('"unix') == '"unix'


class TestValidateDefine:
    def test_valid(self) -> None:
        assert validate_define("preview_mt") == "preview_mt"

    def test_empty(self) -> None:
        with pytest.raises(ValueError, match="Empty"):
            validate_define("")

    def test_whitespace(self) -> None:
        with pytest.raises(ValueError, match="whitespace"):
            validate_define("foo bar")

    def test_value_assignment(self) -> None:
        with pytest.raises(ValueError, match="="):
            validate_define("foo=1")


# ---------------------------------------------------------------------------
# build_registry
# ---------------------------------------------------------------------------


class TestBuildRegistry:
    def test_linux_example(self) -> None:
        registry = build_registry(LINUX)
        assert registry.is_set("unix")
        assert registry.is_set("linux")
        assert not registry.is_set("windows")

    def test_user_define_example(self) -> None:
        registry = build_registry(LINUX, defines=["foo"])
        assert registry.is_set("foo")
        assert not registry.is_set("bar")

    @pytest.mark.parametrize("name", ["bar", "", "Linux", "definitely_not_a_flag", "bits16"])
    def test_unknown_names_are_false(self, name: str) -> None:
        assert build_registry(LINUX).is_set(name) is False

    def test_origins(self) -> None:
        registry = build_registry(LINUX, CompilerOptions(release=True), ["foo"])
        assert registry.get("linux") == Flag("linux", True, Origin.TARGET)
        assert registry.get("unix") == Flag("unix", True, Origin.TARGET, derived=True)
        assert registry.get("release") == Flag("release", True, Origin.OPTION)
        assert registry.get("foo") == Flag("foo", True, Origin.USER)

    def test_default_options(self) -> None:
        registry = build_registry(LINUX)
        assert registry.is_set("debug")
        assert not registry.is_set("release")
        assert not registry.is_set("static")

    def test_no_debug(self) -> None:
        assert not build_registry(LINUX, CompilerOptions(debug=False)).is_set("debug")

    def test_define_repeating_platform_flag_keeps_origin(self) -> None:
        registry = build_registry(LINUX, defines=["linux"])
        assert registry.get("linux").origin is Origin.TARGET

    def test_define_tokens_normalized(self) -> None:
        registry = build_registry(LINUX, defines=[":foo", '"bar"'])
        assert registry.is_set("foo")
        assert registry.is_set("bar")

    def test_invalid_define_rejected(self) -> None:
        with pytest.raises(ValueError):
            build_registry(LINUX, defines=["a b"])

    def test_query_accepts_tokens(self) -> None:
        registry = build_registry(LINUX)
        assert registry.is_set(":unix")
        assert registry.is_set('"linux"')
        assert "unix" in registry
        assert "windows" not in registry
        assert 42 not in registry

    def test_names_sorted(self) -> None:
        names = build_registry(LINUX).names()
        assert names == sorted(names)
        assert {"x86_64", "unknown", "linux", "gnu", "bits64", "unix", "debug"} == set(names)

    def test_set_flags_are_flags(self) -> None:
        flags = build_registry(DARWIN).set_flags()
        assert all(isinstance(f, Flag) and f.value for f in flags)

    def test_immutable(self) -> None:
        registry = build_registry(LINUX)
        assert isinstance(registry.flags, MappingProxyType)
        with pytest.raises(TypeError):
            registry.flags["windows"] = Flag("windows", True, Origin.USER)  # type: ignore[index]

    def test_category_from_triple_component(self) -> None:
        registry = build_registry(parse_triple("x86_64-unknown-haiku"))
        assert registry.category("haiku") is Category.OS
        assert registry.category("unix") is Category.OS
        assert registry.category("foo") is Category.USER_CODE_FEATURE


# ---------------------------------------------------------------------------
# Mutually exclusive categories
# ---------------------------------------------------------------------------


class TestExclusiveCategories:
    @pytest.mark.parametrize("triple", SAMPLE_TRIPLES)
    def test_at_most_one_primary_flag_per_category(self, triple: str) -> None:
        registry = build_registry(parse_triple(triple), defines=["linux", "windows"])
        check_exclusive(registry)
        for category in EXCLUSIVE_CATEGORIES:
            primary = [
                info.name
                for info in flags_in(category)
                if not info.derived
                and registry.get(info.name) is not None
                and registry.get(info.name).origin is Origin.TARGET
            ]
            assert len(primary) <= 1, (category, primary)

    def test_conflict_detected(self) -> None:
        flags = {
            "linux": Flag("linux", True, Origin.TARGET),
            "windows": Flag("windows", True, Origin.TARGET),
        }
        registry = FlagRegistry(
            triple=LINUX,
            flags=MappingProxyType(flags),
            platform=((Category.OS, "linux"), (Category.OS, "windows")),
        )
        with pytest.raises(FlagConflictError, match="'os'"):
            check_exclusive(registry)

    def test_derived_flags_may_overlap(self) -> None:
        registry = build_registry(parse_triple("x86_64-unknown-freebsd"))
        assert registry.is_set("freebsd")
        assert registry.is_set("bsd")
        assert registry.is_set("unix")
        check_exclusive(registry)


# ---------------------------------------------------------------------------
# FlagContext
# ---------------------------------------------------------------------------


class TestFlagContext:
    def test_not_cross_compiling_without_host(self) -> None:
        ctx = build_context(LINUX)
        assert not ctx.cross_compiling
        assert ctx.host is ctx.target

    def test_same_host_is_not_cross_compiling(self) -> None:
        ctx = build_context(LINUX, parse_triple("amd64-linux-gnu"))
        assert not ctx.cross_compiling

    @pytest.mark.parametrize("triple", SAMPLE_TRIPLES)
    def test_target_and_host_agree_when_native(self, triple: str) -> None:
        parsed = parse_triple(triple)
        ctx = build_context(parsed, parsed, CompilerOptions(static=True), ["foo"])
        names = {info.name for info in flags_in(Category.OS)} | {"foo", "bar", "static", "unix"}
        for name in names:
            assert ctx.flag(name) == ctx.host_flag(name)

    def test_cross_compiling(self) -> None:
        ctx = build_context(WINDOWS, DARWIN, defines=["foo"])
        assert ctx.cross_compiling
        assert ctx.flag("windows") and not ctx.host_flag("windows")
        assert ctx.host_flag("darwin") and not ctx.flag("darwin")
        assert ctx.host_flag("unix") and not ctx.flag("unix")

    def test_defines_and_options_shared(self) -> None:
        ctx = build_context(WINDOWS, DARWIN, CompilerOptions(release=True), ["foo"])
        assert ctx.flag("foo") and ctx.host_flag("foo")
        assert ctx.flag("release") and ctx.host_flag("release")

    def test_query_by_context(self) -> None:
        ctx = build_context(WINDOWS, LINUX)
        assert ctx.query("windows", Context.TARGET)
        assert not ctx.query("windows", Context.HOST)
        assert ctx.registry(Context.HOST) is ctx.host

    def test_defines_iterable_consumed_once(self) -> None:
        ctx = build_context(WINDOWS, LINUX, defines=iter(["foo"]))
        assert ctx.flag("foo") and ctx.host_flag("foo")

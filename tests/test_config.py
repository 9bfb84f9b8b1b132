"""Tests for the flagreg.toml loader."""

from pathlib import Path

import pytest

from flagreg.config import (
    CONFIG_FILENAME,
    ProjectConfig,
    TargetProfile,
    find_root,
    load_config,
)
from flagreg.options import CompilerOptions

FULL_TOML = """\
[target]
triple = "x86_64-unknown-linux-gnu"

[host]
triple = "aarch64-apple-darwin"

[options]
release = true
debug = false

[defines]
flags = ["preview_mt", "foo"]

[targets.rpi]
triple = "arm-unknown-linux-gnueabihf"
defines = ["without_openssl"]

[targets.web]
triple = "wasm32-wasi"

[guards]
gc_none = "i_know_what_im_doing"
"""


def _make_project(tmp_path: Path, toml_content: str = FULL_TOML) -> Path:
    """Write a flagreg.toml and return the directory."""
    (tmp_path / CONFIG_FILENAME).write_text(toml_content, encoding="utf-8")
    return tmp_path


# ---------------------------------------------------------------------------
# find_root()
# ---------------------------------------------------------------------------


class TestFindRoot:
    def test_in_start_dir(self, tmp_path: Path) -> None:
        _make_project(tmp_path)
        assert find_root(tmp_path) == tmp_path.resolve()

    def test_from_subdirectory(self, tmp_path: Path) -> None:
        _make_project(tmp_path)
        nested = tmp_path / "src" / "deep"
        nested.mkdir(parents=True)
        assert find_root(nested) == tmp_path.resolve()

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_root(tmp_path) is None


# ---------------------------------------------------------------------------
# load_config()
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_full(self, tmp_path: Path) -> None:
        cfg = load_config(_make_project(tmp_path))
        assert cfg.root == tmp_path
        assert cfg.path == tmp_path / CONFIG_FILENAME
        assert cfg.triple == "x86_64-unknown-linux-gnu"
        assert cfg.host_triple == "aarch64-apple-darwin"
        assert cfg.options == CompilerOptions(release=True, debug=False)
        assert cfg.defines == ["preview_mt", "foo"]
        assert cfg.targets["rpi"] == TargetProfile(
            "rpi", "arm-unknown-linux-gnueabihf", ["without_openssl"]
        )
        assert cfg.targets["web"].defines == []
        assert cfg.guards == {"gc_none": "i_know_what_im_doing"}

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(_make_project(tmp_path, ""))
        assert cfg.triple is None
        assert cfg.host_triple is None
        assert cfg.options == CompilerOptions()
        assert cfg.defines == []
        assert cfg.targets == {}

    def test_no_file_autodetect_gives_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg == ProjectConfig()
        assert cfg.path is None

    def test_autodetect_from_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _make_project(tmp_path)
        monkeypatch.chdir(tmp_path)
        assert load_config().triple == "x86_64-unknown-linux-gnu"

    def test_explicit_root_without_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config not found"):
            load_config(tmp_path)

    def test_unknown_option(self, tmp_path: Path) -> None:
        _make_project(tmp_path, "[options]\nturbo = true\n")
        with pytest.raises(KeyError, match="turbo"):
            load_config(tmp_path)

    def test_option_not_bool(self, tmp_path: Path) -> None:
        _make_project(tmp_path, '[options]\nrelease = "yes"\n')
        with pytest.raises(ValueError, match="release"):
            load_config(tmp_path)

    def test_defines_not_list(self, tmp_path: Path) -> None:
        _make_project(tmp_path, '[defines]\nflags = "foo"\n')
        with pytest.raises(ValueError, match="list of strings"):
            load_config(tmp_path)

    def test_target_without_triple(self, tmp_path: Path) -> None:
        _make_project(tmp_path, '[targets.broken]\ndefines = ["x"]\n')
        with pytest.raises(KeyError, match="broken"):
            load_config(tmp_path)

    def test_guard_value_not_string(self, tmp_path: Path) -> None:
        _make_project(tmp_path, "[guards]\ngc_none = 1\n")
        with pytest.raises(ValueError, match="guards"):
            load_config(tmp_path)


# ---------------------------------------------------------------------------
# ProjectConfig.resolve_target()
# ---------------------------------------------------------------------------


class TestResolveTarget:
    def test_default_target(self, tmp_path: Path) -> None:
        cfg = load_config(_make_project(tmp_path))
        assert cfg.resolve_target(None) == ("x86_64-unknown-linux-gnu", [])

    def test_named_target(self, tmp_path: Path) -> None:
        cfg = load_config(_make_project(tmp_path))
        assert cfg.resolve_target("rpi") == ("arm-unknown-linux-gnueabihf", ["without_openssl"])

    def test_literal_triple(self, tmp_path: Path) -> None:
        cfg = load_config(_make_project(tmp_path))
        assert cfg.resolve_target("aarch64-apple-darwin") == ("aarch64-apple-darwin", [])

    def test_host_when_unconfigured(self) -> None:
        assert ProjectConfig().resolve_target(None) == (None, [])

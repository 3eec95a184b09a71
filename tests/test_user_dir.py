from __future__ import annotations

from pathlib import Path

from fontpicker.user_dir import CACHE_DIR_ENV, get_cache_dir


def test_explicit_root_wins(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(CACHE_DIR_ENV, str(tmp_path / "env"))
    assert get_cache_dir(cache_root=tmp_path / "explicit") == tmp_path / "explicit"


def test_environment_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(CACHE_DIR_ENV, str(tmp_path / "env"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))
    assert get_cache_dir() == tmp_path / "env"

    monkeypatch.delenv(CACHE_DIR_ENV)
    assert get_cache_dir("catalog") == tmp_path / "xdg" / "fontpicker" / "catalog"


def test_home_default(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(CACHE_DIR_ENV, raising=False)
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert get_cache_dir() == tmp_path / ".cache" / "fontpicker"


def test_create_makes_directories(tmp_path: Path) -> None:
    target = get_cache_dir("a", "b", cache_root=tmp_path, create=True)
    assert target == tmp_path / "a" / "b"
    assert target.is_dir()

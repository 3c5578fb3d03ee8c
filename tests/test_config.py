from __future__ import annotations

from pathlib import Path

import pytest

from calcline.config import CalcConfig, find_config, load_config
from calcline.errors import CalcConfigError


def test_no_config_file_uses_defaults(tmp_path: Path) -> None:
    cfg = load_config(start=tmp_path)

    assert cfg == CalcConfig()
    assert cfg.version == 1
    assert cfg.repl.prompt == ">>> "
    assert cfg.repl.continuation_prompt == "... "
    assert cfg.repl.history is True
    assert cfg.display.color == "auto"
    assert cfg.display.error_indent == 2
    assert cfg.display.prompt_style == "yellow"
    assert cfg.display.error_style == "red"
    assert cfg.source is None


def test_load_minimal_config_defaults_apply(tmp_path: Path) -> None:
    (tmp_path / "calcline.toml").write_text("version = 1\n", encoding="utf-8")
    cfg = load_config(start=tmp_path)

    assert cfg.repl.prompt == ">>> "
    assert cfg.display.error_indent == 2
    assert cfg.source == tmp_path.resolve() / "calcline.toml"


def test_load_config_overrides_work(tmp_path: Path) -> None:
    p = tmp_path / "calcline.toml"
    p.write_text(
        "\n".join(
            [
                "version = 1",
                "",
                "[repl]",
                'prompt = "calc> "',
                'continuation_prompt = "  ... "',
                "history = false",
                "",
                "[display]",
                'color = "never"',
                "error_indent = 6",
                'prompt_style = "bold cyan"',
                'error_style = "magenta"',
                "",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    cfg = load_config(config_path=p)
    assert cfg.repl.prompt == "calc> "
    assert cfg.repl.continuation_prompt == "  ... "
    assert cfg.repl.history is False
    assert cfg.display.color == "never"
    assert cfg.display.error_indent == 6
    assert cfg.display.prompt_style == "bold cyan"
    assert cfg.display.error_style == "magenta"


def test_invalid_toml_raises(tmp_path: Path) -> None:
    p = tmp_path / "calcline.toml"
    p.write_text("version = \n", encoding="utf-8")
    with pytest.raises(CalcConfigError):
        load_config(config_path=p)


def test_missing_explicit_config_raises(tmp_path: Path) -> None:
    with pytest.raises(CalcConfigError, match="Missing calcline.toml"):
        load_config(config_path=tmp_path / "calcline.toml")


def test_missing_version_raises(tmp_path: Path) -> None:
    p = tmp_path / "calcline.toml"
    p.write_text('[repl]\nprompt = "> "\n', encoding="utf-8")
    with pytest.raises(CalcConfigError, match="version"):
        load_config(config_path=p)


def test_unsupported_version_raises(tmp_path: Path) -> None:
    p = tmp_path / "calcline.toml"
    p.write_text("version = 2\n", encoding="utf-8")
    with pytest.raises(CalcConfigError, match="Unsupported config version"):
        load_config(config_path=p)


@pytest.mark.parametrize(
    ("body", "key"),
    [
        ('repl = "x"', "[repl]"),
        ("[repl]\nprompt = 1", "repl.prompt"),
        ('[repl]\nhistory = "yes"', "repl.history"),
        ("[display]\nerror_indent = true", "display.error_indent"),
        ('[display]\ncolor = "sometimes"', "display.color"),
        ("[display]\nerror_indent = -1", "display.error_indent"),
    ],
)
def test_invalid_values_name_the_key(tmp_path: Path, body: str, key: str) -> None:
    p = tmp_path / "calcline.toml"
    p.write_text(f"version = 1\n{body}\n", encoding="utf-8")
    with pytest.raises(CalcConfigError) as exc_info:
        load_config(config_path=p)
    assert key in str(exc_info.value)


def test_find_config_walks_upward(tmp_path: Path) -> None:
    (tmp_path / "calcline.toml").write_text("version = 1\n", encoding="utf-8")
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)

    assert find_config(deep) == tmp_path.resolve() / "calcline.toml"
    some_file = deep / "notes.txt"
    some_file.write_text("2+2\n", encoding="utf-8")
    assert find_config(some_file) == tmp_path.resolve() / "calcline.toml"


def test_load_config_uses_cwd_by_default(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "calcline.toml").write_text(
        'version = 1\n[repl]\nprompt = "$ "\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    assert load_config().repl.prompt == "$ "

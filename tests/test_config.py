"""Tests for vaultview/markdown/config.py"""
from vaultview.markdown.config import RenderOptions, get_pandoc_config


def test_default_pandoc_config():
    config = get_pandoc_config()
    assert config["reader_format"].startswith("markdown")
    assert "-auto_identifiers" in config["reader_format"]
    assert "+tex_math_dollars" in config["reader_format"]
    assert config["writer_format"] == "html5"
    assert "--mathjax" in config["extra_args"]
    assert "--no-highlight" not in config["extra_args"]


def test_math_and_highlighting_can_be_disabled():
    config = get_pandoc_config(RenderOptions(enable_math=False, enable_code_highlight=False))
    assert "-tex_math_dollars" in config["reader_format"]
    assert "--mathjax" not in config["extra_args"]
    assert "--no-highlight" in config["extra_args"]


def test_options_from_env(monkeypatch):
    monkeypatch.setenv("VAULTVIEW_BASE_URL", "https://cdn.example.com/vault")
    assert RenderOptions.from_env().base_url == "https://cdn.example.com/vault"
    assert RenderOptions.from_env(base_url="/local").base_url == "/local"


def test_options_from_env_default(monkeypatch):
    monkeypatch.delenv("VAULTVIEW_BASE_URL", raising=False)
    assert RenderOptions.from_env(enable_tags=False) == RenderOptions(enable_tags=False)

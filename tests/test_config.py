"""Tests for configuration loading and validation."""

import pytest

from invoice_composer.cli import main
from invoice_composer.config import ComposerConfig, load_config
from invoice_composer.errors import ConfigError


def test_defaults_describe_a4(config):
    layout = config.page_layout
    assert (layout.page_width, layout.page_height, layout.margin) == (210.0, 297.0, 15.0)
    assert layout.content_end_y == pytest.approx(282.0)
    config.validate()


def test_load_config_without_path():
    assert load_config() == ComposerConfig()


def test_yaml_round_trip(tmp_path):
    config = ComposerConfig(page_width=215.9, page_height=279.4, margin=12.7, style="classic")
    path = tmp_path / "letter.yaml"
    config.to_yaml(path)
    assert load_config(path) == config


def test_partial_yaml_keeps_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("document_title: INVOICE\nmax_workers: 2\n")
    config = load_config(path)
    assert config.document_title == "INVOICE"
    assert config.max_workers == 2
    assert config.margin == 15.0


def test_empty_yaml_is_default(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == ComposerConfig()


@pytest.mark.parametrize(
    "text",
    [
        "page_size: A4\n",
        "- margin\n",
        "margin: -1\n",
        "margin: 200\n",
        "table_row_height: 0\n",
        "amount_column_width: 180\n",
        "table_header_height: 270\n",
        "margin: abc\n",
        "max_workers: 2.5\n",
        "style: 3\n",
        "margin: true\n",
        "margin: [1, 2\n",
        "1: x\n",
    ],
)
def test_invalid_yaml_rejected(tmp_path, text):
    path = tmp_path / "bad.yaml"
    path.write_text(text)
    with pytest.raises(ConfigError):
        load_config(path)


def test_cli_reports_malformed_config(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("margin: abc\n")
    assert main(["--config", str(path), "sample", "--out-dir", str(tmp_path / "s")]) == 1
    assert "margin must be a number" in capsys.readouterr().err

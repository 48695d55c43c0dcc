from __future__ import annotations

from pathlib import Path

import pytest

from fcrgen.config.loader import ConfigError, default_config, load_config
from fcrgen.models.config_models import (
    DEFAULT_DELIMITERS,
    DEFAULT_MATERIAL_DESCRIPTIONS,
    MaterialType,
    TemplateVariant,
)


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.fcr.template_variant is TemplateVariant.PORCELAIN
    assert cfg.delimiters == (",", ";", "\t", "|")
    assert cfg.output_directory == "./output"
    assert cfg.database.user == "appuser"
    assert cfg.database.port == 5432


def test_partial_material_descriptions_keep_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "fcr.yml"
    p.write_text('po:\n  material_descriptions:\n    mixed: "MIXED GOODS"\n', encoding="utf-8")
    cfg = load_config(p)
    assert cfg.po.description_for(MaterialType.MIXED) == "MIXED GOODS"
    assert cfg.po.description_for(MaterialType.NORMAL) == DEFAULT_MATERIAL_DESCRIPTIONS[MaterialType.NORMAL]


def test_empty_file_gives_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "fcr.yml"
    p.write_text("", encoding="utf-8")
    cfg = load_config(p)
    assert cfg == default_config()
    assert cfg.delimiters == DEFAULT_DELIMITERS


def test_description_variant(temp_workdir: Path):
    p = temp_workdir / "config" / "fcr.yml"
    p.write_text("fcr:\n  template_variant: description\n", encoding="utf-8")
    assert load_config(p).fcr.template_variant is TemplateVariant.DESCRIPTION


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "fcr.yml"
    p.write_text("fcr: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


def test_root_must_be_mapping(temp_workdir: Path):
    p = temp_workdir / "config" / "fcr.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(p)


@pytest.mark.parametrize(
    "text",
    [
        "fcr:\n  template_variant: fancy\n",
        "delimiters: [':']\n",
        "delimiters: []\n",
        "unknown_key: 1\n",
        "po:\n  material_descriptions:\n    normal: ''\n",
        "database:\n  port: '5432'\n",
    ],
)
def test_schema_violations(temp_workdir: Path, text: str):
    p = temp_workdir / "config" / "fcr.yml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)


def test_escaped_tab_delimiter(temp_workdir: Path):
    p = temp_workdir / "config" / "fcr.yml"
    p.write_text("delimiters: ['\\t', ';']\n", encoding="utf-8")
    assert load_config(p).delimiters == ("\t", ";")

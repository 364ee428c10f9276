import json

import pytest

from galaxy_image.config.io import (
    ConvertOptions,
    load_config,
    parse_convert_options,
    resolve_convert_options,
)
from galaxy_image.formats.image_format import ImageFormat


def test_load_config_json_returns_typed_options(tmp_path):
    config_path = tmp_path / "cfg.json"
    config_path.write_text(json.dumps({"format": "JPG", "quality": 75}), encoding="utf-8")

    options = load_config(config_path)

    assert options == ConvertOptions(image_format=ImageFormat.JPEG, quality=75)


def test_load_config_clamps_quality(tmp_path):
    config_path = tmp_path / "cfg.json"
    config_path.write_text(json.dumps({"quality": 250}), encoding="utf-8")

    assert load_config(config_path) == ConvertOptions(quality=100)


def test_load_config_null_document_is_empty(tmp_path):
    config_path = tmp_path / "cfg.json"
    config_path.write_text("null", encoding="utf-8")

    assert load_config(config_path) == ConvertOptions()


@pytest.mark.parametrize(
    "payload,message",
    [
        ([1, 2], "expected a mapping"),
        ({"qualty": 10}, "unknown config keys"),
        ({"format": "gif"}, "Unknown image format"),
        ({"quality": "high"}, "quality must be a real number"),
        ({"quality": True}, "quality must be a real number"),
    ],
)
def test_load_config_rejects_invalid_documents(tmp_path, payload, message):
    config_path = tmp_path / "cfg.json"
    config_path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ValueError, match=message) as exc:
        load_config(config_path)

    assert "cfg.json" in str(exc.value)


def test_load_config_unknown_extension_raises(tmp_path):
    config_path = tmp_path / "cfg.txt"
    config_path.write_text("x", encoding="utf-8")

    with pytest.raises(ValueError) as exc:
        load_config(config_path)

    assert ".txt" in str(exc.value)


def test_load_config_yaml_optional(tmp_path):
    config_path = tmp_path / "cfg.yaml"
    config_path.write_text("format: exr\nquality: 40\n", encoding="utf-8")

    try:
        import yaml  # noqa: F401
    except Exception:
        with pytest.raises(ImportError) as exc:
            load_config(config_path)
        msg = str(exc.value)
        assert "PyYAML" in msg
        assert "pip install" in msg
    else:
        assert load_config(config_path) == ConvertOptions(image_format=ImageFormat.EXR, quality=40)


def test_parse_convert_options_keeps_unset_fields_empty():
    assert parse_convert_options({}) == ConvertOptions()
    assert parse_convert_options({"format": None, "quality": None}) == ConvertOptions()


def test_resolve_convert_options_defaults():
    assert resolve_convert_options() == ConvertOptions(image_format=None, quality=90)


def test_resolve_convert_options_from_config():
    options = resolve_convert_options(ConvertOptions(image_format=ImageFormat.BMP, quality=30))
    assert options == ConvertOptions(image_format=ImageFormat.BMP, quality=30)


def test_resolve_convert_options_explicit_values_win():
    options = resolve_convert_options(
        ConvertOptions(image_format=ImageFormat.JPEG, quality=10), image_format="exr", quality=-5
    )
    assert options.image_format is ImageFormat.EXR
    assert options.quality == 1


def test_resolve_convert_options_rejects_unknown_format():
    with pytest.raises(ValueError, match="Unknown image format"):
        resolve_convert_options(image_format="gif")

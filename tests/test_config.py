import pytest

from winpick.config import ConfigLoader, Configuration, coerce_to_bool, merge
from winpick.models import WinpickError
from winpick.validation import ConfigField, ConfigItems, ConfigValidator, _find_similar_key, format_config_error

SCHEMA = ConfigItems(
    ConfigField("engine", str, default=""),
    ConfigField("detail", bool, default=True),
    ConfigField("max_length", (int, str), default="auto"),
    ConfigField("split_direction", str, default="r", choices=["", "l", "r"]),
    ConfigField("keys", dict, default={}),
)


def test_merge():
    merged = merge({"a": {"b": 1}, "l": [1]}, {"a": {"c": 2}, "l": [2], "x": 3})
    assert merged == {"a": {"b": 1, "c": 2}, "l": [1, 2], "x": 3}


def test_merge_overrides_scalars():
    assert merge({"a": 1, "b": {"c": 1}}, {"a": 2, "b": 3}) == {"a": 2, "b": 3}


def test_coerce_to_bool():
    assert coerce_to_bool(None, True) is True
    assert coerce_to_bool("") is False
    assert coerce_to_bool(" Off ") is False
    assert coerce_to_bool("disabled") is False
    assert coerce_to_bool("whatever") is True
    assert coerce_to_bool(0) is False
    assert coerce_to_bool([1]) is True


def test_schema_defaults(test_logger):
    conf = Configuration({"engine": "fuzzel"}, logger=test_logger, schema=SCHEMA)
    assert conf.get("engine") == "fuzzel"
    assert conf.get("max_length") == "auto"
    assert conf.get_bool("detail") is True
    assert conf.get_str("split_direction") == "r"
    assert conf.get("missing", "x") == "x"
    assert "max_length" not in conf


def test_typed_accessors(test_logger):
    conf = Configuration({"n": "12", "bad": "twelve", "flag": "no", "section": {"a": 1}, "notsection": 3}, logger=test_logger)
    assert conf.get_int("n") == 12
    assert conf.get_int("bad", 5) == 5
    assert conf.get_int("missing", 7) == 7
    assert conf.get_bool("flag") is False
    assert conf.get_bool("missing", True) is True
    assert conf.get_str("n") == "12"
    assert conf.get_dict("section") == {"a": 1}
    assert conf.get_dict("notsection") == {}
    assert conf.get_dict("missing") == {}


# Loading


@pytest.fixture
def loader(test_logger):
    return ConfigLoader(test_logger)


@pytest.mark.asyncio
async def test_load_missing_file(loader, tmp_path):
    assert await loader.load(tmp_path / "nope.toml") == {}


@pytest.mark.asyncio
async def test_load_file(loader, tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[winpick]\nplugins = ["windows"]\n\n[windows]\nengine = "rofi"\nmax_length = 40\n')
    config = await loader.load(str(path))
    assert config == {"winpick": {"plugins": ["windows"]}, "windows": {"engine": "rofi", "max_length": 40}}


@pytest.mark.asyncio
async def test_load_directory(loader, tmp_path):
    (tmp_path / "01-base.toml").write_text('[windows]\nengine = "rofi"\nprompt = "win"\n')
    (tmp_path / "02-override.toml").write_text('[windows]\nengine = "fuzzel"\n')
    (tmp_path / "notes.txt").write_text("not toml [")
    config = await loader.load(tmp_path)
    assert config == {"windows": {"engine": "fuzzel", "prompt": "win"}}


@pytest.mark.asyncio
async def test_load_include(loader, tmp_path, monkeypatch):
    monkeypatch.setenv("WINPICK_TEST_DIR", str(tmp_path))
    (tmp_path / "keys.toml").write_text('[windows.keys]\nkill = "Alt+d"\n')
    main = tmp_path / "config.toml"
    main.write_text('[winpick]\ninclude = ["$WINPICK_TEST_DIR/keys.toml"]\n\n[windows]\nfuzzy = false\n')
    config = await loader.load(main)
    assert config["windows"] == {"fuzzy": False, "keys": {"kill": "Alt+d"}}


@pytest.mark.asyncio
async def test_load_syntax_error(loader, tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[windows\nengine = rofi\n")
    with pytest.raises(WinpickError):
        await loader.load(path)


# Validation


def test_find_similar_key():
    known = ["engine", "max_length", "end_marker", "split_direction"]
    assert _find_similar_key("engin", known) == "engine"
    assert _find_similar_key("maxlength", known) == "max_length"
    assert _find_similar_key("xyz", known) is None


def test_format_config_error():
    assert format_config_error("windows", "keys", "bad") == "[windows] Config error for 'keys': bad"
    assert format_config_error("windows", "keys", "bad", "fix it").endswith("-> fix it")


def test_validate_types(test_logger):
    validator = ConfigValidator({"engine": 3, "detail": "on", "max_length": 30, "keys": []}, "windows", test_logger)
    errors = validator.validate(SCHEMA)
    assert len(errors) == 2
    assert "'engine'" in errors[0]
    assert "Expected str, got int" in errors[0]
    assert "'keys'" in errors[1]


def test_validate_bool_hint(test_logger):
    (error,) = ConfigValidator({"detail": "perhaps"}, "windows", test_logger).validate(SCHEMA)
    assert "true/false" in error


def test_validate_int_excludes_bool(test_logger):
    schema = ConfigItems(ConfigField("count", int))
    assert len(ConfigValidator({"count": True}, "windows", test_logger).validate(schema)) == 1
    assert ConfigValidator({"count": 3}, "windows", test_logger).validate(schema) == []


def test_validate_choices(test_logger):
    (error,) = ConfigValidator({"split_direction": "x"}, "windows", test_logger).validate(SCHEMA)
    assert "Invalid value 'x'" in error
    assert "'l'" in error


def test_validate_custom_validator(test_logger):
    schema = ConfigItems(ConfigField("size", int, validator=lambda value: [] if value > 0 else ["must be positive"]))
    assert ConfigValidator({"size": 3}, "windows", test_logger).validate(schema) == []
    assert ConfigValidator({"size": -1}, "windows", test_logger).validate(schema) == ["[windows] Config error for 'size': must be positive"]


def test_warn_unknown_keys(mock_log):
    validator = ConfigValidator({"engin": "rofi", "zzz": 1, "engine": "rofi"}, "windows", mock_log)
    warnings = validator.warn_unknown_keys(SCHEMA)
    assert warnings == [
        "[windows] Unknown option 'engin' (did you mean 'engine'?)",
        "[windows] Unknown option 'zzz' - will be ignored",
    ]
    assert mock_log.warning.call_count == 2

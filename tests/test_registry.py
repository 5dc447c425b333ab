import random
import re
from pathlib import Path

import pytest

from regexfuzz import Generator, PatternRegistry, register_pattern


EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


@pytest.fixture(autouse=True)
def isolated_registry(monkeypatch):
    monkeypatch.setattr(PatternRegistry, "_presets", dict(PatternRegistry._presets))


def test_builtin_presets():
    assert {"date", "url", "uuid", "ipv4", "hex_id"} <= set(PatternRegistry.list_patterns())


@pytest.mark.parametrize("name", ["date", "url", "uuid", "ipv4", "hex_id"])
def test_builtin_presets_generate_matches(name):
    preset = PatternRegistry.require(name)
    rx = re.compile(preset.pattern, preset.flags)
    gen = Generator.parse(preset.pattern, random.Random(0), flags=preset.flags)
    for _ in range(500):
        text = gen.generate_text()
        assert rx.fullmatch(text), f"{text!r} does not match preset {name}"


def test_register_and_get():
    preset = register_pattern("order_id", r"ORD-[0-9]{8}", description="Order number")
    assert PatternRegistry.get("order_id") is preset
    assert preset.flags == 0
    assert preset.description == "Order number"


def test_register_replaces_existing():
    register_pattern("thing", "a")
    register_pattern("thing", "b")
    assert PatternRegistry.get("thing").pattern == "b"


def test_get_unknown_returns_none():
    assert PatternRegistry.get("no_such_preset") is None


def test_require_unknown_lists_available():
    with pytest.raises(ValueError, match="Available: .*uuid"):
        PatternRegistry.require("no_such_preset")


def test_load_from_file():
    loaded = PatternRegistry.load_from_file(EXAMPLES_DIR / "custom_patterns.py")
    assert loaded == 4
    assert PatternRegistry.get("mac_address") is not None
    assert isinstance(PatternRegistry.get("hex_bytes").pattern, bytes)


def test_example_presets_generate_matches():
    PatternRegistry.load_from_file(EXAMPLES_DIR / "custom_patterns.py")
    for name in ("mac_address", "semver", "log_line", "hex_bytes"):
        preset = PatternRegistry.require(name)
        rx = re.compile(preset.pattern, preset.flags)
        gen = Generator.parse(preset.pattern, random.Random(1), flags=preset.flags)
        for _ in range(200):
            sample = gen.generate_bytes()
            if isinstance(preset.pattern, str):
                sample = sample.decode("utf-8")
            assert rx.fullmatch(sample), f"{sample!r} does not match preset {name}"


def test_load_missing_file(tmp_path):
    assert PatternRegistry.load_from_file(tmp_path / "missing.py") == 0


def test_load_counts_replaced_presets(tmp_path):
    presets = tmp_path / "override.py"
    presets.write_text(
        'register_pattern("date", r"[0-9]{8}")\n'
        'register_pattern("build_tag", r"v[0-9]+")\n',
        encoding="utf-8",
    )
    builtin_count = len(PatternRegistry.list_patterns())
    assert PatternRegistry.load_from_file(presets) == 2
    assert len(PatternRegistry.list_patterns()) == builtin_count + 1
    assert PatternRegistry.get("date").pattern == r"[0-9]{8}"

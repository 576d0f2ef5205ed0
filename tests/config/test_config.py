import pytest

from sngraph.config import (
    DEFAULT_GENERATION,
    DEFAULT_RADIO,
    GenerationConfig,
    RadioConfig,
    load_config,
)
from sngraph.errors import ConfigurationError


def test_defaults():
    assert DEFAULT_RADIO.bits_per_packet == 4096
    assert DEFAULT_RADIO.elec_energy == pytest.approx(100e-9)
    assert DEFAULT_RADIO.amp_energy == pytest.approx(100e-12)
    assert DEFAULT_GENERATION.attempts_per_node == 1000
    assert DEFAULT_GENERATION.attempt_budget(10) == 10000


def test_attempt_budget_never_zero():
    assert GenerationConfig(attempts_per_node=0).attempt_budget(5) == 1


def test_radio_validation():
    with pytest.raises(ValueError):
        RadioConfig(bits_per_packet=0)
    with pytest.raises(ValueError):
        RadioConfig(amp_energy=-1.0)


def test_load_full_config(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "radio:\n"
        "  bits_per_packet: 1024\n"
        "  elec_energy: 50e-9\n"
        "  amp_energy: 1.0e-10\n"
        "generation:\n"
        "  attempts_per_node: 10\n"
    )
    radio, generation = load_config(path)
    assert radio.bits_per_packet == 1024
    assert radio.elec_energy == pytest.approx(50e-9)
    assert radio.amp_energy == pytest.approx(1e-10)
    assert radio.storage_energy == DEFAULT_RADIO.storage_energy
    assert generation.attempts_per_node == 10


def test_missing_sections_use_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == (DEFAULT_RADIO, DEFAULT_GENERATION)


@pytest.mark.parametrize(
    "text, message",
    [
        ("- a\n- b\n", "mapping"),
        ("network: {}\n", "Unrecognized section"),
        ("radio:\n  volts: 3\n", "Unrecognized key"),
        ("radio: 5\n", "must be a mapping"),
        ("radio:\n  bits_per_packet: lots\n", "Invalid 'radio'"),
        ("radio:\n  elec_energy: -1\n", "Invalid 'radio'"),
        ("radio: [unclosed\n", "invalid YAML"),
    ],
)
def test_invalid_config(tmp_path, text, message):
    path = tmp_path / "bad.yaml"
    path.write_text(text)
    with pytest.raises(ConfigurationError, match=message) as exc_info:
        load_config(path)
    assert exc_info.value.path == str(path)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError, match="cannot read config"):
        load_config(tmp_path / "absent.yaml")


def test_invalid_utf8_config(tmp_path):
    path = tmp_path / "binary.yaml"
    path.write_bytes(b"radio:\n  bits_per_packet: \xff\n")
    with pytest.raises(ConfigurationError, match="not valid UTF-8"):
        load_config(path)

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import pytest

from starburst.core.config_loader import load_config, validate_config
from starburst.core.errors import ConfigError, ConfigLoadError

HASH = "ab" * 32


def _error(doc) -> ConfigError:
    with pytest.raises(ConfigError) as exc:
        validate_config(doc)
    return exc.value


def test_minimal_document() -> None:
    config = validate_config({"servers": []})
    assert config.devices == ()
    assert config.credential is None
    assert config.name is None


def test_full_document() -> None:
    config = validate_config(
        {
            "name": "Homelab",
            "password": {
                "hash": HASH,
                "salt": "somesalt",
                "advanced": {"memory": 1024, "iterations": 2, "parallelism": 4},
            },
            "servers": [
                {"name": "NAS", "hostname": "nas.local", "mac": "00:11:22:33:44:55"},
                {"name": "Router", "hostname": "192.168.1.1"},
            ],
        }
    )
    assert config.name == "Homelab"
    assert config.credential is not None
    assert config.credential.hash == HASH
    assert config.credential.memory_cost_kib == 1024
    assert config.credential.iterations == 2
    assert config.credential.parallelism == 4
    assert [d.name for d in config.devices] == ["NAS", "Router"]
    assert config.devices[0].mac == "00:11:22:33:44:55"
    assert config.devices[1].mac is None
    assert config.devices[1].controllable is False


def test_cost_defaults_applied_when_absent() -> None:
    config = validate_config({"password": {"hash": HASH, "salt": "s"}, "servers": []})
    assert config.credential is not None
    assert config.credential.memory_cost_kib == 4096
    assert config.credential.iterations == 3
    assert config.credential.parallelism == 1


def test_zero_costs_are_accepted() -> None:
    config = validate_config(
        {
            "password": {"hash": HASH, "salt": "s", "advanced": {"memory": 0, "iterations": 0, "parallelism": 0}},
            "servers": [],
        }
    )
    assert config.credential is not None
    assert config.credential.iterations == 0


def test_hash_is_normalized_to_lowercase() -> None:
    config = validate_config({"password": {"hash": HASH.upper(), "salt": "s"}, "servers": []})
    assert config.credential is not None
    assert config.credential.hash == HASH


@pytest.mark.parametrize("password", [{"hash": HASH}, {"salt": "s"}, {}])
def test_incomplete_password_disables_auth(password) -> None:
    config = validate_config({"password": password, "servers": []})
    assert config.credential is None


@pytest.mark.parametrize("doc", [None, [], "config", 3])
def test_root_must_be_object(doc) -> None:
    error = _error(doc)
    assert error.field == ""
    assert "must be an object" in str(error)


def test_servers_required() -> None:
    error = _error({})
    assert error.field == "servers"
    assert error.reason == "is required"


def test_null_is_a_type_error_not_a_default() -> None:
    error = _error({"name": None, "servers": []})
    assert error.field == "name"
    assert error.reason == "must be a string"


def test_null_password_section_rejected() -> None:
    error = _error({"password": None, "servers": []})
    assert error.field == "password"


def test_invalid_hash_rejected() -> None:
    error = _error({"password": {"hash": "xyz", "salt": "s"}, "servers": []})
    assert error.field == "password.hash"
    assert error.reason == "must be a 64-character hex string"
    assert "xyz" not in str(error)


@pytest.mark.parametrize("value", [float("nan"), "4096", True, 1.5, None])
def test_cost_parameter_must_be_integer(value) -> None:
    error = _error({"password": {"advanced": {"memory": value}}, "servers": []})
    assert error.field == "password.advanced.memory"
    assert error.reason == "must be an integer"


def test_negative_cost_parameter_rejected() -> None:
    error = _error({"password": {"advanced": {"parallelism": -1}}, "servers": []})
    assert error.field == "password.advanced.parallelism"
    assert error.reason == "must not be negative"


def test_device_errors_carry_index() -> None:
    error = _error(
        {
            "servers": [
                {"name": "A", "hostname": "a.local"},
                {"name": "B"},
            ]
        }
    )
    assert error.field == "servers[1].hostname"
    assert str(error) == 'Invalid config: "servers[1].hostname" is required'


def test_device_must_be_object() -> None:
    error = _error({"servers": [{"name": "A", "hostname": "a"}, "b"]})
    assert error.field == "servers[1]"
    assert error.reason == "must be an object"


def test_mac_must_be_string() -> None:
    error = _error({"servers": [{"name": "A", "hostname": "a", "mac": 1234}]})
    assert error.field == "servers[0].mac"


def test_empty_hostname_rejected() -> None:
    error = _error({"servers": [{"name": "A", "hostname": ""}]})
    assert error.field == "servers[0].hostname"
    assert error.reason == "must not be empty"


def test_first_violation_in_document_order_is_reported() -> None:
    error = _error(
        {
            "name": 7,
            "password": {"hash": "nope"},
            "servers": [{"name": 1, "hostname": "a"}, {}],
        }
    )
    assert error.field == "name"

    error = _error({"servers": [{"name": 1, "hostname": "a"}, {}]})
    assert error.field == "servers[0].name"


def test_unknown_keys_ignored() -> None:
    config = validate_config(
        {
            "theme": "dark",
            "servers": [{"name": "A", "hostname": "a", "ip": "10.0.0.1"}],
        }
    )
    assert len(config.devices) == 1


def test_model_is_immutable() -> None:
    config = validate_config({"servers": [{"name": "A", "hostname": "a"}]})
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.name = "changed"  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.devices[0].hostname = "b"  # type: ignore[misc]


def test_credential_repr_hides_secrets() -> None:
    config = validate_config({"password": {"hash": HASH, "salt": "pepper"}, "servers": []})
    text = repr(config)
    assert HASH not in text
    assert "pepper" not in text


def test_load_json_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"name": "Lab", "servers": [{"name": "A", "hostname": "a"}]}), encoding="utf-8")
    config = load_config(path)
    assert config.name == "Lab"
    assert config.devices[0].hostname == "a"


def test_load_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        """
name: Lab
servers:
  - name: A
    hostname: a.local
    mac: "00:11:22:33:44:55"
""",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.devices[0].mac == "00:11:22:33:44:55"


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("servers: []\nservers: []\n", encoding="utf-8")
    with pytest.raises(ConfigLoadError):
        load_config(path)


def test_invalid_json_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{servers: ", encoding="utf-8")
    with pytest.raises(ConfigLoadError):
        load_config(path)


def test_missing_file_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError) as exc:
        load_config(tmp_path / "missing.json")
    assert "does not exist" in str(exc.value)


def test_empty_salt_disables_auth() -> None:
    config = validate_config({"password": {"hash": HASH, "salt": ""}, "servers": []})
    assert config.credential is None


@pytest.mark.parametrize("hostname", ["-a", "--help"])
def test_hostname_option_like_rejected(hostname: str) -> None:
    error = _error({"servers": [{"name": "A", "hostname": hostname}]})
    assert error.field == "servers[0].hostname"
    assert error.reason == "must not start with '-'"

from __future__ import annotations

import base64

import pytest

from starburst.core import auth
from starburst.core.auth import authorize, extract_password
from starburst.core.credentials import hash_password
from starburst.core.model import Credential

SALT = "somesalt"
COSTS = {"memory_cost_kib": 64, "iterations": 1, "parallelism": 1}
CREDENTIAL = Credential(hash=hash_password("hunter2", SALT, **COSTS), salt=SALT, **COSTS)


def _basic(payload: str) -> str:
    return "Basic " + base64.b64encode(payload.encode("utf-8")).decode("ascii")


def test_correct_password_authorized() -> None:
    assert authorize(_basic("admin:hunter2"), CREDENTIAL) is True


def test_user_name_is_ignored() -> None:
    assert authorize(_basic("someone-else:hunter2"), CREDENTIAL) is True
    assert authorize(_basic(":hunter2"), CREDENTIAL) is True


def test_wrong_password_denied() -> None:
    assert authorize(_basic("admin:hunter3"), CREDENTIAL) is False


def test_missing_header_denied() -> None:
    assert authorize(None, CREDENTIAL) is False


@pytest.mark.parametrize(
    "header",
    [
        "",
        "Bearer abc",
        "basic " + base64.b64encode(b"admin:hunter2").decode("ascii"),
        "BASIC " + base64.b64encode(b"admin:hunter2").decode("ascii"),
        "Basic",
        base64.b64encode(b"admin:hunter2").decode("ascii"),
    ],
)
def test_wrong_scheme_denied_without_decoding(monkeypatch: pytest.MonkeyPatch, header: str) -> None:
    def fail(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr(auth.base64, "b64decode", fail)
    monkeypatch.setattr(auth, "verify_password", fail)
    assert authorize(header, CREDENTIAL) is False


@pytest.mark.parametrize("header", ["Basic !!!not-base64!!!", "Basic YWJj=", "Basic " + base64.b64encode(b"\xff\xfe:x").decode()])
def test_undecodable_payload_denied(header: str) -> None:
    assert authorize(header, CREDENTIAL) is False


def test_payload_without_separator_denied() -> None:
    assert extract_password(_basic("hunter2")) is None
    assert authorize(_basic("hunter2"), CREDENTIAL) is False


def test_password_may_contain_colons() -> None:
    assert extract_password(_basic("admin:pa:ss")) == "pa:ss"


def test_empty_password_extracted() -> None:
    assert extract_password(_basic("admin:")) == ""


def test_no_credential_denies_everything() -> None:
    assert authorize(_basic("admin:hunter2"), None) is False
    assert authorize(_basic("admin:"), None) is False

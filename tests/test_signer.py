import logging

import pytest

from app.errors import ValidationError
from app.services.signer import canonical_json, canonicalize, sign, stringify_value


# Digests below were computed independently (openssl dgst -sha256 -hmac) over
# the canonical JSON shown next to each case.
GOLDEN = [
    (
        {"subscription": "123456", "active_user": "1", "customer_phone": "+79001234567"},
        "secret",
        '{"active_user":"1","customer_phone":"+79001234567","subscription":"123456"}',
        "9b4332060fe9e2b6b20fc2af5f5ca6f7d242dcb0bea51ecd69dfc11faf610c81",
    ),
    (
        {},
        "key",
        "{}",
        "a777724d943eb48dc69bca8a4a6d57a04db3f9ec7e1de4e581e860265bdf3032",
    ),
    (
        {"b": "2", "a": "1"},
        "key",
        '{"a":"1","b":"2"}',
        "aea73baf4b3a160ed56be9af8e2190564c6e025c627315c3727629ce8daf2828",
    ),
    (
        {"subscription_id": "123456", "discount": 25},
        "secret",
        '{"discount":"25","subscription_id":"123456"}',
        "16d0d3f96fa5a6badb2d75a17826401a31307c622eb9cec8a41e0de57b2169c7",
    ),
    (
        {
            "subscription": "777",
            "date": "2030-01-15 10:00",
            "auth_type": "customer_email",
            "customer_email": "иван@пример.рф",
        },
        "ключ",
        '{"auth_type":"customer_email","customer_email":"иван@пример.рф","date":"2030-01-15 10:00","subscription":"777"}',
        "74d27fdac232c3344d7ca4280aad4525cedc70dcdc03c58c9de9e240dab74822",
    ),
    (
        {"subscription_id": 42, "discount": 12.5, "flag": True, "off": False},
        "secret",
        '{"discount":"12.5","flag":"true","off":"false","subscription_id":"42"}',
        "4f21b9d7deeaff2774b164d7c9cecc52a4f61b32fb1bddbb983d2a7dd3e4ce82",
    ),
]


@pytest.mark.parametrize("params,key,expected_json,expected_sig", GOLDEN)
def test_golden_signatures(params, key, expected_json, expected_sig):
    assert canonical_json(params) == expected_json
    assert sign(params, key) == expected_sig


def test_signature_is_lowercase_hex_sha256():
    sig = sign({"subscription": "1"}, "k")
    assert len(sig) == 64
    assert sig == sig.lower()
    int(sig, 16)


def test_key_order_does_not_matter():
    assert sign({"a": "1", "b": "2"}, "key") == sign({"b": "2", "a": "1"}, "key")


def test_changing_any_value_changes_signature():
    base = {"subscription": "123456", "active_user": "1", "customer_phone": "+79001234567"}
    reference = sign(base, "secret")
    for key in base:
        changed = dict(base, **{key: base[key] + "0"})
        assert sign(changed, "secret") != reference


def test_changing_key_changes_signature():
    params = {"subscription": "1"}
    assert sign(params, "secret") != sign(params, "secret2")


def test_non_ascii_is_not_escaped():
    text = canonical_json({"name": "Пётр ✓"})
    assert text == '{"name":"Пётр ✓"}'
    assert "\\u" not in text


def test_slashes_and_quotes_use_plain_json_escaping():
    assert canonical_json({"url": "https://a/b", "q": 'say "hi"'}) == '{"q":"say \\"hi\\"","url":"https://a/b"}'


@pytest.mark.parametrize(
    "value,expected",
    [
        ("text", "text"),
        (True, "true"),
        (False, "false"),
        (0, "0"),
        (100, "100"),
        (-3, "-3"),
        (25.0, "25"),
        (25.5, "25.5"),
        (0.1, "0.1"),
        (0.00001, "0.00001"),
        (1e-7, "1e-7"),
        (1e21, "1e+21"),
        (None, "null"),
    ],
)
def test_stringify_value(value, expected):
    assert stringify_value(value) == expected


def test_canonicalize_sorts_and_stringifies():
    out = canonicalize({"z": 1, "a": True, "m": "x"})
    assert list(out) == ["a", "m", "z"]
    assert out == {"a": "true", "m": "x", "z": "1"}


def test_sign_does_not_mutate_input():
    params = {"b": 2, "a": 1}
    sign(params, "key")
    assert params == {"b": 2, "a": 1}
    assert list(params) == ["b", "a"]


def test_lone_surrogate_value_is_rejected_before_signing():
    with pytest.raises(ValidationError, match="customer_email"):
        sign({"subscription": "1", "customer_email": "a\ud800b"}, "secret")


def test_lone_surrogate_secret_is_rejected():
    with pytest.raises(ValidationError, match="secretKey"):
        sign({"subscription": "1"}, "se\udfffcret")


def test_paired_surrogates_from_json_escapes_sign_normally():
    # "\ud83d\ude00" in a JSON body decodes to a single astral code point
    assert canonical_json({"name": "\U0001F600"}) == '{"name":"\U0001F600"}'
    assert len(sign({"name": "\U0001F600"}, "secret")) == 64


def test_sign_logs_payload_through_injected_logger(caplog):
    log = logging.getLogger("test_signer")
    caplog.set_level(logging.DEBUG, logger="test_signer")

    sig = sign({"b": "2", "a": "1"}, "s3cr3t", log=log)

    records = [r for r in caplog.records if r.name == "test_signer"]
    assert len(records) == 1
    assert records[0].payload == '{"a":"1","b":"2"}'
    assert records[0].signature == sig
    assert "s3cr3t" not in repr(vars(records[0]))

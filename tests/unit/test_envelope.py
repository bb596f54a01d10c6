"""Envelope construction, wire forms and accessors."""

import json

import pytest

from signed_envelope import Envelope, InvalidInputKind, NoSignature, sort_envelopes
from signed_envelope.encoding import utf8_to_hex


def test_construct_from_uri_scenario(signature):
    env = Envelope(f"_signed_name=hi&_params_sig=0x{signature}")

    assert env.keys == ["name"]
    assert env.signed["name"] == "hi"
    assert env.signature == signature
    assert env.uuid == signature[:40]
    assert env.verified is False


def test_construct_from_empty_dict():
    env = Envelope({})

    assert env.keys == []
    assert env.verified is False
    with pytest.raises(NoSignature):
        env.uuid


def test_construct_from_none():
    env = Envelope()
    assert env.signed == {}
    assert env.params == {}


def test_plain_dict_becomes_signed_bucket():
    env = Envelope({"text": "hello", "count": 3, "nested": {"a": [1, 2]}})

    assert env.signed == {"text": "hello", "count": "3", "nested": '{"a":[1,2]}'}
    assert env.params == {}


def test_payload_dict_uses_buckets():
    env = Envelope({"_signed_": {"text": "hello"}, "_params_": {"sig": "0xff", "extra": "1"}})

    assert env.signed == {"text": "hello"}
    assert env.params == {"sig": "ff", "extra": "1"}


def test_dict_without_signed_bucket_is_application_data():
    env = Envelope({"_params_": {"sig": "ff" * 40}})

    assert env.signed == {"_params_": '{"sig":"' + "ff" * 40 + '"}'}
    assert env.params == {}
    assert env.signature is None


def test_payload_dict_with_only_signed_bucket():
    env = Envelope({"_signed_": {"text": "hello"}})

    assert env.signed == {"text": "hello"}
    assert env.params == {}


@pytest.mark.parametrize(
    "data",
    [
        {"_signed_": "hello"},
        {"_signed_": {"text": "hello"}, "_params_": "sig"},
        {"_signed_": ["text", "hello"]},
    ],
)
def test_non_mapping_bucket_rejected(data):
    with pytest.raises(InvalidInputKind):
        Envelope(data)


def test_large_integers_keep_precision():
    env = Envelope({"amount": 2**80})
    assert env.signed["amount"] == str(2**80)


def test_input_dict_is_not_aliased():
    source = {"_signed_": {"text": "hello"}, "_params_": {}}
    env = Envelope(source)
    env.add_signed({"text": "changed"})

    assert source["_signed_"]["text"] == "hello"


def test_invalid_input_kind():
    with pytest.raises(InvalidInputKind):
        Envelope(42)
    with pytest.raises(TypeError):
        Envelope([("a", "b")])


def test_uri_round_trip(signature):
    env = Envelope({"text": "hello & goodbye", "emoji": "✓ ok", "n": 10})
    env.set_author_alias("alice")
    env.set_signature(signature)

    restored = Envelope.from_uri(env.uri)

    assert restored.payload == env.payload


def test_uri_round_trip_through_full_url(signature):
    env = Envelope({"q": "a?b#c"})
    env.set_signature(signature)

    restored = Envelope(f"https://example.com/api?x=1#{env.uri}")

    assert restored.payload == env.payload


def test_uri_ambiguous_keys_populate_both_buckets():
    env = Envelope("_signed__params_note=x")

    assert env.signed == {"_params_note": "x"}
    assert env.params == {"note": "x"}


def test_json_round_trip(signature):
    env = Envelope({"text": "hello", "n": 1})
    env.add_params({"app": "demo"})
    env.set_signature(signature)

    text = str(env)
    assert json.loads(text) == env.payload

    restored = Envelope.from_json(text)
    assert restored.payload == env.payload


def test_payload_is_a_copy_and_omits_cleared_params(signature):
    env = Envelope({"text": "hello"})
    env.set_signature(signature)
    snapshot = env.payload
    snapshot["_signed_"]["text"] = "tampered"
    snapshot["_params_"]["sig"] = "00"

    assert env.signed["text"] == "hello"
    assert env.signature == signature

    env.clear_signature()
    assert env.payload == {"_signed_": {"text": "hello"}, "_params_": {}}


def test_accessors_on_fresh_envelope():
    env = Envelope()

    assert env.author_alias is None
    assert env.author_address is None
    assert env.signature is None
    assert env.uri == ""


def test_author_alias_decodes_hex():
    env = Envelope({"_params_": {"alias": utf8_to_hex("alice")[2:]}})
    assert env.author_alias == "alice"


def test_envelope_copy_constructor(signature):
    env = Envelope({"text": "hello"})
    env.set_signature(signature)

    clone = Envelope(env)
    clone.add_signed({"text": "bye"})

    assert env.signed["text"] == "hello"
    assert env.signature == signature


def test_identity_depends_only_on_signature(signature):
    a = Envelope({"text": "one"})
    b = Envelope({"text": "two", "more": "data"})
    a.set_signature(signature)
    b.set_signature("0x" + signature)

    assert a.uuid == b.uuid
    assert a.compare(b) == 0


def test_compare_and_sort():
    low = Envelope()
    low.set_signature("1" * 64)
    mid = Envelope()
    mid.set_signature("5" * 64)
    high = Envelope()
    high.set_signature("a" * 64)

    assert low.compare(high) == -1
    assert high.compare(low) == 1
    assert sort_envelopes([high, low, mid]) == [low, mid, high]


def test_compare_unsigned_raises(signature):
    signed = Envelope()
    signed.set_signature(signature)

    with pytest.raises(NoSignature):
        signed.compare(Envelope())
    with pytest.raises(NoSignature):
        Envelope().compare(signed)


def test_from_json_plain_object_becomes_signed_bucket():
    env = Envelope.from_json('{"text": "hello", "n": 12345678901234567890}')

    assert env.signed == {"text": "hello", "n": "12345678901234567890"}
    assert env.params == {}


@pytest.mark.parametrize("text", ['["a", "b"]', '"_signed_a=1"', "42"])
def test_from_json_rejects_non_objects(text):
    with pytest.raises(InvalidInputKind):
        Envelope.from_json(text)

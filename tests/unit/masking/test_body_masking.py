"""
Tests for JSON body masking and the non-JSON fallback.
"""

import json

import pytest

from tracemask.core.masking import MASKED_BODY, mask_body
from tracemask.core.policy import MaskingPolicy, PrivacyLevel


class TestBodyMasking:
    """Test structural body masking."""

    def test_exempt_field_scenario(self):
        """Test exempt field survives while siblings and nested values are masked."""
        policy = MaskingPolicy(level=PrivacyLevel.PRIVATE, exempt_body_fields={"public"})
        body = b'{"secret":"a","public":"b","nested":{"x":"y"}}'

        assert mask_body(body, policy) == b'{"secret":"***","public":"b","nested":{"x":"***"}}'

    def test_exempt_field_keeps_whole_subtree(self):
        """Test exemption short-circuits recursion into nested data."""
        policy = MaskingPolicy(level=PrivacyLevel.PRIVATE, exempt_body_fields={"Profile"})
        body = json.dumps({
            "profile": {"password": "hunter2", "cards": [{"number": "4111"}]},
            "password": "hunter2",
        }).encode()

        masked = json.loads(mask_body(body, policy))
        assert masked["profile"] == {"password": "hunter2", "cards": [{"number": "4111"}]}
        assert masked["password"] == "***"

    def test_arrays_are_recursed_not_exempted(self):
        """Test array elements are masked and object keys inside them still honor exemptions."""
        policy = MaskingPolicy(level=PrivacyLevel.PRIVATE, exempt_body_fields={"id"})
        body = b'{"items":[{"id":1,"name":"a"},{"id":2,"name":"b"}],"ids":[1,2,3]}'

        masked = json.loads(mask_body(body, policy))
        assert masked == {
            "items": [{"id": 1, "name": "***"}, {"id": 2, "name": "***"}],
            "ids": ["***", "***", "***"],
        }

    def test_all_scalar_types_masked(self):
        """Test numbers, booleans and null become the sentinel."""
        body = b'{"n":1.5,"b":false,"z":null,"s":"x"}'
        masked = json.loads(mask_body(body, MaskingPolicy.private()))
        assert masked == {"n": "***", "b": "***", "z": "***", "s": "***"}

    def test_top_level_array(self):
        """Test a JSON array body is masked element-wise."""
        assert mask_body(b'[1,"two",{"k":3}]', MaskingPolicy.private()) == b'["***","***",{"k":"***"}]'

    def test_non_ascii_content_preserved_when_exempt(self):
        """Test exempt unicode values survive re-serialization unescaped."""
        policy = MaskingPolicy(level=PrivacyLevel.PRIVATE, exempt_body_fields={"city"})
        body = '{"city":"Zürich","name":"Zoë"}'.encode("utf-8")
        assert mask_body(body, policy) == '{"city":"Zürich","name":"***"}'.encode("utf-8")

    @pytest.mark.parametrize("body", [
        b"plain text payload",
        b"\x89PNG\r\n\x1a\n\x00\x00",
        b"\xff\xfe\xfa",
        b'{"unterminated": ',
        b"",
    ])
    def test_non_json_body_becomes_sentinel(self, body: bytes):
        """Test bodies that fail to parse are replaced by the sentinel, not dropped."""
        masked = mask_body(body, MaskingPolicy.private())
        assert masked == b"***"
        assert masked == MASKED_BODY

    def test_masked_body_is_valid_json(self):
        """Test masking never turns valid JSON into invalid JSON."""
        body = b'{"a":[{"b":{"c":[1,2,{"d":"e"}]}}],"f":"\\u00e9\\n"}'
        masked = mask_body(body, MaskingPolicy.private())
        json.loads(masked)

    def test_none_level_returns_identical_bytes(self):
        """Test body is passed through byte-for-byte."""
        body = b'{"password": "hunter2"}  '
        assert mask_body(body, MaskingPolicy.none()) is body

    def test_sensitive_level_drops_body(self):
        """Test sensitive never emits a body."""
        assert mask_body(b'{"a":1}', MaskingPolicy.sensitive()) is None
        assert mask_body(b"not json", MaskingPolicy.sensitive()) is None

    def test_missing_body_stays_missing(self):
        """Test absent bodies are not replaced with the sentinel."""
        assert mask_body(None, MaskingPolicy.private()) is None

    @pytest.mark.parametrize("body", [
        b"[" * 100000,
        b'{"a":' * 100000,
    ])
    def test_overly_nested_body_becomes_sentinel(self, body: bytes):
        """Test input nested past the parser's limit falls back to the sentinel."""
        assert mask_body(body, MaskingPolicy.private()) == MASKED_BODY

    def test_deep_valid_json_is_masked(self):
        """Test deeply nested JSON the parser accepts is still masked."""
        depth = 600
        body = ("[" * depth + '"secret"' + "]" * depth).encode()

        masked = mask_body(body, MaskingPolicy.private())

        assert masked == ("[" * depth + '"***"' + "]" * depth).encode()

    def test_deep_exempt_subtree_never_raises(self):
        """Test an exempt subtree too deep to serialize collapses to the sentinel."""
        policy = MaskingPolicy(level=PrivacyLevel.PRIVATE, exempt_body_fields={"tree"})
        depth = 900
        body = ('{"tree":' + "[" * depth + "1" + "]" * depth + "}").encode()

        masked = mask_body(body, policy)

        assert masked == MASKED_BODY or masked.startswith(b'{"tree":[[[')

    def test_lone_surrogate_becomes_sentinel(self):
        """Test exempt strings that cannot be re-encoded as UTF-8 fall back to the sentinel."""
        policy = MaskingPolicy(level=PrivacyLevel.PRIVATE, exempt_body_fields={"name"})
        assert mask_body(b'{"name":"\\ud800"}', policy) == MASKED_BODY

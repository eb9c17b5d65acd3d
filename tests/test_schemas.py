import pytest

from airdrop_claim.schemas.bases import VerificationStatus
from airdrop_claim.schemas.https import ClaimRequest, parse_uint256


class TestParseUntrusted:
    """Building claims from arbitrary JSON bodies."""

    def test_valid_body(self):
        claim = ClaimRequest.parse_untrusted({"token": "0xabc", "nonce": 5, "extra": True})
        assert claim.token == "0xabc"
        assert claim.nonce_key == "5"

    @pytest.mark.parametrize("payload", [None, [], "text", 42])
    def test_non_object_is_empty_claim(self, payload):
        claim = ClaimRequest.parse_untrusted(payload)
        assert claim.token is None
        assert claim.signature is None

    def test_malformed_fields_kept_as_posted(self):
        payload = {"token": 1, "claimer": ["0x"], "amount": {"value": 1}, "nonce": 1.5, "signature": 65}
        claim = ClaimRequest.parse_untrusted(payload)

        assert claim.token == 1
        assert claim.claimer == ["0x"]
        assert claim.amount == {"value": 1}
        assert claim.signature == 65


class TestNonceKey:
    """One ledger key per uint256 value."""

    @pytest.mark.parametrize("nonce", [42, "42", "042", " 42", "0x2a", "0x2A", "0X2a"])
    def test_spellings_share_a_key(self, nonce):
        assert ClaimRequest(nonce=nonce).nonce_key == "42"

    @pytest.mark.parametrize("nonce", [None, "abc", -1, 1.5, True, {"x": 1}, "0x", str(2**256)])
    def test_invalid_nonce_never_looks_like_a_number(self, nonce):
        key = ClaimRequest(nonce=nonce).nonce_key
        assert key.startswith("invalid:")
        assert not key.isdigit()


class TestParseUint256:
    @pytest.mark.parametrize("value, expected", [
        (0, 0),
        ("17", 17),
        ("0xff", 255),
        (2**256 - 1, 2**256 - 1),
    ])
    def test_accepted(self, value, expected):
        assert parse_uint256(value) == expected

    @pytest.mark.parametrize("value", [None, False, -5, 2**256, "1e3", "12abc", "", 3.0, []])
    def test_rejected(self, value):
        assert parse_uint256(value) is None


class TestVerificationStatus:
    def test_http_messages_round_trip(self):
        for status in VerificationStatus:
            if status is VerificationStatus.SUCCESS:
                continue
            assert VerificationStatus.from_http_message(status.http_message) is status

    def test_unknown_message(self):
        assert VerificationStatus.from_http_message("Teapot") is None
        assert VerificationStatus.from_http_message("OK") is None

"""
EVM Claim Verification Helpers

Off-chain verification of signed claims. All cryptographic operations are
performed in-process using ``eth_account``; no RPC calls are made.

Current coverage
----------------
recover_claim_signer
    Rebuild the EIP-712 ``Claim`` struct hash under one signing domain and
    recover the signer address from a 65-byte signature. Never raises:
    failures come back as a ``RecoveryResult`` with ``recovered=False``.

verify_claim
    Run the full, ordered list of claim checks (token, claimer, amount,
    deadline, nonce pre-check, signature under each accepted domain) and
    return an ``EVMVerificationResult`` describing the first failure, or
    success.
"""

import time
from typing import Any, Dict, Optional, Sequence

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import is_address, to_checksum_address

from .standards import EIP712Domain, ClaimMessage, ClaimTypedData
from .schemas import EVMVerificationResult, RecoveryResult
from ...schemas.bases import VerificationStatus
from ...schemas.https import ClaimRequest, parse_uint256

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _is_valid_evm_address(addr: Any) -> bool:
    """
    Check whether ``addr`` is a syntactically valid EVM address.

    Accepts 40-hex-digit strings, with or without the 0x prefix, in
    all-lower, all-upper or valid EIP-55 checksum case. Mixed case with a wrong checksum is rejected.

    Args:
        addr: Candidate address string.

    Returns:
        ``True`` if ``addr`` is a usable address, ``False`` otherwise.
    """
    return isinstance(addr, str) and is_address(addr)


def _decode_signature(signature: Optional[str]) -> bytes:
    """
    Decode a 0x-prefixed hex signature into its 65 raw bytes (r || s || v).

    Raises:
        ValueError: If the signature is missing, not hex, or not 65 bytes long,
            or if its recovery id is not one of 0, 1, 27, 28.
    """
    if not isinstance(signature, str):
        raise ValueError("Signature must be a hex string")
    hex_str = signature[2:] if signature[:2].lower() == "0x" else signature
    if len(hex_str) != 130:
        raise ValueError(f"Signature must be 65 bytes, got {len(hex_str) // 2}")
    try:
        raw = bytes.fromhex(hex_str)
    except ValueError:
        raise ValueError("Signature is not valid hexadecimal")
    if raw[64] not in (0, 1, 27, 28):
        raise ValueError(f"Invalid recovery id: {raw[64]}")
    return raw


def build_claim_typed_data(
    *,
    domain: EIP712Domain,
    claimer: str,
    amount: int,
    nonce: int,
    deadline: int,
) -> Dict[str, Any]:
    """
    Build the EIP-712 typed-data dict for a claim under ``domain``.

    Uses the same ``ClaimTypedData`` dataclass as the signing path so that the
    hash computed here is identical to the one signed by ``sign_claim``.

    Returns:
        ``dict`` compatible with ``eth_account.messages.encode_typed_data``.
    """
    message = ClaimMessage(
        claimer=to_checksum_address(claimer),
        amount=amount,
        nonce=nonce,
        deadline=deadline,
    )
    return ClaimTypedData(domain=domain, message=message).to_dict()


# ---------------------------------------------------------------------------
# Signer recovery
# ---------------------------------------------------------------------------

def recover_claim_signer(
    domain: EIP712Domain,
    message: ClaimMessage,
    signature: Optional[str],
) -> RecoveryResult:
    """
    Recover the address that signed ``message`` under ``domain``.

    Args:
        domain:     Candidate EIP-712 domain.
        message:    Claim message with integer uint256 fields.
        signature:  0x-prefixed 65-byte hex signature (v may be 0/1 or 27/28).

    Returns:
        ``RecoveryResult``. ``recovered=False`` with ``error`` set when the
        signature is malformed, has an invalid recovery id, or the curve point
        cannot be recovered.
    """
    try:
        raw = _decode_signature(signature)
        signable = encode_typed_data(
            full_message=ClaimTypedData(domain=domain, message=message).to_dict()
        )
        address = Account.recover_message(signable, signature=raw)
    except Exception as e:
        return RecoveryResult(recovered=False, domain_name=domain.name, error=str(e))

    return RecoveryResult(
        recovered=True,
        address=to_checksum_address(address),
        domain_name=domain.name,
    )


# ---------------------------------------------------------------------------
# Claim verification
# ---------------------------------------------------------------------------

def verify_claim(
    request: ClaimRequest,
    *,
    expected_token: str,
    expected_amount: int,
    domains: Sequence[EIP712Domain],
    current_time: Optional[int] = None,
    ledger=None,
) -> EVMVerificationResult:
    """
    Verify a claim request against the server's fixed token and amount.

    Performs the following checks in order, returning on the first failure:

    1. **Token** -- ``request.token`` equals ``expected_token`` ignoring case.
    2. **Claimer** -- ``request.claimer`` is a syntactically valid address.
    3. **Amount** -- ``request.amount`` is textually the expected base-unit
       amount (no tolerance, no rounding, no leading zeros).
    4. **Deadline** -- ``current_time <= deadline`` (inclusive boundary).
    5. **Nonce pre-check** -- the nonce is not already in ``ledger``. This
       does not reserve anything; a claim that later fails authentication
       must not burn the nonce for its legitimate holder.
    6. **Signature** -- for each domain in ``domains`` (in order) the signer
       is recovered; the first domain whose signer equals the claimer wins.

    Args:
        request:         Parsed, untrusted claim.
        expected_token:  Configured token contract address.
        expected_amount: Fixed claim amount in base units.
        domains:         Accepted signing domains, in match order.
        current_time:    Unix timestamp for the deadline check. Defaults to
                         ``int(time.time())``.
        ledger:          Optional ``NonceLedger`` used for the pre-check.

    Returns:
        ``EVMVerificationResult``; ``is_valid=True`` and ``status=SUCCESS``
        only when every check passes.

    Example::

        result = verify_claim(
            request,
            expected_token="0xad6a4f5af2dadde7801eabea764a7d4cf0ef7cb3",
            expected_amount=1000 * 10**18,
            domains=DomainResolver(chain_id=137).candidates(),
        )
        assert result.is_success()
    """
    now = int(current_time) if current_time is not None else int(time.time())

    def _fail(
        status: VerificationStatus,
        message: str,
        error_details: Optional[Dict[str, Any]] = None,
    ) -> EVMVerificationResult:
        return EVMVerificationResult(
            status=status,
            is_valid=False,
            message=message,
            error_details=error_details,
            claimer=request.claimer if isinstance(request.claimer, str) else None,
            nonce=request.nonce_key,
        )

    # ------------------------------------------------------------------
    # 1. Token
    # ------------------------------------------------------------------
    token = request.token if isinstance(request.token, str) else ""
    if token.lower() != expected_token.lower():
        return _fail(
            VerificationStatus.BAD_TOKEN,
            "Token does not match the configured token.",
            {"token": request.token},
        )

    # ------------------------------------------------------------------
    # 2. Claimer address
    # ------------------------------------------------------------------
    if not _is_valid_evm_address(request.claimer):
        return _fail(
            VerificationStatus.BAD_CLAIMER,
            "Invalid claimer address.",
            {"claimer": request.claimer},
        )

    claimer = to_checksum_address(request.claimer)

    # ------------------------------------------------------------------
    # 3. Amount (exact base units)
    # ------------------------------------------------------------------
    amount = request.amount
    if isinstance(amount, bool) or not isinstance(amount, (int, str)) or str(amount) != str(expected_amount):
        return _fail(
            VerificationStatus.BAD_AMOUNT,
            f"Amount must be exactly {expected_amount} base units.",
            {"amount": request.amount, "expected": str(expected_amount)},
        )

    # ------------------------------------------------------------------
    # 4. Deadline
    # ------------------------------------------------------------------
    deadline = parse_uint256(request.deadline)
    if deadline is None or now > deadline:
        return _fail(
            VerificationStatus.EXPIRED,
            "Claim deadline has passed.",
            {"deadline": request.deadline, "current_time": now},
        )

    # ------------------------------------------------------------------
    # 5. Nonce pre-check
    # ------------------------------------------------------------------
    if ledger is not None and ledger.contains(request.nonce_key):
        return _fail(
            VerificationStatus.NONCE_USED,
            "Nonce has already been used.",
            {"nonce": request.nonce_key},
        )

    # ------------------------------------------------------------------
    # 6. Signature under each accepted domain
    # ------------------------------------------------------------------
    nonce = parse_uint256(request.nonce)
    if nonce is None:
        return _fail(
            VerificationStatus.BAD_SIGNATURE,
            "Nonce is not a uint256, the claim cannot have been signed.",
            {"nonce": request.nonce},
        )

    message = ClaimMessage(
        claimer=claimer,
        amount=int(expected_amount),
        nonce=nonce,
        deadline=deadline,
    )
    match: Optional[RecoveryResult] = None
    errors = []
    for domain in domains:
        attempt = recover_claim_signer(domain, message, request.signature)
        if attempt.matches(claimer):
            match = attempt
            break
        if attempt.error:
            errors.append(attempt.error)

    if match is None:
        return _fail(
            VerificationStatus.BAD_SIGNATURE,
            "Signature does not recover to the claimer under any accepted domain.",
            {
                "domains": [domain.name for domain in domains],
                "errors": errors,
            },
        )

    return EVMVerificationResult(
        status=VerificationStatus.SUCCESS,
        is_valid=True,
        message="Claim verified.",
        claimer=request.claimer,
        nonce=request.nonce_key,
        domain_name=match.domain_name,
        recovered_address=match.address,
    )

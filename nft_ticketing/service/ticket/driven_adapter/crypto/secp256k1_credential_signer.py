"""
Ethereum-compatible personal_sign over check-in credential messages.

digest    = keccak256("\\x19Ethereum Signed Message:\\n" + len(message) + message)
signature = r || s || v  (65 bytes, low-s, v in {27, 28})
address   = last 20 bytes of keccak256(uncompressed public key without 0x04)
"""

import hashlib
from typing import List

from Crypto.Hash import keccak
from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.errors import MalformedPointError
from ecdsa.numbertheory import SquareRootError
from ecdsa.util import MalformedSignature, sigdecode_string, sigencode_string_canonize

from nft_ticketing.platform.exception.exceptions import InvalidArgumentError
from nft_ticketing.service.ticket.app.interface.i_credential_signer import ICredentialSigner


_SIGNED_MESSAGE_PREFIX = b'\x19Ethereum Signed Message:\n'


def keccak256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=data).digest()


def eth_message_digest(message: str) -> bytes:
    payload = message.encode()
    return keccak256(_SIGNED_MESSAGE_PREFIX + str(len(payload)).encode() + payload)


def public_key_to_address(verifying_key: VerifyingKey) -> str:
    return '0x' + keccak256(verifying_key.to_string())[-20:].hex()


class Secp256k1CredentialSigner(ICredentialSigner):
    def __init__(self, *, private_key_hex: str) -> None:
        key_hex = private_key_hex.removeprefix('0x')
        try:
            self._signing_key = SigningKey.from_string(bytes.fromhex(key_hex), curve=SECP256k1)
        except (ValueError, MalformedPointError):
            raise InvalidArgumentError('CHECKIN_SIGNING_KEY is not a valid secp256k1 private key')
        self._address = public_key_to_address(self._signing_key.get_verifying_key())

    @property
    def address(self) -> str:
        return self._address

    def sign_message(self, message: str) -> str:
        digest = eth_message_digest(message)
        rs = self._signing_key.sign_digest_deterministic(
            digest, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize
        )
        # Recovery id: position of our key among the recovered candidates (even-y first)
        candidates = VerifyingKey.from_public_key_recovery_with_digest(
            rs, digest, SECP256k1, sigdecode=sigdecode_string
        )
        own = self._signing_key.get_verifying_key().to_string()
        recovery_id = next(i for i, vk in enumerate(candidates) if vk.to_string() == own)
        return '0x' + (rs + bytes([27 + recovery_id])).hex()

    def recover_addresses(self, message: str, signature: str) -> List[str]:
        try:
            raw = bytes.fromhex(signature.removeprefix('0x'))
        except ValueError:
            return []
        if len(raw) != 65:
            return []

        rs, v = raw[:64], raw[64]
        recovery_id = v - 27 if v >= 27 else v
        try:
            candidates = VerifyingKey.from_public_key_recovery_with_digest(
                rs, eth_message_digest(message), SECP256k1, sigdecode=sigdecode_string
            )
        except (MalformedPointError, MalformedSignature, SquareRootError, ValueError):
            return []
        if not 0 <= recovery_id < len(candidates):
            return []
        return [public_key_to_address(candidates[recovery_id])]

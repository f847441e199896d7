# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
secp256r1 (NIST P-256) ECDSA signature scheme.

P-256 is the curve used by passkeys, secure enclaves and most HSMs, which
makes it a common choice for one or two members of a committee that otherwise
uses Ed25519. The encoding mirrors secp256k1_ecdsa: SHA-256 message hashing,
deterministic low-s signatures of 64 bytes and 33-byte compressed public keys.

Examples:
    Mixing with an Ed25519 member::

        from multisig_sdk import ed25519, secp256r1_ecdsa

        members = [
            ed25519.PrivateKey.random().public_key(),
            secp256r1_ecdsa.PrivateKey.random().public_key(),
        ]
"""

from __future__ import annotations

import hashlib
import unittest
from typing import cast

from ecdsa import NIST256p, SigningKey, VerifyingKey, util

from . import asymmetric_crypto
from .asymmetric_crypto import SignatureScheme
from .bcs import Deserializer, Serializer
from .errors import DeserializationError


class PrivateKey(asymmetric_crypto.PrivateKey):
    LENGTH: int = 32
    SCHEME: SignatureScheme = SignatureScheme.SECP256R1

    key: SigningKey

    def __init__(self, key: SigningKey):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.key.to_string() == other.key.to_string()

    def __str__(self):
        return PrivateKey.format_private_key(self.hex(), self.SCHEME)

    @staticmethod
    def from_hex(value: str | bytes) -> PrivateKey:
        parsed_value = PrivateKey.parse_hex_input(value, PrivateKey.SCHEME)
        if len(parsed_value) != PrivateKey.LENGTH:
            raise ValueError("Length mismatch")
        return PrivateKey(SigningKey.from_string(parsed_value, NIST256p, hashlib.sha256))

    @staticmethod
    def from_str(value: str) -> PrivateKey:
        return PrivateKey.from_hex(value)

    def hex(self) -> str:
        return f"0x{self.key.to_string().hex()}"

    def public_key(self) -> PublicKey:
        return PublicKey(self.key.verifying_key)

    @staticmethod
    def random() -> PrivateKey:
        return PrivateKey(SigningKey.generate(curve=NIST256p, hashfunc=hashlib.sha256))

    def sign(self, data: bytes) -> Signature:
        sig = self.key.sign_deterministic(data, hashfunc=hashlib.sha256)
        n = NIST256p.generator.order()
        r, s = util.sigdecode_string(sig, n)
        if s > (n // 2):
            sig = util.sigencode_string(r, n - s, n)
        return Signature(sig)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PrivateKey:
        key = deserializer.to_bytes()
        if len(key) != PrivateKey.LENGTH:
            raise DeserializationError("Length mismatch")

        return PrivateKey(SigningKey.from_string(key, NIST256p, hashlib.sha256))

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.key.to_string())


class PublicKey(asymmetric_crypto.PublicKey):
    LENGTH: int = 33
    SCHEME: SignatureScheme = SignatureScheme.SECP256R1

    key: VerifyingKey

    def __init__(self, key: VerifyingKey):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.to_crypto_bytes() == other.to_crypto_bytes()

    def __hash__(self) -> int:
        return hash((self.SCHEME, self.to_crypto_bytes()))

    def __str__(self) -> str:
        return self.hex()

    @staticmethod
    def from_str(value: str) -> PublicKey:
        if value[0:2] == "0x":
            value = value[2:]
        return PublicKey.from_crypto_bytes(bytes.fromhex(value))

    @staticmethod
    def from_crypto_bytes(indata: bytes) -> PublicKey:
        if len(indata) not in (33, 64, 65):
            raise DeserializationError("Length mismatch")
        try:
            key = VerifyingKey.from_string(indata, NIST256p, hashlib.sha256)
        except Exception as e:
            raise DeserializationError(f"Invalid secp256r1 public key: {e}") from e
        return PublicKey(key)

    def hex(self) -> str:
        return f"0x{self.to_crypto_bytes().hex()}"

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        try:
            signature = cast(Signature, signature)
            n = NIST256p.generator.order()
            _, s = util.sigdecode_string(signature.data(), n)
            if s > (n // 2):
                return False
            self.key.verify(signature.data(), data)
        except Exception:
            return False
        return True

    def to_crypto_bytes(self) -> bytes:
        return self.key.to_string("compressed")

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PublicKey:
        key = deserializer.to_bytes()
        if len(key) != PublicKey.LENGTH:
            raise DeserializationError("Expected a 33-byte compressed public key")
        return PublicKey.from_crypto_bytes(key)

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.to_crypto_bytes())


class Signature(asymmetric_crypto.Signature):
    LENGTH: int = 64
    SCHEME: SignatureScheme = SignatureScheme.SECP256R1

    signature: bytes

    def __init__(self, signature: bytes):
        self.signature = signature

    def __eq__(self, other: object):
        if not isinstance(other, Signature):
            return NotImplemented
        return self.signature == other.signature

    def __hash__(self) -> int:
        return hash((self.SCHEME, self.signature))

    def __str__(self) -> str:
        return f"0x{self.signature.hex()}"

    @staticmethod
    def from_crypto_bytes(indata: bytes) -> Signature:
        if len(indata) != Signature.LENGTH:
            raise DeserializationError("Length mismatch")
        return Signature(indata)

    def data(self) -> bytes:
        return self.signature

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Signature:
        return Signature.from_crypto_bytes(deserializer.to_bytes())

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.signature)


class Test(unittest.TestCase):
    def test_sign_and_verify(self):
        private_key = PrivateKey.random()
        public_key = private_key.public_key()

        signature = private_key.sign(b"test_message")
        self.assertTrue(public_key.verify(b"test_message", signature))
        self.assertFalse(public_key.verify(b"other_message", signature))

    def test_deterministic(self):
        private_key = PrivateKey.from_str(
            "secp256r1-priv-0x306fa009600e27c09d2659145ce1785249360dd5fb992da01a578fe67ed607f4"
        )
        self.assertEqual(private_key.sign(b"data"), private_key.sign(b"data"))

    def test_curve_is_not_secp256k1(self):
        from . import secp256k1_ecdsa

        secret = "0x306fa009600e27c09d2659145ce1785249360dd5fb992da01a578fe67ed607f4"
        r1_key = PrivateKey.from_str(secret)
        k1_key = secp256k1_ecdsa.PrivateKey.from_str(secret)
        self.assertNotEqual(
            r1_key.public_key().to_crypto_bytes(),
            k1_key.public_key().to_crypto_bytes(),
        )

    def test_public_key_serialization(self):
        public_key = PrivateKey.random().public_key()

        ser = Serializer()
        public_key.serialize(ser)
        ser_public_key = PublicKey.deserialize(Deserializer(ser.output()))
        self.assertEqual(public_key, ser_public_key)
        self.assertEqual(len(public_key.to_crypto_bytes()), PublicKey.LENGTH)

    def test_serialized_key_must_be_compressed(self):
        public_key = PrivateKey.random().public_key()

        ser = Serializer()
        ser.to_bytes(public_key.key.to_string("raw"))
        with self.assertRaises(DeserializationError):
            PublicKey.deserialize(Deserializer(ser.output()))

# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
secp256k1 ECDSA signature scheme.

Committee members holding Bitcoin/Ethereum-style keys sign with ECDSA over
secp256k1. Messages are hashed with SHA-256, signatures are deterministic
(RFC 6979) and normalized to low-s form, and public keys travel in 33-byte
SEC1 compressed form.

Cryptographic Properties:
- Curve: secp256k1
- Hash Function: SHA-256
- Key Sizes: 32-byte private keys, 33-byte compressed public keys
- Signature Size: 64 bytes (r || s)

Examples:
    Sign and verify::

        private_key = PrivateKey.random()
        signature = private_key.sign(b"Hello")
        assert private_key.public_key().verify(b"Hello", signature)

Note:
    Verification rejects high-s signatures, so each message/key pair has a
    single valid signature encoding.
"""

from __future__ import annotations

import hashlib
import unittest
from typing import cast

from ecdsa import SECP256k1, SigningKey, VerifyingKey, util

from . import asymmetric_crypto
from .asymmetric_crypto import SignatureScheme
from .bcs import Deserializer, Serializer
from .errors import DeserializationError


class PrivateKey(asymmetric_crypto.PrivateKey):
    """secp256k1 signing key.

    Attributes:
        LENGTH: The byte length of secp256k1 private keys (32)
        key: The underlying ECDSA signing key object
    """

    LENGTH: int = 32
    SCHEME: SignatureScheme = SignatureScheme.SECP256K1

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
        return PrivateKey(
            SigningKey.from_string(parsed_value, SECP256k1, hashlib.sha256)
        )

    @staticmethod
    def from_str(value: str) -> PrivateKey:
        return PrivateKey.from_hex(value)

    def hex(self) -> str:
        return f"0x{self.key.to_string().hex()}"

    def public_key(self) -> PublicKey:
        return PublicKey(self.key.verifying_key)

    @staticmethod
    def random() -> PrivateKey:
        return PrivateKey(SigningKey.generate(curve=SECP256k1, hashfunc=hashlib.sha256))

    def sign(self, data: bytes) -> Signature:
        """Sign data with deterministic ECDSA and return a low-s signature."""
        sig = self.key.sign_deterministic(data, hashfunc=hashlib.sha256)
        n = SECP256k1.generator.order()
        r, s = util.sigdecode_string(sig, n)
        # The signature is valid for both s and -s, normalization ensures that only s < n // 2 is valid
        if s > (n // 2):
            mod_s = (s * -1) % n
            sig = util.sigencode_string(r, mod_s, n)
        return Signature(sig)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PrivateKey:
        key = deserializer.to_bytes()
        if len(key) != PrivateKey.LENGTH:
            raise DeserializationError("Length mismatch")

        return PrivateKey(SigningKey.from_string(key, SECP256k1, hashlib.sha256))

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.key.to_string())


class PublicKey(asymmetric_crypto.PublicKey):
    """secp256k1 verifying key, encoded as 33 compressed bytes.

    from_crypto_bytes also accepts the 65-byte uncompressed (0x04-prefixed)
    and 64-byte raw forms so keys exported by other tools can be imported.
    """

    LENGTH: int = 33
    SCHEME: SignatureScheme = SignatureScheme.SECP256K1

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
            key = VerifyingKey.from_string(indata, SECP256k1, hashlib.sha256)
        except Exception as e:
            raise DeserializationError(f"Invalid secp256k1 public key: {e}") from e
        return PublicKey(key)

    def hex(self) -> str:
        return f"0x{self.to_crypto_bytes().hex()}"

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        """Verify a low-s secp256k1 signature; any failure yields False."""
        try:
            signature = cast(Signature, signature)
            n = SECP256k1.generator.order()
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
    """A 64-byte r || s secp256k1 signature (not DER)."""

    LENGTH: int = 64
    SCHEME: SignatureScheme = SignatureScheme.SECP256K1

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
        return self.hex()

    def hex(self) -> str:
        return f"0x{self.signature.hex()}"

    @staticmethod
    def from_str(value: str) -> Signature:
        if value[0:2] == "0x":
            value = value[2:]
        return Signature.from_crypto_bytes(bytes.fromhex(value))

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
    def test_private_key_from_str(self):
        private_key_hex = PrivateKey.from_str(
            "0x306fa009600e27c09d2659145ce1785249360dd5fb992da01a578fe67ed607f4"
        )
        private_key_with_prefix = PrivateKey.from_str(
            "secp256k1-priv-0x306fa009600e27c09d2659145ce1785249360dd5fb992da01a578fe67ed607f4"
        )
        self.assertEqual(private_key_hex, private_key_with_prefix)
        self.assertEqual(
            str(private_key_hex),
            "secp256k1-priv-0x306fa009600e27c09d2659145ce1785249360dd5fb992da01a578fe67ed607f4",
        )

    def test_public_key_encodings(self):
        private_key = PrivateKey.from_str(
            "secp256k1-priv-0x306fa009600e27c09d2659145ce1785249360dd5fb992da01a578fe67ed607f4"
        )
        uncompressed = PublicKey.from_str(
            "0x04210c9129e35337ff5d6488f90f18d842cf985f06e0baeff8df4bfb2ac4221863e2631b971a237b5db0aa71188e33250732dd461d56ee623cbe0426a5c2db79ef"
        )
        public_key = private_key.public_key()
        self.assertEqual(public_key, uncompressed)
        self.assertEqual(len(public_key.to_crypto_bytes()), PublicKey.LENGTH)
        self.assertEqual(
            public_key.hex(),
            "0x03210c9129e35337ff5d6488f90f18d842cf985f06e0baeff8df4bfb2ac4221863",
        )

    def test_sign_and_verify(self):
        in_value = b"test_message"

        private_key = PrivateKey.random()
        public_key = private_key.public_key()

        signature = private_key.sign(in_value)
        self.assertTrue(public_key.verify(in_value, signature))
        self.assertFalse(public_key.verify(b"other_message", signature))

    def test_rejects_high_s(self):
        private_key = PrivateKey.random()
        signature = private_key.sign(b"message")
        n = SECP256k1.generator.order()
        r, s = util.sigdecode_string(signature.data(), n)
        high_s = Signature(util.sigencode_string(r, n - s, n))
        self.assertFalse(private_key.public_key().verify(b"message", high_s))

    def test_public_key_serialization(self):
        public_key = PrivateKey.random().public_key()

        ser = Serializer()
        public_key.serialize(ser)
        ser_public_key = PublicKey.deserialize(Deserializer(ser.output()))
        self.assertEqual(public_key, ser_public_key)

    def test_invalid_public_key(self):
        with self.assertRaises(DeserializationError):
            PublicKey.from_crypto_bytes(b"\x02" + b"\x11" * 20)
        with self.assertRaises(DeserializationError):
            PublicKey.from_crypto_bytes(b"\x05" + b"\x11" * 32)

    def test_serialized_key_must_be_compressed(self):
        public_key = PrivateKey.random().public_key()
        uncompressed = public_key.key.to_string("uncompressed")
        self.assertEqual(PublicKey.from_crypto_bytes(uncompressed), public_key)

        ser = Serializer()
        ser.to_bytes(uncompressed)
        with self.assertRaises(DeserializationError):
            PublicKey.deserialize(Deserializer(ser.output()))

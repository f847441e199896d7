# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Ed25519 signature scheme.

Ed25519 is the default member scheme for multisig committees: 32-byte public
keys, 64-byte deterministic signatures, fast verification. Operations are
delegated to PyNaCl.

Examples:
    Sign and verify::

        private_key = PrivateKey.random()
        signature = private_key.sign(b"Hello")
        assert private_key.public_key().verify(b"Hello", signature)

    Prefixed key strings::

        key = PrivateKey.from_str("ed25519-priv-0x4e5e...")
        str(key)  # "ed25519-priv-0x4e5e..."
"""

from __future__ import annotations

import unittest
from typing import cast

from nacl.signing import SigningKey, VerifyKey

from . import asymmetric_crypto
from .asymmetric_crypto import SignatureScheme
from .bcs import Deserializer, Serializer
from .errors import DeserializationError


class PrivateKey(asymmetric_crypto.PrivateKey):
    """Ed25519 signing key backed by a NaCl SigningKey."""

    LENGTH: int = 32
    SCHEME: SignatureScheme = SignatureScheme.ED25519

    key: SigningKey

    def __init__(self, key: SigningKey):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.key == other.key

    def __str__(self):
        return PrivateKey.format_private_key(self.hex(), self.SCHEME)

    @staticmethod
    def from_hex(value: str | bytes) -> PrivateKey:
        parsed_value = PrivateKey.parse_hex_input(value, PrivateKey.SCHEME)
        if len(parsed_value) != PrivateKey.LENGTH:
            raise ValueError("Length mismatch")
        return PrivateKey(SigningKey(parsed_value))

    @staticmethod
    def from_str(value: str) -> PrivateKey:
        return PrivateKey.from_hex(value)

    def hex(self) -> str:
        return f"0x{self.key.encode().hex()}"

    def public_key(self) -> PublicKey:
        return PublicKey(self.key.verify_key)

    @staticmethod
    def random() -> PrivateKey:
        return PrivateKey(SigningKey.generate())

    def sign(self, data: bytes) -> Signature:
        return Signature(self.key.sign(data).signature)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PrivateKey:
        key = deserializer.to_bytes()
        if len(key) != PrivateKey.LENGTH:
            raise DeserializationError("Length mismatch")

        return PrivateKey(SigningKey(key))

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.key.encode())


class PublicKey(asymmetric_crypto.PublicKey):
    """Ed25519 verifying key.

    Attributes:
        LENGTH: The byte length of Ed25519 public keys (32)
        key: The underlying NaCl VerifyKey instance
    """

    LENGTH: int = 32
    SCHEME: SignatureScheme = SignatureScheme.ED25519

    key: VerifyKey

    def __init__(self, key: VerifyKey):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash((self.SCHEME, self.key.encode()))

    def __str__(self) -> str:
        return f"0x{self.key.encode().hex()}"

    @staticmethod
    def from_str(value: str) -> PublicKey:
        if value[0:2] == "0x":
            value = value[2:]
        return PublicKey.from_crypto_bytes(bytes.fromhex(value))

    @staticmethod
    def from_crypto_bytes(indata: bytes) -> PublicKey:
        if len(indata) != PublicKey.LENGTH:
            raise DeserializationError("Length mismatch")
        return PublicKey(VerifyKey(indata))

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        """Verify an Ed25519 signature over data.

        Returns:
            True if the signature is valid for the given data, False otherwise.

        Note:
            Any failure inside NaCl, including a malformed signature, yields False.
        """
        try:
            signature = cast(Signature, signature)
            self.key.verify(data, signature.data())
        except Exception:
            return False
        return True

    def to_crypto_bytes(self) -> bytes:
        return self.key.encode()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PublicKey:
        return PublicKey.from_crypto_bytes(deserializer.to_bytes())

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.key.encode())


class Signature(asymmetric_crypto.Signature):
    """A 64-byte Ed25519 signature."""

    LENGTH: int = 64
    SCHEME: SignatureScheme = SignatureScheme.ED25519

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

    def data(self) -> bytes:
        return self.signature

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

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Signature:
        return Signature.from_crypto_bytes(deserializer.to_bytes())

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.signature)


class Test(unittest.TestCase):
    def test_private_key_from_str(self):
        private_key_hex = PrivateKey.from_str(
            "0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
        )
        private_key_with_prefix = PrivateKey.from_str(
            "ed25519-priv-0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
        )
        private_key_bytes = PrivateKey.from_hex(
            bytes.fromhex(
                "4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
            )
        )
        self.assertEqual(private_key_hex, private_key_with_prefix)
        self.assertEqual(private_key_hex, private_key_bytes)

    def test_private_key_prefixed_formatting(self):
        private_key_with_prefix = "ed25519-priv-0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
        self.assertEqual(
            str(PrivateKey.from_str(private_key_with_prefix)),
            private_key_with_prefix,
        )

    def test_private_key_wrong_scheme_prefix(self):
        with self.assertRaises(ValueError):
            PrivateKey.from_str(
                "secp256k1-priv-0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
            )

    def test_vectors(self):
        private_key = PrivateKey.from_str(
            "ed25519-priv-0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
        )
        self.assertEqual(
            str(private_key.public_key()),
            "0x754bb6a4720a658bdd5f532995955db0971ad3519acbde2f1149c3857348006c",
        )

        signer = PrivateKey.from_str(
            "0x1e70e49b78f976644e2c51754a2f049d3ff041869c669523ba95b172c7329901"
        )
        expected = Signature.from_str(
            "0x02e90d8f300d79963cb7159ffa6f620f5bba4af5d32a7176bfb5480b43897cf4"
            "886bbb4042182f4647c9b04f02dbf989966f0facceec52d22bdcc7ce631bfc0c"
        )
        self.assertEqual(signer.sign(b"multisig"), expected)
        self.assertTrue(signer.public_key().verify(b"multisig", expected))

    def test_sign_and_verify(self):
        in_value = b"test_message"

        private_key = PrivateKey.random()
        public_key = private_key.public_key()

        signature = private_key.sign(in_value)
        self.assertTrue(public_key.verify(in_value, signature))
        self.assertFalse(public_key.verify(b"other_message", signature))

    def test_verify_malformed_signature(self):
        public_key = PrivateKey.random().public_key()
        self.assertFalse(public_key.verify(b"data", Signature(b"\x01" * 12)))

    def test_public_key_serialization(self):
        public_key = PrivateKey.random().public_key()

        ser = Serializer()
        public_key.serialize(ser)
        ser_public_key = PublicKey.deserialize(Deserializer(ser.output()))
        self.assertEqual(public_key, ser_public_key)
        self.assertEqual(hash(public_key), hash(ser_public_key))

    def test_signature_length_mismatch(self):
        ser = Serializer()
        ser.to_bytes(b"\x00" * 63)
        with self.assertRaises(DeserializationError):
            Signature.deserialize(Deserializer(ser.output()))

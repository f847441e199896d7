# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
BLS12-381 signature scheme.

Members that already hold validator-style BLS keys can sit on a committee
alongside ECDSA and Ed25519 members. Their signatures are checked one by one
like every other member's; no BLS aggregation happens at this layer.

The implementation uses py_ecc's G2Basic ciphersuite (minimal public key
size): 48-byte compressed G1 public keys and 96-byte compressed G2
signatures. Secret keys are 32-byte big-endian scalars.

Note:
    py_ecc is a pure Python implementation; a single verification takes a
    noticeable fraction of a second. Committees are small so this is
    acceptable for verification, but avoid BLS members in hot loops.
"""

from __future__ import annotations

import os
import unittest
from typing import cast

from py_ecc.bls import G2Basic

from . import asymmetric_crypto
from .asymmetric_crypto import SignatureScheme
from .bcs import Deserializer, Serializer
from .errors import DeserializationError


class PrivateKey(asymmetric_crypto.PrivateKey):
    LENGTH: int = 32
    SCHEME: SignatureScheme = SignatureScheme.BLS12381

    key: int

    def __init__(self, key: int):
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
        return PrivateKey(int.from_bytes(parsed_value, "big"))

    @staticmethod
    def from_str(value: str) -> PrivateKey:
        return PrivateKey.from_hex(value)

    def hex(self) -> str:
        return f"0x{self.key.to_bytes(PrivateKey.LENGTH, 'big').hex()}"

    def public_key(self) -> PublicKey:
        return PublicKey(G2Basic.SkToPk(self.key))

    @staticmethod
    def random() -> PrivateKey:
        return PrivateKey(G2Basic.KeyGen(os.urandom(32)))

    def sign(self, data: bytes) -> Signature:
        return Signature(G2Basic.Sign(self.key, data))

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PrivateKey:
        key = deserializer.to_bytes()
        if len(key) != PrivateKey.LENGTH:
            raise DeserializationError("Length mismatch")
        return PrivateKey(int.from_bytes(key, "big"))

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.key.to_bytes(PrivateKey.LENGTH, "big"))


class PublicKey(asymmetric_crypto.PublicKey):
    """48-byte compressed G1 public key.

    Keys are subgroup-checked with G2Basic.KeyValidate when decoded, so a
    PublicKey instance always holds a usable point.
    """

    LENGTH: int = 48
    SCHEME: SignatureScheme = SignatureScheme.BLS12381

    key: bytes

    def __init__(self, key: bytes):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash((self.SCHEME, self.key))

    def __str__(self) -> str:
        return f"0x{self.key.hex()}"

    @staticmethod
    def from_str(value: str) -> PublicKey:
        if value[0:2] == "0x":
            value = value[2:]
        return PublicKey.from_crypto_bytes(bytes.fromhex(value))

    @staticmethod
    def from_crypto_bytes(indata: bytes) -> PublicKey:
        if len(indata) != PublicKey.LENGTH:
            raise DeserializationError("Length mismatch")
        if not G2Basic.KeyValidate(indata):
            raise DeserializationError("Invalid BLS12-381 public key")
        return PublicKey(indata)

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        try:
            signature = cast(Signature, signature)
            return G2Basic.Verify(self.key, data, signature.data())
        except Exception:
            return False

    def to_crypto_bytes(self) -> bytes:
        return self.key

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PublicKey:
        return PublicKey.from_crypto_bytes(deserializer.to_bytes())

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.key)


class Signature(asymmetric_crypto.Signature):
    """96-byte compressed G2 signature."""

    LENGTH: int = 96
    SCHEME: SignatureScheme = SignatureScheme.BLS12381

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
        private_key = PrivateKey.from_str(
            "bls12381-priv-0x0000000000000000000000000000000000000000000000000000000000000007"
        )
        public_key = private_key.public_key()
        self.assertEqual(len(public_key.to_crypto_bytes()), PublicKey.LENGTH)

        signature = private_key.sign(b"test_message")
        self.assertEqual(len(signature.data()), Signature.LENGTH)
        self.assertTrue(public_key.verify(b"test_message", signature))
        self.assertFalse(public_key.verify(b"other_message", signature))

    def test_verify_garbage_signature(self):
        public_key = PrivateKey.random().public_key()
        self.assertFalse(public_key.verify(b"data", Signature(b"\x00" * 96)))
        self.assertFalse(public_key.verify(b"data", Signature(b"\x01" * 64)))

    def test_public_key_serialization(self):
        public_key = PrivateKey.random().public_key()

        ser = Serializer()
        public_key.serialize(ser)
        self.assertEqual(PublicKey.deserialize(Deserializer(ser.output())), public_key)

    def test_invalid_public_key(self):
        with self.assertRaises(DeserializationError):
            PublicKey.from_crypto_bytes(b"\x00" * PublicKey.LENGTH)

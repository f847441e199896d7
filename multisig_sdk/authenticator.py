# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Authorization envelope accepted by verifiers.

A GenericSignature holds exactly one of:

- MULTISIG (0): a MultiSignature from a k-of-n committee
- SIGNATURE (1): a single full Signature (scheme signature plus public key)

Callers verify either one the same way, without inspecting which variant
they hold::

    authenticator = GenericSignature.from_base64(payload)
    authenticator.verify_secure(message, sender)  # raises VerificationError

The BCS form is the uleb128 variant followed by the wrapped value.
"""

from __future__ import annotations

import base64
import typing
import unittest

from . import ed25519, secp256k1_ecdsa
from .account_address import AccountAddress
from .asymmetric_crypto_wrapper import Signature, decode_base64
from .bcs import Deserializer, Serializer
from .errors import (
    DeserializationError,
    IdentityMismatch,
    InsufficientSignatures,
    InvalidSignature,
)
from .intent import IntentMessage, to_signing_bytes
from .multisig import MultiPublicKey, MultiSignature


class GenericSignature:
    """Closed union of the two authorization forms a verifier accepts.

    The wrapped value decides the variant; it cannot change after
    construction.

    Attributes:
        MULTISIG: Variant tag of a wrapped MultiSignature (0).
        SIGNATURE: Variant tag of a wrapped single Signature (1).
        variant: Variant tag of this instance.
        signature: The wrapped MultiSignature or Signature.

    Examples:
        Shipping an authorization as text::

            payload = GenericSignature(multi_signature).to_base64()
            GenericSignature.from_base64(payload).verify_secure(message, sender)
    """

    MULTISIG: int = 0
    SIGNATURE: int = 1

    variant: int
    signature: typing.Union[MultiSignature, Signature]

    def __init__(self, signature: typing.Union[MultiSignature, Signature]):
        """Wrap an authorization.

        Args:
            signature: A MultiSignature or a full single Signature.

        Raises:
            TypeError: If signature is neither a MultiSignature nor a Signature.
        """
        if isinstance(signature, MultiSignature):
            self.variant = GenericSignature.MULTISIG
        elif isinstance(signature, Signature):
            self.variant = GenericSignature.SIGNATURE
        else:
            raise TypeError(f"Invalid type: {type(signature).__name__}")
        self.signature = signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenericSignature):
            return NotImplemented
        return self.variant == other.variant and self.signature == other.signature

    def __hash__(self) -> int:
        return hash((self.variant, self.signature))

    def __str__(self) -> str:
        return f"{self.signature}"

    def verify_secure(
        self,
        message: typing.Union[bytes, IntentMessage],
        author: AccountAddress,
    ):
        """Check that the wrapped signature authorizes message for author.

        Args:
            message: An IntentMessage, or raw bytes that are verified as they are.
            author: The claimed signer address.

        Raises:
            VerificationError: The subclass raised by the wrapped signature.
        """
        self.signature.verify_secure(message, author)

    def to_bytes(self) -> bytes:
        ser = Serializer()
        self.serialize(ser)
        return ser.output()

    @staticmethod
    def from_bytes(indata: bytes) -> GenericSignature:
        der = Deserializer(indata)
        value = GenericSignature.deserialize(der)
        if der.remaining() != 0:
            raise DeserializationError(
                f"Unexpected trailing bytes: {der.remaining()} left after GenericSignature"
            )
        return value

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode()

    @staticmethod
    def from_base64(value: str) -> GenericSignature:
        return GenericSignature.from_bytes(decode_base64(value))

    @staticmethod
    def deserialize(deserializer: Deserializer) -> GenericSignature:
        variant = deserializer.uleb128()

        signature: typing.Union[MultiSignature, Signature]
        if variant == GenericSignature.MULTISIG:
            signature = MultiSignature.deserialize(deserializer)
        elif variant == GenericSignature.SIGNATURE:
            signature = Signature.deserialize(deserializer)
        else:
            raise DeserializationError(f"Invalid type: {variant}")

        return GenericSignature(signature)

    def serialize(self, serializer: Serializer):
        serializer.uleb128(self.variant)
        serializer.struct(self.signature)


class Test(unittest.TestCase):
    def setUp(self):
        self.message = IntentMessage.personal_message(b"Hello")
        self.data = to_signing_bytes(self.message)
        self.ed_key = ed25519.PrivateKey.random()
        self.k1_key = secp256k1_ecdsa.PrivateKey.random()

    def single(self, private_key) -> Signature:
        return Signature(private_key.sign(self.data), private_key.public_key())

    def test_single_signature(self):
        authenticator = GenericSignature(self.single(self.ed_key))
        author = AccountAddress.from_key(self.ed_key.public_key())

        self.assertEqual(authenticator.variant, GenericSignature.SIGNATURE)
        authenticator.verify_secure(self.message, author)
        with self.assertRaises(IdentityMismatch):
            authenticator.verify_secure(
                self.message, AccountAddress.from_key(self.k1_key.public_key())
            )
        with self.assertRaises(InvalidSignature):
            authenticator.verify_secure(b"other", author)

    def test_multisig(self):
        multi_public_key = MultiPublicKey(
            [self.ed_key.public_key(), self.k1_key.public_key()], 2
        )
        author = AccountAddress.from_key(multi_public_key)
        complete = GenericSignature(
            MultiSignature.combine(
                [self.single(self.k1_key), self.single(self.ed_key)], multi_public_key
            )
        )
        partial = GenericSignature(
            MultiSignature.combine([self.single(self.k1_key)], multi_public_key)
        )

        self.assertEqual(complete.variant, GenericSignature.MULTISIG)
        complete.verify_secure(self.message, author)
        with self.assertRaises(InsufficientSignatures):
            partial.verify_secure(self.message, author)

    def test_serialization(self):
        multi_public_key = MultiPublicKey(
            [self.ed_key.public_key(), self.k1_key.public_key()], 1
        )
        for signature in (
            self.single(self.k1_key),
            MultiSignature.combine([self.single(self.ed_key)], multi_public_key),
        ):
            authenticator = GenericSignature(signature)
            self.assertEqual(
                GenericSignature.from_bytes(authenticator.to_bytes()), authenticator
            )
            self.assertEqual(
                GenericSignature.from_base64(authenticator.to_base64()), authenticator
            )

    def test_invalid_variant(self):
        with self.assertRaises(DeserializationError):
            GenericSignature.from_bytes(b"\x02")
        with self.assertRaises(TypeError):
            GenericSignature(typing.cast(Signature, self.ed_key.sign(self.data)))

    def test_overlong_variant_rejected(self):
        multi_public_key = MultiPublicKey([self.ed_key.public_key()], 1)
        authenticator = GenericSignature(
            MultiSignature.combine([self.single(self.ed_key)], multi_public_key)
        )
        encoded = authenticator.to_bytes()
        self.assertEqual(encoded[0], GenericSignature.MULTISIG)
        with self.assertRaises(DeserializationError):
            GenericSignature.from_bytes(b"\x80\x00" + encoded[1:])

# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Scheme-tagged wrappers that let keys and signatures of different algorithms
sit side by side in one committee.

Wrapper Classes:
- PublicKey: any member public key, tagged with its SignatureScheme flag
- CompressedSignature: a member's raw signature tagged with its scheme, as
  stored inside a MultiSignature (no public key attached)
- Signature: a full single signature, i.e. scheme signature plus the public
  key that produced it. This is what each committee member hands over before
  the signatures are combined, and it is also a complete authenticator on its
  own for single-key accounts.

Wire formats:
- PublicKey: ``u8 flag`` then the scheme key as BCS bytes.
- CompressedSignature: ``u8 flag`` then the scheme signature as BCS bytes.
- Signature: BCS bytes of ``flag || signature || public key``; the same bytes
  base64 encoded are the text form exchanged by wallets.

Examples:
    Producing and compressing a member signature::

        signature = Signature(private_key.sign(data), private_key.public_key())
        compressed = signature.to_compressed()
        signature.to_public_key()  # wrapped PublicKey used to locate the member
"""

from __future__ import annotations

import base64
import binascii
import logging
import typing
import unittest
from typing import Dict, Tuple, Type

from . import asymmetric_crypto, bls12381, ed25519, secp256k1_ecdsa, secp256r1_ecdsa
from .account_address import AccountAddress
from .asymmetric_crypto import SignatureScheme
from .bcs import Deserializer, Serializer
from .errors import DeserializationError, IdentityMismatch, InvalidSignature
from .intent import IntentMessage, to_signing_bytes

# Scheme flag -> (public key class, signature class).
SCHEMES: Dict[SignatureScheme, Tuple[Type, Type]] = {
    SignatureScheme.ED25519: (ed25519.PublicKey, ed25519.Signature),
    SignatureScheme.SECP256K1: (secp256k1_ecdsa.PublicKey, secp256k1_ecdsa.Signature),
    SignatureScheme.SECP256R1: (secp256r1_ecdsa.PublicKey, secp256r1_ecdsa.Signature),
    SignatureScheme.BLS12381: (bls12381.PublicKey, bls12381.Signature),
}


def _read_scheme(deserializer: Deserializer) -> SignatureScheme:
    flag = deserializer.u8()
    try:
        scheme = SignatureScheme(flag)
    except ValueError as e:
        raise DeserializationError(f"Invalid type: {flag}") from e
    if scheme not in SCHEMES:
        raise DeserializationError(f"Invalid type: {flag}")
    return scheme


def _scheme_of(value: typing.Any, index: int) -> SignatureScheme:
    for scheme, classes in SCHEMES.items():
        if isinstance(value, classes[index]):
            return scheme
    raise NotImplementedError(f"Unsupported type: {type(value).__name__}")


class PublicKey(asymmetric_crypto.PublicKey):
    """A member public key of any supported scheme.

    Attributes:
        variant: SignatureScheme flag of the wrapped key
        public_key: The underlying scheme public key
    """

    variant: SignatureScheme
    public_key: asymmetric_crypto.PublicKey

    def __init__(self, public_key: asymmetric_crypto.PublicKey):
        """Wrap a scheme public key.

        Raises:
            NotImplementedError: If the key is not one of the supported schemes.
        """
        self.variant = _scheme_of(public_key, 0)
        self.public_key = public_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.variant == other.variant and self.public_key == other.public_key

    def __hash__(self) -> int:
        return hash((self.variant, self.to_crypto_bytes()))

    def __str__(self) -> str:
        return f"{self.variant.name}:{self.public_key}"

    def __repr__(self) -> str:
        return self.__str__()

    @property
    def scheme(self) -> SignatureScheme:
        return self.variant

    def to_crypto_bytes(self) -> bytes:
        return self.public_key.to_crypto_bytes()

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        """Verify a scheme signature, a CompressedSignature or a full Signature.

        A signature of another scheme never verifies.
        """
        if isinstance(signature, (CompressedSignature, Signature)):
            signature = signature.signature
        if not isinstance(signature, SCHEMES[self.variant][1]):
            return False
        return self.public_key.verify(data, signature)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PublicKey:
        scheme = _read_scheme(deserializer)
        return PublicKey(deserializer.struct(SCHEMES[scheme][0]))

    def serialize(self, serializer: Serializer):
        serializer.u8(self.variant)
        serializer.struct(self.public_key)


class CompressedSignature(asymmetric_crypto.Signature):
    """One member's signature inside a MultiSignature: scheme flag and raw bytes.

    The public key is not stored; the member is identified by its position in
    the committee instead.
    """

    variant: SignatureScheme
    signature: asymmetric_crypto.Signature

    def __init__(self, signature: asymmetric_crypto.Signature):
        self.variant = _scheme_of(signature, 1)
        self.signature = signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompressedSignature):
            return NotImplemented
        return self.variant == other.variant and self.signature == other.signature

    def __hash__(self) -> int:
        return hash((self.variant, self.data()))

    def __str__(self) -> str:
        return f"{self.variant.name}:{self.signature}"

    def __repr__(self) -> str:
        return self.__str__()

    @property
    def scheme(self) -> SignatureScheme:
        return self.variant

    def data(self) -> bytes:
        return self.signature.data()

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode()

    @staticmethod
    def from_base64(value: str) -> CompressedSignature:
        return CompressedSignature.from_bytes(decode_base64(value))

    @staticmethod
    def deserialize(deserializer: Deserializer) -> CompressedSignature:
        scheme = _read_scheme(deserializer)
        return CompressedSignature(deserializer.struct(SCHEMES[scheme][1]))

    def serialize(self, serializer: Serializer):
        serializer.u8(self.variant)
        serializer.struct(self.signature)


class Signature(asymmetric_crypto.Signature):
    """A full single signature: scheme signature plus the signer's public key.

    Attributes:
        signature: The scheme signature
        public_key: The scheme public key that produced it
    """

    signature: asymmetric_crypto.Signature
    public_key: asymmetric_crypto.PublicKey

    def __init__(
        self,
        signature: asymmetric_crypto.Signature,
        public_key: asymmetric_crypto.PublicKey,
    ):
        """Pair a scheme signature with its public key.

        Raises:
            ValueError: If the signature and key belong to different schemes.
        """
        if isinstance(public_key, PublicKey):
            public_key = public_key.public_key
        if _scheme_of(signature, 1) != _scheme_of(public_key, 0):
            raise ValueError("Signature and public key schemes differ")
        self.signature = signature
        self.public_key = public_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return self.signature == other.signature and self.public_key == other.public_key

    def __hash__(self) -> int:
        return hash(self.to_crypto_bytes())

    def __str__(self) -> str:
        return self.to_base64()

    @property
    def scheme(self) -> SignatureScheme:
        return _scheme_of(self.signature, 1)

    def data(self) -> bytes:
        return self.signature.data()

    def to_compressed(self) -> CompressedSignature:
        return CompressedSignature(self.signature)

    def to_public_key(self) -> PublicKey:
        return PublicKey(self.public_key)

    def verify(self, data: bytes) -> bool:
        return self.public_key.verify(data, self.signature)

    def verify_secure(
        self,
        message: typing.Union[bytes, IntentMessage],
        author: AccountAddress,
    ):
        """Check that this signature authorizes message on behalf of author.

        Args:
            message: An IntentMessage, or raw bytes that are verified as they are.
            author: The claimed signer address.

        Raises:
            IdentityMismatch: If the signer's key does not derive author.
            InvalidSignature: If the signature does not verify.
        """
        derived = AccountAddress.from_key(self.public_key)
        if derived != author:
            raise IdentityMismatch(author, derived)
        if not self.verify(to_signing_bytes(message)):
            logging.info(f"Rejected {self.scheme.name} signature for {author}")
            raise InvalidSignature(f"Invalid {self.scheme.name} signature")

    def to_crypto_bytes(self) -> bytes:
        return (
            bytes([self.scheme])
            + self.signature.data()
            + self.public_key.to_crypto_bytes()
        )

    @staticmethod
    def from_crypto_bytes(indata: bytes) -> Signature:
        """Parse ``flag || signature || public key``.

        Raises:
            DeserializationError: On an unknown flag or a bad length.
        """
        if len(indata) == 0:
            raise DeserializationError("Empty signature")
        scheme = _read_scheme(Deserializer(indata[:1]))
        public_key_class, signature_class = SCHEMES[scheme]
        signature_end = 1 + signature_class.LENGTH
        if len(indata) != signature_end + public_key_class.LENGTH:
            raise DeserializationError(
                f"Expected {signature_end + public_key_class.LENGTH} bytes for a {scheme.name} signature, got {len(indata)}"
            )
        return Signature(
            signature_class.from_crypto_bytes(indata[1:signature_end]),
            public_key_class.from_crypto_bytes(indata[signature_end:]),
        )

    def to_base64(self) -> str:
        return base64.b64encode(self.to_crypto_bytes()).decode()

    @staticmethod
    def from_base64(value: str) -> Signature:
        return Signature.from_crypto_bytes(decode_base64(value))

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Signature:
        return Signature.from_crypto_bytes(deserializer.to_bytes())

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.to_crypto_bytes())


def decode_base64(value: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DeserializationError(f"Invalid base64: {e}") from e


class Test(unittest.TestCase):
    def test_public_key_wrapping(self):
        for private_key in (
            ed25519.PrivateKey.random(),
            secp256k1_ecdsa.PrivateKey.random(),
            secp256r1_ecdsa.PrivateKey.random(),
        ):
            wrapped = PublicKey(private_key.public_key())
            self.assertEqual(wrapped.scheme, private_key.SCHEME)
            self.assertEqual(PublicKey.from_bytes(wrapped.to_bytes()), wrapped)
            self.assertEqual(
                AccountAddress.from_key(wrapped),
                AccountAddress.from_key(private_key.public_key()),
            )

    def test_unsupported_key(self):
        with self.assertRaises(NotImplementedError):
            PublicKey(typing.cast(asymmetric_crypto.PublicKey, "not a key"))

    def test_unknown_flag(self):
        with self.assertRaisesRegex(DeserializationError, "Invalid type: 3"):
            PublicKey.from_bytes(b"\x03\x00")
        with self.assertRaisesRegex(DeserializationError, "Invalid type: 9"):
            CompressedSignature.from_bytes(b"\x09\x00")

    def test_cross_scheme_signature_does_not_verify(self):
        ed_key = ed25519.PrivateKey.random()
        k1_key = secp256k1_ecdsa.PrivateKey.random()
        k1_signature = k1_key.sign(b"data")
        # Same length as an Ed25519 signature but a different scheme.
        self.assertFalse(PublicKey(ed_key.public_key()).verify(b"data", k1_signature))
        self.assertTrue(PublicKey(k1_key.public_key()).verify(b"data", k1_signature))

    def test_full_signature_round_trip(self):
        private_key = secp256r1_ecdsa.PrivateKey.random()
        signature = Signature(private_key.sign(b"data"), private_key.public_key())

        self.assertEqual(Signature.from_base64(signature.to_base64()), signature)
        self.assertEqual(Signature.from_bytes(signature.to_bytes()), signature)
        self.assertEqual(
            signature.to_crypto_bytes()[0], SignatureScheme.SECP256R1
        )
        self.assertEqual(
            signature.to_compressed(), CompressedSignature(private_key.sign(b"data"))
        )
        self.assertEqual(signature.to_public_key(), PublicKey(private_key.public_key()))

    def test_mismatched_signature_and_key(self):
        with self.assertRaises(ValueError):
            Signature(
                ed25519.PrivateKey.random().sign(b"data"),
                secp256k1_ecdsa.PrivateKey.random().public_key(),
            )

    def test_compressed_signature_base64(self):
        compressed = CompressedSignature(ed25519.PrivateKey.random().sign(b"data"))
        self.assertEqual(
            CompressedSignature.from_base64(compressed.to_base64()), compressed
        )
        with self.assertRaises(DeserializationError):
            CompressedSignature.from_base64("not base64!")

    def test_verify_secure(self):
        private_key = ed25519.PrivateKey.random()
        message = IntentMessage.personal_message(b"Hello")
        signature = Signature(
            private_key.sign(to_signing_bytes(message)), private_key.public_key()
        )
        author = AccountAddress.from_key(private_key.public_key())

        signature.verify_secure(message, author)
        with self.assertRaises(InvalidSignature):
            signature.verify_secure(IntentMessage.personal_message(b"Bye"), author)
        with self.assertRaises(IdentityMismatch):
            signature.verify_secure(
                message, AccountAddress.from_key(ed25519.PrivateKey.random().public_key())
            )

    def test_full_signature_requires_exact_length(self):
        private_key = secp256k1_ecdsa.PrivateKey.random()
        signature = Signature(private_key.sign(b"data"), private_key.public_key())
        uncompressed = (
            bytes([SignatureScheme.SECP256K1])
            + signature.data()
            + private_key.public_key().key.to_string("uncompressed")
        )
        with self.assertRaises(DeserializationError):
            Signature.from_crypto_bytes(uncompressed)
        with self.assertRaises(DeserializationError):
            Signature.from_crypto_bytes(signature.to_crypto_bytes()[:-1])

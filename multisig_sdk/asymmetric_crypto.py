# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Asymmetric cryptographic interfaces shared by every signature scheme.

A committee may mix members using different algorithms. To combine and verify
their signatures uniformly, every scheme module (ed25519, secp256k1_ecdsa,
secp256r1_ecdsa, bls12381) exposes a PrivateKey, PublicKey and Signature that
follow the protocols below, and tags its values with a SignatureScheme flag.

Key Components:
- **SignatureScheme**: one-byte flag identifying the algorithm on the wire and
  in address derivation
- **PrivateKey / PublicKey / Signature**: structural interfaces implemented by
  each scheme module

Examples:
    Scheme-agnostic signing and verification::

        def sign_and_check(private_key: PrivateKey, message: bytes) -> bool:
            signature = private_key.sign(message)
            return private_key.public_key().verify(message, signature)

Note:
    This module defines interfaces only. The multisig logic consumes schemes
    exclusively through PublicKey.verify(data, signature) -> bool.
"""

from __future__ import annotations

from enum import IntEnum

from typing_extensions import Protocol

from .bcs import Deserializable, Serializable


class SignatureScheme(IntEnum):
    """Flag byte identifying a signature scheme.

    The numeric value is written in front of tagged keys and signatures and is
    hashed into derived addresses, so values must never be reassigned.

    Attributes:
        ED25519: Ed25519 (0x00)
        SECP256K1: ECDSA over secp256k1 (0x01)
        SECP256R1: ECDSA over secp256r1 / NIST P-256 (0x02)
        MULTISIG: k-of-n committee of the above (0x03)
        BLS12381: BLS over BLS12-381 (0x04)
    """

    ED25519 = 0x00
    SECP256K1 = 0x01
    SECP256R1 = 0x02
    MULTISIG = 0x03
    BLS12381 = 0x04

    @property
    def prefix(self) -> str:
        """Prefix of the text form of a private key, e.g. "secp256r1-priv-"."""
        return f"{self.name.lower()}-priv-"


class PrivateKey(Deserializable, Serializable, Protocol):
    """Protocol for a signing key of one scheme.

    Concrete keys accept hex input in two forms: a plain hex string with or
    without a leading "0x", or a scheme-prefixed string such as
    "ed25519-priv-0x4e5e...". The prefixed form is what str() returns.
    """

    def hex(self) -> str:
        """Return the key as a "0x"-prefixed hex string."""
        ...

    def public_key(self) -> PublicKey:
        ...

    def sign(self, data: bytes) -> Signature:
        ...

    @staticmethod
    def format_private_key(private_key: bytes | str, scheme: SignatureScheme) -> str:
        """Format a private key as "{scheme}-priv-0x{hex}".

        Raises:
            TypeError: If private_key is neither str nor bytes.
        """
        if isinstance(private_key, str):
            if private_key.startswith(scheme.prefix):
                key_value = private_key[len(scheme.prefix) :]
            else:
                key_value = private_key
        elif isinstance(private_key, bytes):
            key_value = f"0x{private_key.hex()}"
        else:
            raise TypeError("Input value must be a string or bytes.")

        return f"{scheme.prefix}{key_value}"

    @staticmethod
    def parse_hex_input(value: str | bytes, scheme: SignatureScheme) -> bytes:
        """Parse plain hex, "0x" hex, a scheme-prefixed string, or raw bytes.

        Raises:
            ValueError: If the string carries another scheme's prefix or is not hex.
            TypeError: If value is neither str nor bytes.
        """
        if isinstance(value, bytes):
            return value
        if not isinstance(value, str):
            raise TypeError("Input value must be a string or bytes.")

        if value.startswith(scheme.prefix):
            value = value[len(scheme.prefix) :]
        elif "-priv-" in value:
            raise ValueError(f"Expected a {scheme.name} private key, got {value[:16]}...")
        if value[0:2] == "0x":
            value = value[2:]
        return bytes.fromhex(value)


class PublicKey(Deserializable, Serializable, Protocol):
    """Protocol for a verifying key of one scheme.

    verify() is the only capability the multisig verifier needs from a scheme.
    It must never raise for malformed signatures; it returns False instead.
    """

    SCHEME: SignatureScheme

    @property
    def scheme(self) -> SignatureScheme:
        return self.SCHEME

    def to_crypto_bytes(self) -> bytes:
        """Raw key bytes as the scheme defines them, without any length prefix."""
        ...

    def verify(self, data: bytes, signature: Signature) -> bool:
        ...


class Signature(Deserializable, Serializable, Protocol):
    """Protocol for a signature of one scheme; data() returns its raw bytes."""

    SCHEME: SignatureScheme

    @property
    def scheme(self) -> SignatureScheme:
        return self.SCHEME

    def data(self) -> bytes:
        ...

# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Account addresses derived from public keys and multisig committees.

An address is the identity a signer claims. For a single key it is the
SHA3-256 hash of the scheme flag followed by the raw public key bytes; for a
committee it is the hash of the MULTISIG flag followed by the committee's BCS
encoding (every member key with its flag, then the threshold). Changing any
member, their order, or the threshold therefore changes the address.

Examples:
    Deriving and printing an address::

        address = AccountAddress.from_key(multi_public_key)
        print(address)  # 0x9b1f...

    Parsing::

        address = AccountAddress.from_str("0x9b1f...")
"""

from __future__ import annotations

import hashlib
import unittest

from . import asymmetric_crypto, ed25519
from .bcs import Deserializer, Serializer


class ParseAddressError(Exception):
    """Raised when a string or byte sequence is not a valid 32-byte address."""


class AccountAddress:
    """A 32-byte account address.

    Attributes:
        address: The raw 32-byte address data
        LENGTH: The required byte length of all addresses (32)
    """

    address: bytes
    LENGTH: int = 32

    def __init__(self, address: bytes):
        """Initialize an AccountAddress with raw address bytes.

        Raises:
            ParseAddressError: If the address is not exactly 32 bytes.
        """
        self.address = address

        if len(address) != AccountAddress.LENGTH:
            raise ParseAddressError("Expected address of length 32")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccountAddress):
            return NotImplemented
        return self.address == other.address

    def __hash__(self) -> int:
        return hash(self.address)

    def __str__(self):
        return f"0x{self.address.hex()}"

    def __repr__(self):
        return self.__str__()

    @staticmethod
    def from_str(address: str) -> AccountAddress:
        """Parse a "0x"-prefixed 64 character hex address.

        Raises:
            ParseAddressError: If the prefix, length or hex digits are invalid.
        """
        if not address.startswith("0x"):
            raise ParseAddressError("Hex string must start with a leading 0x.")

        body = address[2:]
        if len(body) != AccountAddress.LENGTH * 2:
            raise ParseAddressError(
                "The given hex string is not a valid address: it must be 64 hex characters."
            )
        try:
            return AccountAddress(bytes.fromhex(body))
        except ValueError as e:
            raise ParseAddressError(f"Invalid hex characters in address: {e}") from e

    @staticmethod
    def from_key(key: asymmetric_crypto.PublicKey) -> AccountAddress:
        """Derive the address of a single public key or a multisig committee.

        The hash input is ``scheme flag || key.to_crypto_bytes()``. Scheme
        keys, wrapped keys and MultiPublicKey all expose ``scheme`` and
        ``to_crypto_bytes``, so the same key yields the same address whether
        or not it is wrapped.
        """
        hasher = hashlib.sha3_256()
        hasher.update(bytes([key.scheme]))
        hasher.update(key.to_crypto_bytes())
        return AccountAddress(hasher.digest())

    @staticmethod
    def deserialize(deserializer: Deserializer) -> AccountAddress:
        return AccountAddress(deserializer.fixed_bytes(AccountAddress.LENGTH))

    def serialize(self, serializer: Serializer):
        serializer.fixed_bytes(self.address)


class Test(unittest.TestCase):
    def test_from_str(self):
        value = "0xca843279e3427144cead5e4d5999a3d0ca843279e3427144cead5e4d5999a3d0"
        address = AccountAddress.from_str(value)
        self.assertEqual(str(address), value)

    def test_from_str_errors(self):
        with self.assertRaises(ParseAddressError):
            AccountAddress.from_str("ca843279")
        with self.assertRaises(ParseAddressError):
            AccountAddress.from_str("0xca843279")
        with self.assertRaises(ParseAddressError):
            AccountAddress.from_str("0x" + "zz" * 32)

    def test_from_key(self):
        private_key = ed25519.PrivateKey.from_str(
            "ed25519-priv-0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
        )
        public_key = private_key.public_key()

        expected = hashlib.sha3_256(b"\x00" + public_key.to_crypto_bytes()).digest()
        self.assertEqual(AccountAddress.from_key(public_key).address, expected)

    def test_different_keys_different_addresses(self):
        first = AccountAddress.from_key(ed25519.PrivateKey.random().public_key())
        second = AccountAddress.from_key(ed25519.PrivateKey.random().public_key())
        self.assertNotEqual(first, second)

    def test_serialization(self):
        address = AccountAddress(bytes(range(32)))
        ser = Serializer()
        address.serialize(ser)
        self.assertEqual(ser.output(), bytes(range(32)))
        self.assertEqual(AccountAddress.deserialize(Deserializer(ser.output())), address)

# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import typing
import unittest
from typing import Dict, Type

from . import (
    asymmetric_crypto,
    asymmetric_crypto_wrapper,
    bls12381,
    ed25519,
    secp256k1_ecdsa,
    secp256r1_ecdsa,
)
from .account_address import AccountAddress
from .asymmetric_crypto import SignatureScheme
from .intent import IntentMessage, to_signing_bytes

PRIVATE_KEYS: Dict[SignatureScheme, Type] = {
    SignatureScheme.ED25519: ed25519.PrivateKey,
    SignatureScheme.SECP256K1: secp256k1_ecdsa.PrivateKey,
    SignatureScheme.SECP256R1: secp256r1_ecdsa.PrivateKey,
    SignatureScheme.BLS12381: bls12381.PrivateKey,
}


class Account:
    """A private key of any supported scheme together with its address.

    Accounts are the committee members of a multisig: each one signs the
    intent message on its own and hands over the resulting full Signature,
    which is later combined with the others.

    Examples:
        Generating members and signing::

            alice = Account.generate()
            bob = Account.generate(SignatureScheme.SECP256K1)
            signature = bob.sign(IntentMessage.personal_message(b"Hello"))

        Loading a key from its text form::

            account = Account.load_key("secp256r1-priv-0x...")
    """

    account_address: AccountAddress
    private_key: asymmetric_crypto.PrivateKey

    def __init__(
        self, account_address: AccountAddress, private_key: asymmetric_crypto.PrivateKey
    ):
        """
        The address is not checked against the key; use generate() or
        load_key() to get a consistent pair.
        """
        self.account_address = account_address
        self.private_key = private_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return (
            self.account_address == other.account_address
            and self.private_key == other.private_key
        )

    def __str__(self) -> str:
        return f"{self.scheme.name} account {self.account_address}"

    @staticmethod
    def from_private_key(private_key: asymmetric_crypto.PrivateKey) -> Account:
        return Account(AccountAddress.from_key(private_key.public_key()), private_key)

    @staticmethod
    def generate(scheme: SignatureScheme = SignatureScheme.ED25519) -> Account:
        """Generate a random account.

        Raises:
            ValueError: If scheme is not a single-key scheme.
        """
        if scheme not in PRIVATE_KEYS:
            raise ValueError(f"Cannot generate a {scheme.name} account")
        return Account.from_private_key(PRIVATE_KEYS[scheme].random())

    @staticmethod
    def load_key(key: str) -> Account:
        """Load an account from a "{scheme}-priv-0x..." private key string.

        Raises:
            ValueError: If the key has no recognized scheme prefix.
        """
        for scheme, private_key_class in PRIVATE_KEYS.items():
            if key.startswith(scheme.prefix):
                return Account.from_private_key(private_key_class.from_str(key))
        raise ValueError(f"Unrecognized private key format: {key[:16]}...")

    def address(self) -> AccountAddress:
        return self.account_address

    @property
    def scheme(self) -> SignatureScheme:
        return self.private_key.public_key().scheme

    def public_key(self) -> asymmetric_crypto.PublicKey:
        return self.private_key.public_key()

    def sign(
        self, message: typing.Union[bytes, IntentMessage]
    ) -> asymmetric_crypto_wrapper.Signature:
        """Sign message with this account's private key.

        Args:
            message: An IntentMessage, or raw bytes that are signed as they are.

        Returns:
            A full Signature carrying this account's public key, ready to be
            combined into a MultiSignature or used on its own.
        """
        return asymmetric_crypto_wrapper.Signature(
            self.private_key.sign(to_signing_bytes(message)), self.public_key()
        )


class Test(unittest.TestCase):
    def test_load_key(self):
        account = Account.load_key(
            "ed25519-priv-0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
        )
        self.assertEqual(account.scheme, SignatureScheme.ED25519)
        self.assertEqual(account.address(), AccountAddress.from_key(account.public_key()))
        with self.assertRaises(ValueError):
            Account.load_key("0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe")

    def test_sign(self):
        message = IntentMessage.personal_message(b"test message")
        for scheme in (
            SignatureScheme.ED25519,
            SignatureScheme.SECP256K1,
            SignatureScheme.SECP256R1,
        ):
            account = Account.generate(scheme)
            signature = account.sign(message)
            self.assertEqual(signature.scheme, scheme)
            signature.verify_secure(message, account.address())

    def test_generate_multisig_scheme(self):
        with self.assertRaises(ValueError):
            Account.generate(SignatureScheme.MULTISIG)

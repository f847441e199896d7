# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Heterogeneous 2-of-3 multisig walkthrough.

Three members using three different schemes (Ed25519, Secp256k1, Secp256r1)
form a committee. Two of them sign a personal message, the signatures are
combined, shipped as base64 and verified by a recipient that only knows the
committee's address.

Usage:
    python -m examples.multisig

    MULTISIG_LOG_LEVEL=DEBUG python -m examples.multisig
"""

import logging

from multisig_sdk.account import Account
from multisig_sdk.account_address import AccountAddress
from multisig_sdk.asymmetric_crypto import SignatureScheme
from multisig_sdk.authenticator import GenericSignature
from multisig_sdk.errors import VerificationError
from multisig_sdk.intent import IntentMessage
from multisig_sdk.multisig import MultiPublicKey, MultiSignature

from .common import MESSAGE, configure_logging


def main():
    configure_logging()

    # :!:>section_1
    alice = Account.generate(SignatureScheme.ED25519)
    bob = Account.generate(SignatureScheme.SECP256K1)
    chad = Account.generate(SignatureScheme.SECP256R1)

    multi_public_key = MultiPublicKey(
        [alice.public_key(), bob.public_key(), chad.public_key()], 2
    )
    committee_address = AccountAddress.from_key(multi_public_key)  # <:!:section_1

    print("\n=== Committee ===")
    print(f"Alice: {alice}")
    print(f"Bob: {bob}")
    print(f"Chad: {chad}")
    print(f"{multi_public_key}: {committee_address}")

    # :!:>section_2
    message = IntentMessage.personal_message(MESSAGE.encode())
    bob_signature = bob.sign(message)
    alice_signature = alice.sign(message)

    multi_signature = MultiSignature.combine(
        [bob_signature, alice_signature], multi_public_key
    )
    payload = GenericSignature(multi_signature).to_base64()  # <:!:section_2

    print("\n=== Signatures ===")
    print(f"Signers: {list(multi_signature.bitmap)}")
    print(f"Payload: {payload}")

    # :!:>section_3
    received = GenericSignature.from_base64(payload)
    received.verify_secure(message, committee_address)  # <:!:section_3
    print("\n=== Verification ===")
    print("2-of-3 authorization accepted")

    partial = GenericSignature(MultiSignature.combine([chad.sign(message)], multi_public_key))
    try:
        partial.verify_secure(message, committee_address)
    except VerificationError as e:
        logging.info(f"Expected rejection: {e}")
        print(f"1-of-3 authorization rejected: {e}")


if __name__ == "__main__":
    main()

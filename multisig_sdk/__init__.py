# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Multisig SDK - k-of-n multi-signature authorization over mixed key schemes.

A committee of up to 10 member keys, each Ed25519, Secp256k1, Secp256r1 or
BLS12-381, and a threshold form one signer identity (an AccountAddress). A
message is authorized once at least ``threshold`` members have signed it.

Quick Start::

    from multisig_sdk.account import Account
    from multisig_sdk.account_address import AccountAddress
    from multisig_sdk.asymmetric_crypto import SignatureScheme
    from multisig_sdk.intent import IntentMessage
    from multisig_sdk.multisig import MultiPublicKey, MultiSignature

    members = [
        Account.generate(SignatureScheme.ED25519),
        Account.generate(SignatureScheme.SECP256K1),
        Account.generate(SignatureScheme.SECP256R1),
    ]
    committee = MultiPublicKey([m.public_key() for m in members], 2)
    sender = AccountAddress.from_key(committee)

    message = IntentMessage.personal_message(b"Hello")
    multi_signature = MultiSignature.combine(
        [members[2].sign(message), members[0].sign(message)], committee
    )
    multi_signature.verify_secure(message, sender)

Module Organization:
- **multisig**: MultiPublicKey, SignerBitmap, MultiSignature, VerificationConfig
- **authenticator**: GenericSignature, the single-or-multi envelope
- **asymmetric_crypto_wrapper**: scheme-tagged PublicKey, CompressedSignature
  and full Signature
- **ed25519**, **secp256k1_ecdsa**, **secp256r1_ecdsa**, **bls12381**: schemes
- **account**, **account_address**, **intent**: signers, identities, messages
- **bcs**: Binary Canonical Serialization
- **errors**: exception hierarchy

Logging:
    Modules log through the root ``logging`` functions and never configure
    handlers. Rejections are logged at INFO, individual failed member checks
    at DEBUG.
"""

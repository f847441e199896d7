# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Exception types raised by the multisig SDK.

Every failure the library reports is an ordinary exception derived from
MultisigError. None of them indicate a corrupted process; callers decide
whether to reject the action, retry with different signatures, or surface the
message to a user.

Hierarchy::

    MultisigError
    ├── ConfigError              invalid committee (threshold / key count)
    ├── CombineError             unknown or duplicate signer while combining
    ├── DeserializationError     malformed BCS input
    └── VerificationError        an authorization was rejected
        ├── IdentityMismatch
        ├── InsufficientSignatures
        ├── InvalidSignature
        └── MalformedAuthorization

Examples:
    Rejecting an authorization::

        try:
            authenticator.verify_secure(message, sender)
        except VerificationError as e:
            reject(str(e))
"""

from __future__ import annotations


class MultisigError(Exception):
    """Base exception for all multisig SDK errors."""


class ConfigError(MultisigError):
    """Raised when a MultiPublicKey is built with an invalid key count or threshold."""


class CombineError(MultisigError):
    """Raised when individual signatures cannot be combined into a MultiSignature.

    This happens when a signature's public key is not a member of the
    committee, or when two signatures resolve to the same member.
    """


class DeserializationError(MultisigError):
    """Raised when BCS input is truncated, has a bad length or an unknown variant."""


class VerificationError(MultisigError):
    """Base exception for a rejected authorization."""


class IdentityMismatch(VerificationError):
    """The address derived from the signer's key(s) is not the claimed address."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid address: expected {expected}, derived {actual}")


class InsufficientSignatures(VerificationError):
    """Fewer valid member signatures than the threshold requires."""

    def __init__(self, required: int, actual: int):
        self.required = required
        self.actual = actual
        super().__init__(
            f"Insufficient signatures: threshold {required}, valid {actual}"
        )


class InvalidSignature(VerificationError):
    """A single signature did not verify against its public key."""


class MalformedAuthorization(VerificationError):
    """The authorization is structurally invalid, e.g. it names a member that does not exist."""

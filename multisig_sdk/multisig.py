# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Heterogeneous k-of-n multi-signatures.

A MultiPublicKey is an ordered committee of member public keys plus a
threshold. Members may use any supported scheme (Ed25519, Secp256k1,
Secp256r1, BLS12-381), and a single committee may mix them. A MultiSignature
authorizes a message when at least ``threshold`` distinct members signed it.

Key Components:
- **MultiPublicKey**: the committee; its address is the signer identity
- **SignerBitmap**: ascending set of committee positions that signed
- **MultiSignature**: committee + bitmap + the members' compressed signatures,
  stored in the same ascending order as the bitmap
- **VerificationConfig**: tuning for the per-member verification loop

Wire formats (BCS):
- MultiPublicKey: ``vector<PublicKey>`` then ``u16`` threshold, where each
  PublicKey is a ``u8`` scheme flag followed by the scheme key bytes.
- SignerBitmap: ``u16`` little-endian, bit ``i`` set when member ``i`` signed.
- MultiSignature: ``vector<CompressedSignature>``, SignerBitmap,
  MultiPublicKey.

Examples:
    Building a 2-of-3 committee and authorizing a message::

        multi_public_key = MultiPublicKey(
            [ed25519_key.public_key(), k1_key.public_key(), r1_key.public_key()],
            threshold=2,
        )
        sender = AccountAddress.from_key(multi_public_key)

        data = to_signing_bytes(message)
        multi_signature = MultiSignature.combine(
            [
                Signature(k1_key.sign(data), k1_key.public_key()),
                Signature(ed25519_key.sign(data), ed25519_key.public_key()),
            ],
            multi_public_key,
        )
        multi_signature.verify_secure(message, sender)  # raises on rejection
"""

from __future__ import annotations

import base64
import logging
import typing
import unittest
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from . import asymmetric_crypto, bls12381, ed25519, secp256k1_ecdsa, secp256r1_ecdsa
from .account_address import AccountAddress
from .asymmetric_crypto import SignatureScheme
from .asymmetric_crypto_wrapper import (
    CompressedSignature,
    PublicKey,
    Signature,
    decode_base64,
)
from .bcs import Deserializable, Deserializer, Serializable, Serializer
from .errors import (
    CombineError,
    ConfigError,
    DeserializationError,
    IdentityMismatch,
    InsufficientSignatures,
    MalformedAuthorization,
    VerificationError,
)
from .intent import IntentMessage, to_signing_bytes


class VerificationConfig:
    """Tuning for MultiSignature verification.

    None of these settings change whether an authorization is accepted; they
    only control how much work is done to reach the decision.

    Attributes:
        early_exit: Stop checking members once the threshold is reached, or
            once the unchecked members can no longer reach it (default: True).
            Disable to check and log every member signature.
    """

    early_exit: bool = True

    def __init__(self, early_exit: bool = True):
        self.early_exit = early_exit

    def __str__(self) -> str:
        return f"VerificationConfig(early_exit={self.early_exit})"


class SignerBitmap(Deserializable, Serializable):
    """Ordered set of committee positions that contributed a signature.

    Iteration is always ascending. MultiSignature pairs the i-th index with
    its i-th stored signature, so this ordering is part of the contract.
    """

    MAX_SIGNERS: int = 10
    BITMAP_NUM_OF_BYTES: int = 2

    indices: Tuple[int, ...]

    def __init__(self, indices: Iterable[int]):
        """
        Raises:
            MalformedAuthorization: On a repeated index or one outside
                [0, MAX_SIGNERS).
        """
        values = list(indices)
        ordered = tuple(sorted(set(values)))
        if len(ordered) != len(values):
            raise MalformedAuthorization("Duplicate signer index in bitmap")
        for index in ordered:
            if not 0 <= index < self.MAX_SIGNERS:
                raise MalformedAuthorization(
                    f"Signer index {index} exceeds bitmap capacity {self.MAX_SIGNERS}"
                )
        self.indices = ordered

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignerBitmap):
            return NotImplemented
        return self.indices == other.indices

    def __hash__(self) -> int:
        return hash(self.indices)

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __contains__(self, index: object) -> bool:
        return index in self.indices

    def __str__(self) -> str:
        return f"{list(self.indices)}"

    def __repr__(self) -> str:
        return f"SignerBitmap({self})"

    def to_int(self) -> int:
        bitmap = 0
        for index in self.indices:
            bitmap |= 1 << index
        return bitmap

    @staticmethod
    def from_int(bitmap: int) -> SignerBitmap:
        return SignerBitmap(
            position for position in range(16) if bitmap & (1 << position)
        )

    @staticmethod
    def deserialize(deserializer: Deserializer) -> SignerBitmap:
        return SignerBitmap.from_int(deserializer.u16())

    def serialize(self, serializer: Serializer):
        serializer.u16(self.to_int())


class MultiPublicKey(asymmetric_crypto.PublicKey):
    """A k-of-n committee of public keys of any supported scheme.

    Member order is significant: it defines each member's index in signer
    bitmaps and is hashed into the committee's address.

    Attributes:
        keys: Member public keys, wrapped with their scheme flag.
        threshold: Minimum number of valid member signatures.
        MAX_SIGNERS: Maximum committee size (10).
        MIN_THRESHOLD: Minimum threshold value (1).

    Examples:
        Index lookup::

            multi_public_key.get_index(member_key)   # 0, 1, ...
            multi_public_key.get_index(outsider_key) # None
    """

    SCHEME: SignatureScheme = SignatureScheme.MULTISIG
    MAX_SIGNERS: int = SignerBitmap.MAX_SIGNERS
    MIN_THRESHOLD: int = 1

    keys: Tuple[PublicKey, ...]
    threshold: int

    def __init__(
        self, keys: Sequence[asymmetric_crypto.PublicKey], threshold: int
    ):
        """Initialize a committee.

        Scheme keys are wrapped automatically.

        Args:
            keys: Member public keys in index order (1 to MAX_SIGNERS, distinct).
            threshold: Number of member signatures required (1 to len(keys)).

        Raises:
            ConfigError: If there are no keys, more than MAX_SIGNERS keys, a
                repeated key, or the threshold is not between MIN_THRESHOLD
                and len(keys).
        """
        if not 1 <= len(keys) <= self.MAX_SIGNERS:
            raise ConfigError(f"Must have between 1 and {self.MAX_SIGNERS} keys.")
        if not self.MIN_THRESHOLD <= threshold <= len(keys):
            raise ConfigError(
                f"Threshold must be between {self.MIN_THRESHOLD} and {len(keys)}."
            )

        self.keys = tuple(
            key if isinstance(key, PublicKey) else PublicKey(key) for key in keys
        )
        # A repeated key would let one signer fill several bitmap slots.
        if len(set(self.keys)) != len(self.keys):
            raise ConfigError("Committee members must be distinct.")
        self.threshold = threshold

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiPublicKey):
            return NotImplemented
        return self.keys == other.keys and self.threshold == other.threshold

    def __hash__(self) -> int:
        return hash((self.keys, self.threshold))

    def __str__(self) -> str:
        return f"{self.threshold}-of-{len(self.keys)} multisig public key"

    def __repr__(self) -> str:
        return self.__str__()

    def get_index(self, public_key: asymmetric_crypto.PublicKey) -> Optional[int]:
        """Return the committee index of public_key, or None if it is not a member."""
        if not isinstance(public_key, PublicKey):
            try:
                public_key = PublicKey(public_key)
            except NotImplementedError:
                return None
        for index, key in enumerate(self.keys):
            if key == public_key:
                return index
        return None

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        """Boolean check of a MultiSignature over raw data.

        Unlike MultiSignature.verify_secure there is no address check and no
        message encoding; the signature must have been combined for this
        committee.
        """
        if not isinstance(signature, MultiSignature):
            return False
        if signature.multi_public_key != self:
            return False
        try:
            signature.verify_data(data)
        except VerificationError:
            return False
        return True

    def to_crypto_bytes(self) -> bytes:
        return self.to_bytes()

    @staticmethod
    def from_crypto_bytes(indata: bytes) -> MultiPublicKey:
        return MultiPublicKey.from_bytes(indata)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> MultiPublicKey:
        keys = deserializer.sequence(PublicKey.deserialize)
        threshold = deserializer.u16()
        return MultiPublicKey(keys, threshold)

    def serialize(self, serializer: Serializer):
        serializer.sequence(self.keys, Serializer.struct)
        serializer.u16(self.threshold)


class MultiSignature(asymmetric_crypto.Signature):
    """Signatures of a subset of committee members over one message.

    Attributes:
        signatures: Compressed member signatures, ordered by member index.
        bitmap: The members that signed, ascending.
        multi_public_key: The committee the signatures belong to.
    """

    SCHEME: SignatureScheme = SignatureScheme.MULTISIG

    signatures: Tuple[CompressedSignature, ...]
    bitmap: SignerBitmap
    multi_public_key: MultiPublicKey

    def __init__(
        self,
        signatures: Sequence[CompressedSignature],
        bitmap: SignerBitmap,
        multi_public_key: MultiPublicKey,
    ):
        """
        Raises:
            MalformedAuthorization: If the number of signatures differs from
                the number of signers in the bitmap.
        """
        if len(signatures) != len(bitmap):
            raise MalformedAuthorization(
                f"Expected {len(bitmap)} signatures for bitmap {bitmap}, got {len(signatures)}"
            )
        self.signatures = tuple(signatures)
        self.bitmap = bitmap
        self.multi_public_key = multi_public_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiSignature):
            return NotImplemented
        return (
            self.signatures == other.signatures
            and self.bitmap == other.bitmap
            and self.multi_public_key == other.multi_public_key
        )

    def __hash__(self) -> int:
        return hash((self.signatures, self.bitmap, self.multi_public_key))

    def __str__(self) -> str:
        return f"{list(zip(self.bitmap, self.signatures))}"

    def size(self) -> int:
        """Number of member signatures carried."""
        return len(self.signatures)

    def data(self) -> bytes:
        return self.to_bytes()

    @staticmethod
    def combine(
        signatures: Sequence[Signature], multi_public_key: MultiPublicKey
    ) -> MultiSignature:
        """Combine individual member signatures into a MultiSignature.

        Signatures may be given in any order; they are stored sorted by the
        signer's committee index. Each signature is located in the committee
        by its public key.

        Args:
            signatures: Full member signatures over the same message.
            multi_public_key: The committee the signers belong to.

        Returns:
            A MultiSignature whose bitmap lists the signers in ascending order.

        Raises:
            CombineError: If a signer is not a committee member, or two
                signatures come from the same member.
        """
        by_index: Dict[int, CompressedSignature] = {}
        for signature in signatures:
            public_key = signature.to_public_key()
            index = multi_public_key.get_index(public_key)
            if index is None:
                raise CombineError(
                    f"Public key {public_key} is not a member of the {multi_public_key}"
                )
            if index in by_index:
                raise CombineError(f"Duplicate signature from member {index}")
            by_index[index] = signature.to_compressed()

        indices = sorted(by_index)
        return MultiSignature(
            [by_index[index] for index in indices],
            SignerBitmap(indices),
            multi_public_key,
        )

    def verify_secure(
        self,
        message: typing.Union[bytes, IntentMessage],
        author: AccountAddress,
        config: Optional[VerificationConfig] = None,
    ):
        """Check that this MultiSignature authorizes message on behalf of author.

        Args:
            message: An IntentMessage, or raw bytes that are verified as they are.
            author: The address the committee claims to be.
            config: Loop tuning; defaults to VerificationConfig().

        Returns None on success.

        Raises:
            InsufficientSignatures: If fewer signatures are carried, or fewer
                verify, than the committee threshold.
            IdentityMismatch: If the committee's address is not author.
            MalformedAuthorization: If a signer index is outside the committee.
        """
        threshold = self.multi_public_key.threshold
        if threshold > len(self.signatures):
            logging.info(
                f"Rejected multisig for {author}: {len(self.signatures)} signatures, threshold {threshold}"
            )
            raise InsufficientSignatures(threshold, len(self.signatures))

        derived = AccountAddress.from_key(self.multi_public_key)
        if derived != author:
            logging.info(f"Rejected multisig for {author}: committee address {derived}")
            raise IdentityMismatch(author, derived)

        self.verify_data(to_signing_bytes(message), config)

    def verify_data(self, data: bytes, config: Optional[VerificationConfig] = None):
        """Run the per-member checks over already encoded data.

        A member signature that fails to verify, or whose scheme differs from
        the member's key, only lowers the success count.

        Raises:
            MalformedAuthorization: If a signer index is outside the committee.
            InsufficientSignatures: If fewer than threshold signatures verify.
        """
        config = config or VerificationConfig()
        keys = self.multi_public_key.keys
        threshold = self.multi_public_key.threshold

        # Indices ascend, so checking the last one covers them all.
        if len(self.bitmap) > 0 and self.bitmap.indices[-1] >= len(keys):
            logging.info(
                f"Rejected multisig: signer index {self.bitmap.indices[-1]} outside {self.multi_public_key}"
            )
            raise MalformedAuthorization(
                f"Signer index {self.bitmap.indices[-1]} exceeds committee size {len(keys)}"
            )

        successes = 0
        unchecked = len(self.signatures)
        for index, signature in zip(self.bitmap, self.signatures):
            if config.early_exit and (
                successes >= threshold or successes + unchecked < threshold
            ):
                break
            unchecked -= 1

            key = keys[index]
            if key.scheme != signature.scheme:
                logging.debug(
                    f"Member {index}: {signature.scheme.name} signature for {key.scheme.name} key"
                )
            elif key.verify(data, signature):
                successes += 1
            else:
                logging.debug(f"Member {index}: invalid {key.scheme.name} signature")

        if successes < threshold:
            logging.info(
                f"Rejected multisig: {successes} valid signatures, threshold {threshold}"
            )
            raise InsufficientSignatures(threshold, successes)

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode()

    @staticmethod
    def from_base64(value: str) -> MultiSignature:
        return MultiSignature.from_bytes(decode_base64(value))

    @staticmethod
    def deserialize(deserializer: Deserializer) -> MultiSignature:
        signatures = deserializer.sequence(CompressedSignature.deserialize)
        bitmap = deserializer.struct(SignerBitmap)
        multi_public_key = deserializer.struct(MultiPublicKey)
        return MultiSignature(signatures, bitmap, multi_public_key)

    def serialize(self, serializer: Serializer):
        serializer.sequence(self.signatures, Serializer.struct)
        serializer.struct(self.bitmap)
        serializer.struct(self.multi_public_key)


class Test(unittest.TestCase):
    def setUp(self):
        # Members: P1 Ed25519, P2 Secp256k1, P3 Secp256r1.
        self.private_keys: List[asymmetric_crypto.PrivateKey] = [
            ed25519.PrivateKey.from_str(
                "ed25519-priv-0x4e5e3be60f4bbd5e98d086d932f3ce779ff4b58da99bf9e5241ae1212a29e5fe"
            ),
            secp256k1_ecdsa.PrivateKey.from_str(
                "secp256k1-priv-0x306fa009600e27c09d2659145ce1785249360dd5fb992da01a578fe67ed607f4"
            ),
            secp256r1_ecdsa.PrivateKey.random(),
        ]
        self.multi_public_key = MultiPublicKey(
            [key.public_key() for key in self.private_keys], 2
        )
        self.author = AccountAddress.from_key(self.multi_public_key)
        self.message = IntentMessage.personal_message(b"multisig")
        self.data = to_signing_bytes(self.message)

    def sign(self, member: int, data: Optional[bytes] = None) -> Signature:
        private_key = self.private_keys[member]
        return Signature(
            private_key.sign(self.data if data is None else data),
            private_key.public_key(),
        )

    def test_any_two_members_authorize(self):
        for members in ([0, 1], [0, 2], [1, 2], [0, 1, 2]):
            multi_signature = MultiSignature.combine(
                [self.sign(member) for member in members], self.multi_public_key
            )
            self.assertEqual(list(multi_signature.bitmap), members)
            self.assertEqual(multi_signature.size(), len(members))
            multi_signature.verify_secure(self.message, self.author)
            self.assertTrue(self.multi_public_key.verify(self.data, multi_signature))

    def test_single_member_is_insufficient(self):
        multi_signature = MultiSignature.combine([self.sign(1)], self.multi_public_key)
        with self.assertRaises(InsufficientSignatures) as cm:
            multi_signature.verify_secure(self.message, self.author)
        self.assertEqual(cm.exception.required, 2)
        self.assertEqual(cm.exception.actual, 1)
        self.assertFalse(self.multi_public_key.verify(self.data, multi_signature))

    def test_duplicate_signer(self):
        with self.assertRaises(CombineError):
            MultiSignature.combine(
                [self.sign(1), self.sign(0), self.sign(1)], self.multi_public_key
            )

    def test_out_of_range_index(self):
        signatures = [self.sign(0).to_compressed(), self.sign(1).to_compressed()]
        multi_signature = MultiSignature(
            signatures, SignerBitmap([0, 5]), self.multi_public_key
        )
        with self.assertRaises(MalformedAuthorization):
            multi_signature.verify_secure(self.message, self.author)
        self.assertFalse(self.multi_public_key.verify(self.data, multi_signature))

    def test_out_of_range_index_with_early_exit_disabled(self):
        signatures = [self.sign(0).to_compressed(), self.sign(1).to_compressed()]
        multi_signature = MultiSignature(
            signatures, SignerBitmap([1, 9]), self.multi_public_key
        )
        with self.assertRaises(MalformedAuthorization):
            multi_signature.verify_secure(
                self.message, self.author, VerificationConfig(early_exit=False)
            )

    def test_input_order_does_not_matter(self):
        forward = MultiSignature.combine(
            [self.sign(0), self.sign(2)], self.multi_public_key
        )
        reverse = MultiSignature.combine(
            [self.sign(2), self.sign(0)], self.multi_public_key
        )
        self.assertEqual(forward, reverse)
        self.assertEqual(hash(forward), hash(reverse))
        reverse.verify_secure(self.message, self.author)

    def test_non_member(self):
        outsider = ed25519.PrivateKey.random()
        with self.assertRaises(CombineError):
            MultiSignature.combine(
                [self.sign(0), Signature(outsider.sign(self.data), outsider.public_key())],
                self.multi_public_key,
            )

    def test_identity_binding(self):
        multi_signature = MultiSignature.combine(
            [self.sign(0), self.sign(1)], self.multi_public_key
        )
        other = MultiPublicKey([key.public_key() for key in self.private_keys], 1)
        with self.assertRaises(IdentityMismatch):
            multi_signature.verify_secure(self.message, AccountAddress.from_key(other))

    def test_address_depends_on_order_and_threshold(self):
        keys = [key.public_key() for key in self.private_keys]
        addresses = {
            AccountAddress.from_key(MultiPublicKey(keys, 2)),
            AccountAddress.from_key(MultiPublicKey(keys, 3)),
            AccountAddress.from_key(MultiPublicKey(list(reversed(keys)), 2)),
        }
        self.assertEqual(len(addresses), 3)

    def test_wrong_message(self):
        multi_signature = MultiSignature.combine(
            [self.sign(0), self.sign(1)], self.multi_public_key
        )
        with self.assertRaises(InsufficientSignatures):
            multi_signature.verify_secure(
                IntentMessage.personal_message(b"other"), self.author
            )

    def test_one_bad_signature_does_not_block_others(self):
        bad = self.sign(0, b"something else")
        multi_signature = MultiSignature.combine(
            [bad, self.sign(1), self.sign(2)], self.multi_public_key
        )
        for early_exit in (True, False):
            multi_signature.verify_secure(
                self.message, self.author, VerificationConfig(early_exit)
            )

    def test_wrong_scheme_signature(self):
        # A Secp256r1 signature placed in the Ed25519 member's slot.
        forged = MultiSignature(
            [self.sign(2).to_compressed(), self.sign(1).to_compressed()],
            SignerBitmap([0, 1]),
            self.multi_public_key,
        )
        with self.assertRaises(InsufficientSignatures) as cm:
            forged.verify_secure(
                self.message, self.author, VerificationConfig(early_exit=False)
            )
        self.assertEqual(cm.exception.actual, 1)

    def test_bls_member(self):
        bls_key = bls12381.PrivateKey.random()
        ed_key = self.private_keys[0]
        multi_public_key = MultiPublicKey([ed_key.public_key(), bls_key.public_key()], 2)
        multi_signature = MultiSignature.combine(
            [
                Signature(bls_key.sign(self.data), bls_key.public_key()),
                self.sign(0),
            ],
            multi_public_key,
        )
        multi_signature.verify_secure(
            self.message, AccountAddress.from_key(multi_public_key)
        )
        self.assertEqual(MultiSignature.from_bytes(multi_signature.to_bytes()), multi_signature)

    def test_get_index(self):
        for index, key in enumerate(self.private_keys):
            self.assertEqual(self.multi_public_key.get_index(key.public_key()), index)
            self.assertEqual(
                self.multi_public_key.get_index(PublicKey(key.public_key())), index
            )
        self.assertIsNone(
            self.multi_public_key.get_index(secp256k1_ecdsa.PrivateKey.random().public_key())
        )

    def test_invalid_committee(self):
        keys = [key.public_key() for key in self.private_keys]
        with self.assertRaises(ConfigError):
            MultiPublicKey([], 1)
        with self.assertRaises(ConfigError):
            MultiPublicKey(keys, 0)
        with self.assertRaises(ConfigError):
            MultiPublicKey(keys, 4)
        with self.assertRaises(ConfigError):
            MultiPublicKey(keys * 4, 2)
        self.assertEqual(str(MultiPublicKey(keys, 3)), "3-of-3 multisig public key")

    def test_repeated_member_key(self):
        keys = [key.public_key() for key in self.private_keys]
        with self.assertRaises(ConfigError):
            MultiPublicKey([keys[0], keys[0], keys[1]], 2)
        # Wrapped and unwrapped forms of one key are the same member.
        with self.assertRaises(ConfigError):
            MultiPublicKey([keys[1], PublicKey(keys[1])], 1)

        ser = Serializer()
        ser.sequence([PublicKey(keys[0]), PublicKey(keys[0])], Serializer.struct)
        ser.u16(2)
        with self.assertRaises(ConfigError):
            MultiPublicKey.from_bytes(ser.output())

    def test_mismatched_signature_count(self):
        with self.assertRaises(MalformedAuthorization):
            MultiSignature(
                [self.sign(0).to_compressed()], SignerBitmap([0, 1]), self.multi_public_key
            )

    def test_bitmap(self):
        bitmap = SignerBitmap([9, 0, 3])
        self.assertEqual(list(bitmap), [0, 3, 9])
        self.assertEqual(len(bitmap), 3)
        self.assertEqual(bitmap.to_bytes(), b"\x09\x02")
        self.assertEqual(SignerBitmap.from_bytes(b"\x09\x02"), bitmap)
        self.assertEqual(SignerBitmap.from_bytes(SignerBitmap([]).to_bytes()), SignerBitmap([]))
        with self.assertRaises(DeserializationError):
            SignerBitmap.from_bytes(b"\x09\x02\x00")
        with self.assertRaises(MalformedAuthorization):
            SignerBitmap([1, 1])
        with self.assertRaises(MalformedAuthorization):
            SignerBitmap.from_bytes(b"\x00\x80")

    def test_serialization(self):
        multi_signature = MultiSignature.combine(
            [self.sign(2), self.sign(0)], self.multi_public_key
        )
        self.assertEqual(
            MultiPublicKey.from_crypto_bytes(self.multi_public_key.to_crypto_bytes()),
            self.multi_public_key,
        )
        self.assertEqual(MultiSignature.from_bytes(multi_signature.to_bytes()), multi_signature)
        self.assertEqual(
            MultiSignature.from_base64(multi_signature.to_base64()), multi_signature
        )

    def test_multi_public_key_encoding(self):
        keys = [key.public_key() for key in self.private_keys[:2]]
        expected = (
            b"\x02"
            + b"\x00\x20"
            + keys[0].to_crypto_bytes()
            + b"\x01\x21"
            + keys[1].to_crypto_bytes()
            + b"\x01\x00"
        )
        self.assertEqual(MultiPublicKey(keys, 1).to_crypto_bytes(), expected)

    def test_decode_rejects_invalid_committee(self):
        ser = Serializer()
        ser.sequence(self.multi_public_key.keys, Serializer.struct)
        ser.u16(5)
        with self.assertRaises(ConfigError):
            MultiPublicKey.from_bytes(ser.output())
        with self.assertRaises(DeserializationError):
            MultiPublicKey.from_bytes(self.multi_public_key.to_bytes()[:-1])

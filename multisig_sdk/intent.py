# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Intent messages: the canonical byte string that committee members sign.

A signature must only be valid for the purpose it was produced for. Every
signed value is therefore wrapped in an IntentMessage that prefixes it with
a three-byte Intent (scope, version, app id). The signing bytes are the BCS
encoding of the IntentMessage, computed by to_signing_bytes().

Examples:
    Signing a personal message::

        message = IntentMessage.personal_message(b"Hello")
        signature = account.sign(message)
"""

from __future__ import annotations

import typing
import unittest
from enum import IntEnum

from .bcs import Deserializer, Serializable, Serializer
from .errors import DeserializationError


class IntentScope(IntEnum):
    TRANSACTION_DATA = 0
    TRANSACTION_EFFECTS = 1
    CHECKPOINT_SUMMARY = 2
    PERSONAL_MESSAGE = 3


class Intent:
    scope: IntentScope
    version: int
    app_id: int

    def __init__(
        self,
        scope: IntentScope = IntentScope.TRANSACTION_DATA,
        version: int = 0,
        app_id: int = 0,
    ):
        self.scope = IntentScope(scope)
        self.version = version
        self.app_id = app_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intent):
            return NotImplemented
        return (self.scope, self.version, self.app_id) == (
            other.scope,
            other.version,
            other.app_id,
        )

    def __hash__(self) -> int:
        return hash((self.scope, self.version, self.app_id))

    def __str__(self) -> str:
        return f"Intent({self.scope.name}, v{self.version}, app {self.app_id})"

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Intent:
        value = deserializer.u8()
        try:
            scope = IntentScope(value)
        except ValueError as e:
            raise DeserializationError(f"Unknown intent scope: {value}") from e
        return Intent(scope, deserializer.u8(), deserializer.u8())

    def serialize(self, serializer: Serializer):
        serializer.u8(self.scope)
        serializer.u8(self.version)
        serializer.u8(self.app_id)


class PersonalMessage:
    """Arbitrary bytes a user signs off-chain, encoded as a BCS byte vector."""

    message: bytes

    def __init__(self, message: bytes):
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersonalMessage):
            return NotImplemented
        return self.message == other.message

    def __hash__(self) -> int:
        return hash(self.message)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PersonalMessage:
        return PersonalMessage(deserializer.to_bytes())

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.message)


class IntentMessage:
    """A value paired with the intent it is signed under.

    Attributes:
        intent: Scope, version and app id the signature is bound to.
        value: Any BCS-serializable payload.
    """

    intent: Intent
    value: typing.Any

    def __init__(self, intent: Intent, value: typing.Any):
        self.intent = intent
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntentMessage):
            return NotImplemented
        return self.intent == other.intent and self.value == other.value

    @staticmethod
    def personal_message(message: bytes) -> IntentMessage:
        return IntentMessage(
            Intent(IntentScope.PERSONAL_MESSAGE), PersonalMessage(message)
        )

    def serialize(self, serializer: Serializer):
        serializer.struct(self.intent)
        serializer.struct(self.value)


def to_signing_bytes(message: typing.Union[bytes, Serializable]) -> bytes:
    """Return the exact bytes that are signed for message.

    Raw bytes are signed as they are; anything else is BCS-encoded.
    """
    if isinstance(message, (bytes, bytearray)):
        return bytes(message)
    ser = Serializer()
    ser.struct(message)
    return ser.output()


class Test(unittest.TestCase):
    def test_personal_message_bytes(self):
        message = IntentMessage.personal_message(b"Hello")
        self.assertEqual(to_signing_bytes(message), b"\x03\x00\x00\x05Hello")

    def test_default_intent(self):
        message = IntentMessage(Intent(), PersonalMessage(b""))
        self.assertEqual(to_signing_bytes(message), b"\x00\x00\x00\x00")

    def test_raw_bytes_pass_through(self):
        self.assertEqual(to_signing_bytes(b"raw"), b"raw")

    def test_intent_round_trip(self):
        intent = Intent(IntentScope.CHECKPOINT_SUMMARY, 1, 2)
        ser = Serializer()
        intent.serialize(ser)
        self.assertEqual(Intent.deserialize(Deserializer(ser.output())), intent)

    def test_different_scopes_sign_different_bytes(self):
        personal = IntentMessage.personal_message(b"Hello")
        transaction = IntentMessage(Intent(), PersonalMessage(b"Hello"))
        self.assertNotEqual(to_signing_bytes(personal), to_signing_bytes(transaction))

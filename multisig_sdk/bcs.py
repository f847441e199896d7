# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Binary Canonical Serialization (BCS) for multisig wire values.

Every value the SDK exchanges (public keys, signatures, signer bitmaps,
multisignatures, intent messages, addresses) has exactly one BCS encoding.
The same encoding doubles as the canonical message encoder: the bytes a
signer signs are the BCS bytes of an IntentMessage.

Learn more at https://github.com/diem/bcs

Examples:
    Round trip of a custom structure::

        class Pair:
            def serialize(self, serializer):
                serializer.u8(self.left)
                serializer.to_bytes(self.right)

            @staticmethod
            def deserialize(deserializer):
                return Pair(deserializer.u8(), deserializer.to_bytes())

        data = encoder(pair, Serializer.struct)
        Deserializer(data).struct(Pair)
"""

from __future__ import annotations

import io
import typing
import unittest
from typing import List

from typing_extensions import Protocol

from .errors import DeserializationError

MAX_U8 = 2**8 - 1
MAX_U16 = 2**16 - 1
MAX_U32 = 2**32 - 1
MAX_U64 = 2**64 - 1


class Deserializable(Protocol):
    """Protocol for objects that can be read back from a BCS byte stream."""

    @classmethod
    def from_bytes(cls, indata: bytes) -> Deserializable:
        """Decode a complete value from BCS bytes.

        Raises:
            DeserializationError: If the data is malformed or has trailing bytes.
        """
        der = Deserializer(indata)
        value = der.struct(cls)
        if der.remaining() != 0:
            raise DeserializationError(
                f"Unexpected trailing bytes: {der.remaining()} left after {cls.__name__}"
            )
        return value

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Deserializable:
        ...


class Serializable(Protocol):
    """Protocol for objects that can be written to a BCS byte stream."""

    def to_bytes(self) -> bytes:
        ser = Serializer()
        ser.struct(self)
        return ser.output()

    def serialize(self, serializer: Serializer):
        ...


class Deserializer:
    """Reads BCS values from an in-memory byte string.

    All read errors raise DeserializationError so that callers decoding
    untrusted authorizations only have a single failure type to handle.
    """

    _input: io.BytesIO
    _length: int

    def __init__(self, data: bytes):
        self._length = len(data)
        self._input = io.BytesIO(data)

    def remaining(self) -> int:
        return self._length - self._input.tell()

    def bool(self) -> bool:
        value = self._read_int(1)
        if value == 0:
            return False
        elif value == 1:
            return True
        else:
            raise DeserializationError(f"Unexpected boolean value: {value}")

    def to_bytes(self) -> bytes:
        return self._read(self.uleb128())

    def fixed_bytes(self, length: int) -> bytes:
        return self._read(length)

    def sequence(
        self,
        value_decoder: typing.Callable[[Deserializer], typing.Any],
    ) -> List[typing.Any]:
        length = self.uleb128()
        # Each element takes at least one byte.
        if length > self.remaining():
            raise DeserializationError(
                f"Sequence length {length} exceeds remaining input {self.remaining()}"
            )
        values: List = []
        while len(values) < length:
            values.append(value_decoder(self))
        return values

    def str(self) -> str:
        try:
            return self.to_bytes().decode()
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Invalid utf-8 string: {e}") from e

    def struct(self, struct: typing.Any) -> typing.Any:
        return struct.deserialize(self)

    def u8(self) -> int:
        return self._read_int(1)

    def u16(self) -> int:
        return self._read_int(2)

    def u32(self) -> int:
        return self._read_int(4)

    def u64(self) -> int:
        return self._read_int(8)

    def uleb128(self) -> int:
        value = 0
        shift = 0

        while value <= MAX_U32:
            byte = self._read_int(1)
            value |= (byte & 0x7F) << shift
            if byte & 0x80 == 0:
                if byte == 0 and shift > 0:
                    raise DeserializationError("Non-canonical uleb128 encoding")
                break
            shift += 7

        if value > MAX_U32:
            raise DeserializationError("Unexpectedly large uleb128 value")

        return value

    def _read(self, length: int) -> bytes:
        value = self._input.read(length)
        if value is None or len(value) < length:
            actual_length = 0 if value is None else len(value)
            raise DeserializationError(
                f"Unexpected end of input. Requested: {length}, found: {actual_length}"
            )
        return value

    def _read_int(self, length: int) -> int:
        return int.from_bytes(self._read(length), byteorder="little", signed=False)


class Serializer:
    """Writes BCS values into an in-memory buffer; call output() for the bytes."""

    _output: io.BytesIO

    def __init__(self):
        self._output = io.BytesIO()

    def output(self) -> bytes:
        return self._output.getvalue()

    def bool(self, value: bool):
        self._write_int(int(value), 1)

    def to_bytes(self, value: bytes):
        self.uleb128(len(value))
        self._output.write(value)

    def fixed_bytes(self, value):
        self._output.write(value)

    @staticmethod
    def sequence_serializer(
        value_encoder: typing.Callable[[Serializer, typing.Any], None],
    ):
        return lambda self, values: self.sequence(values, value_encoder)

    def sequence(
        self,
        values: typing.Sequence[typing.Any],
        value_encoder: typing.Callable[[Serializer, typing.Any], None],
    ):
        self.uleb128(len(values))
        for value in values:
            self.fixed_bytes(encoder(value, value_encoder))

    def str(self, value: str):
        self.to_bytes(value.encode())

    def struct(self, value: typing.Any):
        value.serialize(self)

    def u8(self, value: int):
        if value > MAX_U8:
            raise ValueError(f"Cannot encode {value} into u8")
        self._write_int(value, 1)

    def u16(self, value: int):
        if value > MAX_U16:
            raise ValueError(f"Cannot encode {value} into u16")
        self._write_int(value, 2)

    def u32(self, value: int):
        if value > MAX_U32:
            raise ValueError(f"Cannot encode {value} into u32")
        self._write_int(value, 4)

    def u64(self, value: int):
        if value > MAX_U64:
            raise ValueError(f"Cannot encode {value} into u64")
        self._write_int(value, 8)

    def uleb128(self, value: int):
        if value > MAX_U32:
            raise ValueError(f"Cannot encode {value} into uleb128")

        while value >= 0x80:
            # Write 7 (lowest) bits of data and set the 8th bit to 1.
            byte = value & 0x7F
            self.u8(byte | 0x80)
            value >>= 7

        # Write the remaining bits of data and set the highest bit to 0.
        self.u8(value & 0x7F)

    def _write_int(self, value: int, length: int):
        self._output.write(value.to_bytes(length, "little", signed=False))


def encoder(
    value: typing.Any, encoder: typing.Callable[[Serializer, typing.Any], typing.Any]
) -> bytes:
    ser = Serializer()
    encoder(ser, value)
    return ser.output()


class Test(unittest.TestCase):
    def test_bool(self):
        ser = Serializer()
        ser.bool(True)
        ser.bool(False)
        der = Deserializer(ser.output())
        self.assertTrue(der.bool())
        self.assertFalse(der.bool())

    def test_bool_error(self):
        ser = Serializer()
        ser.u8(32)
        der = Deserializer(ser.output())
        with self.assertRaises(DeserializationError):
            der.bool()

    def test_bytes(self):
        in_value = b"1234567890"

        ser = Serializer()
        ser.to_bytes(in_value)
        der = Deserializer(ser.output())

        self.assertEqual(in_value, der.to_bytes())

    def test_sequence(self):
        in_value = ["a", "abc", "def", "ghi"]

        ser = Serializer()
        ser.sequence(in_value, Serializer.str)
        der = Deserializer(ser.output())

        self.assertEqual(in_value, der.sequence(Deserializer.str))

    def test_sequence_length_exceeds_input(self):
        ser = Serializer()
        ser.uleb128(1000)
        ser.u8(1)
        der = Deserializer(ser.output())
        with self.assertRaises(DeserializationError):
            der.sequence(Deserializer.u8)

    def test_u16(self):
        ser = Serializer()
        ser.u16(0b0000_0100_0000_0101)
        self.assertEqual(ser.output(), b"\x05\x04")
        self.assertEqual(Deserializer(ser.output()).u16(), 1029)

    def test_u16_overflow(self):
        with self.assertRaises(ValueError):
            Serializer().u16(MAX_U16 + 1)

    def test_uleb128(self):
        in_value = 1111111111

        ser = Serializer()
        ser.uleb128(in_value)
        der = Deserializer(ser.output())

        self.assertEqual(in_value, der.uleb128())

    def test_uleb128_canonical(self):
        self.assertEqual(Deserializer(b"\x00").uleb128(), 0)
        self.assertEqual(Deserializer(b"\x80\x01").uleb128(), 128)
        with self.assertRaises(DeserializationError):
            Deserializer(b"\x80\x00").uleb128()
        with self.assertRaises(DeserializationError):
            Deserializer(b"\x85\x80\x00").uleb128()

    def test_truncated_input(self):
        der = Deserializer(b"\x05abc")
        with self.assertRaisesRegex(DeserializationError, "Unexpected end of input"):
            der.to_bytes()


if __name__ == "__main__":
    unittest.main()

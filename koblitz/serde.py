"""Raw (internal-representation) serialization for fixed-size objects."""

from __future__ import annotations

import abc
from typing import BinaryIO, TypeVar

T = TypeVar("T", bound="SerdeObject")


def _read_exact(reader: BinaryIO, length: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < length:
        chunk = reader.read(length - len(chunks))
        if not chunk:
            raise EOFError(f"expected {length} bytes, got {len(chunks)}")
        chunks.extend(chunk)
    return bytes(chunks)


class SerdeObject(abc.ABC):
    """An object that converts to and from the raw bytes of its internal representation.

    The unchecked readers perform no validation and are meant only for data
    this program wrote itself; the checked readers raise ``ValueError`` on
    bytes that do not describe a valid object.
    """

    __slots__ = ()

    @classmethod
    @abc.abstractmethod
    def _raw_length(cls) -> int:
        """Number of bytes in the raw encoding."""

    @classmethod
    @abc.abstractmethod
    def from_raw_bytes_unchecked(cls: type[T], data: bytes) -> T:
        """Decode raw bytes without checking that they describe a valid object."""

    @classmethod
    @abc.abstractmethod
    def from_raw_bytes(cls: type[T], data: bytes) -> T:
        """Decode raw bytes, raising ``ValueError`` if they are not valid."""

    @abc.abstractmethod
    def to_raw_bytes(self) -> bytes:
        """Encode the internal representation as bytes."""

    @classmethod
    def read_raw_unchecked(cls: type[T], reader: BinaryIO) -> T:
        """Read one object from a binary stream without validation."""
        return cls.from_raw_bytes_unchecked(_read_exact(reader, cls._raw_length()))

    @classmethod
    def read_raw(cls: type[T], reader: BinaryIO) -> T:
        """Read one object from a binary stream, raising ``ValueError`` if invalid."""
        return cls.from_raw_bytes(_read_exact(reader, cls._raw_length()))

    def write_raw(self, writer: BinaryIO) -> None:
        """Write the raw encoding to a binary stream."""
        writer.write(self.to_raw_bytes())
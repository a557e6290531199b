"""Pack files: many objects bundled into one byte stream, plus simple deltas."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

PACK_SIGNATURE = b"PACK"
PACK_VERSION = 2
HEADER_SIZE = 12
FULL_OBJECT_TYPE = 1
DELTA_OBJECT_TYPE = 7
MIN_MATCH_LENGTH = 8

DELTA_COPY = 0x00
DELTA_INSERT = 0x01


class PackError(ValueError):
    """Raised when pack data cannot be decoded."""


@dataclass
class PackHeader:
    """The fixed twelve-byte header of a pack."""

    signature: bytes = PACK_SIGNATURE
    version: int = PACK_VERSION
    object_count: int = 0


@dataclass
class PackObject:
    """One object held in a pack; ``delta_base`` is set for delta objects."""

    object_type: int
    size: int
    data: bytes
    delta_base: str | None = None


def _parse_object(data: bytes, offset: int) -> tuple[PackObject, int]:
    """Decode the object starting at ``offset``; return it and the next offset."""
    if offset >= len(data):
        raise PackError("Invalid pack object header")
    header_byte = data[offset]
    offset += 1

    object_type = (header_byte >> 4) & 0x07
    size = header_byte & 0x0F

    if header_byte & 0x80:
        shift = 4
        while True:
            if offset >= len(data):
                raise PackError("Invalid pack object header")
            byte = data[offset]
            offset += 1
            size |= (byte & 0x7F) << shift
            if not byte & 0x80:
                break
            shift += 7

    end = offset + size
    if end > len(data):
        raise PackError("Invalid pack object: data truncated")
    return PackObject(object_type, size, bytes(data[offset:end])), end


@dataclass
class Pack:
    """A pack: header, objects in order, and an index from hash to position."""

    header: PackHeader = field(default_factory=PackHeader)
    objects: list[PackObject] = field(default_factory=list)
    index: dict[str, int] = field(default_factory=dict)

    def _append(self, hash_value: str, obj: PackObject) -> None:
        self.index[hash_value] = len(self.objects)
        self.objects.append(obj)
        self.header.object_count = len(self.objects)

    def add_object(self, hash_value: str, object_type: int, data: bytes) -> None:
        """Add a full object."""
        payload = bytes(data)
        self._append(hash_value, PackObject(object_type, len(payload), payload))

    def add_delta_object(
        self, hash_value: str, object_type: int, data: bytes, base_hash: str
    ) -> None:
        """Add an object stored as a delta against ``base_hash``."""
        payload = bytes(data)
        self._append(
            hash_value, PackObject(object_type, len(payload), payload, delta_base=base_hash)
        )

    def to_bytes(self) -> bytes:
        """Serialize the header and every object."""
        buffer = bytearray(self.header.signature)
        buffer += struct.pack(">II", self.header.version, self.header.object_count)
        for obj in self.objects:
            buffer.append(((obj.object_type << 4) & 0xFF) | (obj.size & 0x0F))
            if obj.size >= 0x0F:
                remaining = obj.size >> 4
                while remaining > 0:
                    byte = remaining & 0x7F
                    remaining >>= 7
                    buffer.append(byte | 0x80 if remaining > 0 else byte)
            buffer += obj.data
        return bytes(buffer)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Pack":
        """Decode a pack; objects are indexed as ``object_<n>``."""
        if len(data) < HEADER_SIZE:
            raise PackError("Invalid pack data: too short")
        signature = bytes(data[:4])
        if signature != PACK_SIGNATURE:
            raise PackError("Invalid pack signature")
        version, object_count = struct.unpack(">II", data[4:HEADER_SIZE])

        pack = cls(header=PackHeader(signature, version, object_count))
        offset = HEADER_SIZE
        for number in range(object_count):
            obj, offset = _parse_object(data, offset)
            pack.index[f"object_{number}"] = len(pack.objects)
            pack.objects.append(obj)
        return pack


def _match_length(base: bytes, base_offset: int, target: bytes, target_offset: int) -> int:
    limit = min(len(base) - base_offset, len(target) - target_offset)
    length = 0
    while length < limit and base[base_offset + length] == target[target_offset + length]:
        length += 1
    return length


def _has_long_match(base: bytes, target: bytes, target_offset: int) -> bool:
    return any(
        _match_length(base, offset, target, target_offset) >= MIN_MATCH_LENGTH
        for offset in range(len(base))
    )


def compute_delta(base: bytes, target: bytes) -> bytes:
    """Encode ``target`` as copy and insert instructions against ``base``.

    Layout: base size and target size as big-endian u32, then instructions:
    ``0x00 offset length`` copies from the base, ``0x01 length data`` inserts.
    Only matches of at least eight bytes are copied.
    """
    delta = bytearray(struct.pack(">II", len(base), len(target)))
    position = 0
    while position < len(target):
        best_offset, best_length = 0, 0
        for offset in range(len(base)):
            length = _match_length(base, offset, target, position)
            if length > best_length and length >= MIN_MATCH_LENGTH:
                best_offset, best_length = offset, length

        if best_length >= MIN_MATCH_LENGTH:
            delta.append(DELTA_COPY)
            delta += struct.pack(">II", best_offset, best_length)
            position += best_length
        else:
            insert_length = 1
            while position + insert_length < len(target) and not _has_long_match(
                base, target, position + insert_length
            ):
                insert_length += 1
            delta.append(DELTA_INSERT)
            delta += struct.pack(">I", insert_length)
            delta += target[position : position + insert_length]
            position += insert_length
    return bytes(delta)


class PackBuilder:
    """Collects full objects and deltas, then builds a pack from them."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.deltas: dict[str, tuple[str, bytes]] = {}

    def add_object(self, hash_value: str, data: bytes) -> None:
        self.objects[hash_value] = bytes(data)

    def create_delta(self, hash_value: str, base_hash: str, new_data: bytes) -> None:
        """Record a delta of ``new_data`` against a known base; unknown bases are skipped."""
        base_data = self.objects.get(base_hash)
        if base_data is not None:
            self.deltas[hash_value] = (base_hash, compute_delta(base_data, bytes(new_data)))

    def build_pack(self) -> Pack:
        """Return a pack holding all full objects followed by all deltas."""
        pack = Pack()
        for hash_value, data in self.objects.items():
            pack.add_object(hash_value, FULL_OBJECT_TYPE, data)
        for hash_value, (base_hash, delta) in self.deltas.items():
            pack.add_delta_object(hash_value, DELTA_OBJECT_TYPE, delta, base_hash)
        return pack


def create_thin_pack(
    local_objects: dict[str, bytes], remote_objects: dict[str, bytes]
) -> Pack:
    """Pack the local objects that the remote does not already have."""
    pack = Pack()
    for hash_value, data in local_objects.items():
        if hash_value not in remote_objects:
            pack.add_object(hash_value, FULL_OBJECT_TYPE, data)
    return pack


def extract_objects_from_pack(pack: Pack) -> dict[str, bytes]:
    """Return the data of every indexed object, keyed by its index name."""
    return {
        hash_value: pack.objects[position].data
        for hash_value, position in pack.index.items()
        if 0 <= position < len(pack.objects)
    }
"""
Structure NBT Exporter

Writes the structure template format loaded by structure blocks and
/place template. NBT is a big-endian tagged tree; only the handful of tag
types a structure file needs are supported.

File Structure (root compound, unnamed):
- DataVersion: Int
- size: List of 3 Int (x, y, z)
- palette: List of Compound {Name: String, Properties?: Compound of String}
- blocks: List of Compound {pos: List of 3 Int, state: Int}
- entities: empty List
"""

from typing import Dict, Iterable, List, Sequence
import gzip
import struct

from ..blocks import parse_block_state
from ..structure import StructureSize, Voxel


# Tag type ids
TAG_END = 0
TAG_INT = 3
TAG_STRING = 8
TAG_LIST = 9
TAG_COMPOUND = 10

# Game data version the structures are stamped with
DATA_VERSION = 3837


class NbtWriter:
    """Append-only big-endian NBT byte builder."""

    def __init__(self):
        self._parts: List[bytes] = []

    def write_byte(self, value: int):
        self._parts.append(struct.pack('>B', value))

    def write_short(self, value: int):
        self._parts.append(struct.pack('>H', value))

    def write_int(self, value: int):
        self._parts.append(struct.pack('>i', value))

    def write_string(self, value: str):
        """Write a length-prefixed UTF-8 string (no tag header)."""
        data = value.encode('utf-8')
        self.write_short(len(data))
        self._parts.append(data)

    def _header(self, tag_id: int, name: str):
        self.write_byte(tag_id)
        self.write_string(name)

    def begin_compound(self, name: str):
        self._header(TAG_COMPOUND, name)

    def end_compound(self):
        self.write_byte(TAG_END)

    def int_tag(self, name: str, value: int):
        self._header(TAG_INT, name)
        self.write_int(value)

    def string_tag(self, name: str, value: str):
        self._header(TAG_STRING, name)
        self.write_string(value)

    def begin_list(self, name: str, element_type: int, length: int):
        """
        Start a named list. The caller writes ``length`` unnamed payloads.

        Compound elements are written as their entries followed by
        end_compound().
        """
        self._header(TAG_LIST, name)
        self.write_byte(element_type)
        self.write_int(length)

    def int_list(self, name: str, values: Sequence[int]):
        self.begin_list(name, TAG_INT, len(values))
        for v in values:
            self.write_int(v)

    def getvalue(self) -> bytes:
        return b''.join(self._parts)


def build_block_palette(voxels: Iterable[Voxel]) -> Dict[str, int]:
    """Map each distinct block id to its palette index, in first-seen order."""
    palette: Dict[str, int] = {}
    for v in voxels:
        if v.block not in palette:
            palette[v.block] = len(palette)
    return palette


def write_structure_nbt(
    voxels: Sequence[Voxel],
    size: StructureSize,
    data_version: int = DATA_VERSION
) -> bytes:
    """
    Serialize voxels as an uncompressed structure NBT document.

    Args:
        voxels: Normalized voxels (non-negative coordinates)
        size: Structure bounds from normalize_bounds()
        data_version: DataVersion stamped into the file

    Returns:
        Raw NBT bytes
    """
    palette = build_block_palette(voxels)
    w = NbtWriter()

    w.begin_compound("")
    w.int_tag("DataVersion", data_version)
    w.int_list("size", [size.x, size.y, size.z])

    w.begin_list("palette", TAG_COMPOUND, len(palette))
    for block_id in palette:
        name, props = parse_block_state(block_id)
        w.string_tag("Name", name)
        if props:
            w.begin_compound("Properties")
            for key, value in props.items():
                w.string_tag(key, value)
            w.end_compound()
        w.end_compound()

    w.begin_list("blocks", TAG_COMPOUND, len(voxels))
    for v in voxels:
        w.int_list("pos", [v.x, v.y, v.z])
        w.int_tag("state", palette[v.block])
        w.end_compound()

    w.begin_list("entities", TAG_END, 0)
    w.end_compound()

    return w.getvalue()


def gzip_compress(data: bytes) -> bytes:
    """Gzip with a zeroed timestamp so identical input gives identical bytes."""
    return gzip.compress(data, mtime=0)

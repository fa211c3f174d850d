"""
Minimal ZIP Archive Writer

Packs already-compressed files into a store-only (method 0) archive. No
timestamps, extra fields or comments are written, so the same entries
always produce the same archive bytes.

File Structure:
- per entry: local file header (30 bytes) + name + data
- central directory: one 46-byte header + name per entry
- end of central directory record (22 bytes)
"""

from typing import List, NamedTuple, Sequence
import struct
import numpy as np
from numba import njit

LOCAL_HEADER_SIG = 0x04034B50
CENTRAL_HEADER_SIG = 0x02014B50
END_OF_CENTRAL_DIR_SIG = 0x06054B50
ZIP_VERSION = 20

CRC32_POLYNOMIAL = 0xEDB88320


class ZipEntry(NamedTuple):
    """One file stored in the archive."""
    name: str
    data: bytes


@njit(cache=True)
def _crc32_kernel(data: np.ndarray) -> np.int64:
    crc = np.int64(0xFFFFFFFF)
    for i in range(data.shape[0]):
        crc ^= np.int64(data[i])
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC32_POLYNOMIAL
            else:
                crc = crc >> 1
    return crc ^ 0xFFFFFFFF


def crc32(data: bytes) -> int:
    """CRC-32 (IEEE, reflected) of a byte string."""
    buf = np.frombuffer(data, dtype=np.uint8)
    return int(_crc32_kernel(buf)) & 0xFFFFFFFF


def create_zip(entries: Sequence[ZipEntry]) -> bytes:
    """
    Build a store-only ZIP archive.

    Args:
        entries: Files to store, in order

    Returns:
        Archive bytes
    """
    parts: List[bytes] = []
    central: List[bytes] = []
    offset = 0

    for entry in entries:
        name = entry.name.encode('utf-8')
        crc = crc32(entry.data)
        size = len(entry.data)

        local = struct.pack(
            '<IHHHHHIIIHH',
            LOCAL_HEADER_SIG, ZIP_VERSION, 0, 0, 0, 0,
            crc, size, size, len(name), 0
        )
        parts.append(local + name + entry.data)

        central.append(struct.pack(
            '<IHHHHHHIIIHHHHHII',
            CENTRAL_HEADER_SIG, ZIP_VERSION, ZIP_VERSION, 0, 0, 0, 0,
            crc, size, size, len(name), 0, 0, 0, 0, 0, offset
        ) + name)

        offset += len(local) + len(name) + size

    central_dir = b''.join(central)
    end_record = struct.pack(
        '<IHHHHIIH',
        END_OF_CENTRAL_DIR_SIG, 0, 0, len(entries), len(entries),
        len(central_dir), offset, 0
    )

    return b''.join(parts) + central_dir + end_record

"""
Export modules for structure files.

Supported formats:
- Structure NBT (.nbt, gzipped) - Loaded by structure blocks
- ZIP (.zip, store-only) - Bundles the two halves of a row-split build
"""

from .nbt_exporter import NbtWriter, gzip_compress, write_structure_nbt
from .zip_exporter import ZipEntry, create_zip, crc32

__all__ = [
    "NbtWriter", "gzip_compress", "write_structure_nbt",
    "ZipEntry", "create_zip", "crc32",
]

"""
Deterministic ZIP serialization
"""
from io import BytesIO
from typing import Mapping
import zipfile

# Fixed timestamp so identical inputs give byte-identical archives
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o644


def write_archive(entries: Mapping[str, bytes]) -> bytes:
    """Write path -> bytes entries into a ZIP, in mapping order"""
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path, data in entries.items():
            info = zipfile.ZipInfo(path, date_time=ZIP_EPOCH)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.create_system = 3
            info.external_attr = FILE_MODE << 16
            archive.writestr(info, data)
    return buffer.getvalue()

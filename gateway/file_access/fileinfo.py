# gateway/file_access/fileinfo.py
"""
Translation of remote metadata entries into FileInfo.
"""
import posixpath

from gateway.file_access.base_fs import FileInfo, RemoteEntry


def base_name(name: str) -> str:
    """Last path component with trailing separators removed ("sub/" -> "sub", "/" -> "")."""
    return posixpath.basename(name.rstrip("/"))


def to_file_info(entry: RemoteEntry) -> FileInfo:
    return FileInfo(
        name=base_name(entry.name),
        size=entry.size,
        mode=entry.mode,
        modified_time=entry.modified_time,
        is_directory=entry.is_directory,
    )

# gateway/file_access/base_fs.py
"""
Base remote store interface.

This interface defines the contract the filesystem adapter relies on.
It is protocol-agnostic: the WebDAV store implements it for NextCloud,
tests implement it in memory.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, List


@dataclass(frozen=True)
class RemoteEntry:
    """Metadata entry as reported by the remote store."""
    name: str
    size: int
    mode: int
    modified_time: datetime
    is_directory: bool


@dataclass(frozen=True)
class FileInfo:
    """File information exposed to the FTP engine."""
    name: str
    size: int
    mode: int
    modified_time: datetime
    is_directory: bool


class RemoteStore(ABC):
    """
    Abstract base class for remote stores.

    Every method blocks until the remote round trip completes. Failures
    are raised as RemoteOperationError (ResourceNotFoundError for missing
    paths, ResourceExistsError for overwrite conflicts).
    """

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Base URL the store is bound to. Fixed for the store's lifetime."""
        pass

    @abstractmethod
    def stat(self, path: str) -> RemoteEntry:
        """
        Get metadata for a file or directory.

        Args:
            path: Path relative to the share root

        Returns:
            RemoteEntry for the path

        Raises:
            ResourceNotFoundError: If path doesn't exist
        """
        pass

    @abstractmethod
    def read_dir(self, path: str) -> List[RemoteEntry]:
        """
        List a directory.

        Args:
            path: Directory path

        Returns:
            Entries in the order the remote reported them
        """
        pass

    @abstractmethod
    def read_stream(self, path: str) -> BinaryIO:
        """
        Open a remote file for sequential reading.

        Returns:
            File-like object supporting read(size) and close()
        """
        pass

    @abstractmethod
    def write(self, path: str, data: bytes) -> None:
        """
        Replace the remote file at path with data in a single request.

        Args:
            path: File path
            data: Complete file contents
        """
        pass

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Create a single directory."""
        pass

    @abstractmethod
    def mkdir_all(self, path: str) -> None:
        """Create a directory and any missing parents."""
        pass

    @abstractmethod
    def remove(self, path: str) -> None:
        """Remove a file or directory."""
        pass

    @abstractmethod
    def remove_all(self, path: str) -> None:
        """Remove a path and everything below it. Missing paths are not an error."""
        pass

    @abstractmethod
    def rename(self, old_path: str, new_path: str, overwrite: bool = False) -> None:
        """
        Move or rename a path.

        Args:
            old_path: Source path
            new_path: Destination path
            overwrite: If False and destination exists, fail

        Raises:
            ResourceExistsError: If destination exists and overwrite=False
        """
        pass

    def close(self) -> None:
        """Release connections held by the store."""
        return None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} base_url={self.base_url}>"

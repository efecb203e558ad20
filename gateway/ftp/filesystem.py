# gateway/ftp/filesystem.py
"""
pyftpdlib AbstractedFS backed by a RemoteFilesystem.

The FTP root maps to the share root, so FTP paths and "filesystem"
paths are the same normalised POSIX paths. Nothing touches the local
disk.
"""
import os
import posixpath
import stat as stat_module
import time
from datetime import datetime, timezone
from typing import Iterable, Iterator, List

from pyftpdlib.filesystems import AbstractedFS

from gateway.file_access.base_fs import FileInfo
from gateway.file_access.errors import UnsupportedOperationError
from gateway.file_access.handles import FileHandle
from gateway.file_access.remote_fs import RemoteFilesystem

SIX_MONTHS = 180 * 24 * 60 * 60

# pyftpdlib open() modes -> os.open() flags
_MODE_FLAGS = {
    "r": os.O_RDONLY,
    "w": os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    "a": os.O_WRONLY | os.O_CREAT | os.O_APPEND,
    "r+": os.O_RDWR,
}


def to_stat_result(info: FileInfo) -> os.stat_result:
    mtime = info.modified_time.timestamp()
    # mode, ino, dev, nlink, uid, gid, size, atime, mtime, ctime
    return os.stat_result((info.mode, 0, 0, 1, 0, 0, info.size, mtime, mtime, mtime))


class RemoteAbstractedFS(AbstractedFS):
    """
    Filesystem view pyftpdlib drives for one authenticated session.

    The RemoteFilesystem is attached to the command channel by the
    authorizer at login (cmd_channel.remote_fs).
    """

    def __init__(self, root: str, cmd_channel):
        super().__init__(root, cmd_channel)
        self.remote: RemoteFilesystem = cmd_channel.remote_fs

    # --- path handling

    def ftp2fs(self, ftppath: str) -> str:
        return self.ftpnorm(ftppath)

    def fs2ftp(self, fspath: str) -> str:
        return fspath

    def validpath(self, path: str) -> bool:
        return True

    def realpath(self, path: str) -> str:
        return path

    # --- operations

    def open(self, filename: str, mode: str) -> FileHandle:
        base_mode = mode.replace("b", "").replace("t", "")
        flags = _MODE_FLAGS.get(base_mode)
        if flags is None:
            raise UnsupportedOperationError(f"open mode {mode!r} not supported: {filename}")
        return self.remote.open_file(filename, flags)

    def mkstemp(self, suffix="", prefix="", dir=None, mode="wb"):
        raise UnsupportedOperationError("unique file names (STOU) not supported")

    def chdir(self, path: str) -> None:
        info = self.remote.stat(path)
        if not info.is_directory:
            raise NotADirectoryError(20, "Not a directory", path)
        self.cwd = self.fs2ftp(path)

    def mkdir(self, path: str) -> None:
        self.remote.mkdir(path)

    def listdir(self, path: str) -> List[str]:
        return [info.name for info in self.remote.list_directory(path)]

    def listdirinfo(self, path: str) -> List[str]:
        return self.listdir(path)

    def rmdir(self, path: str) -> None:
        self.remote.remove(path)

    def remove(self, path: str) -> None:
        self.remote.remove(path)

    def rename(self, src: str, dst: str) -> None:
        self.remote.rename(src, dst)

    def chmod(self, path: str, mode: int) -> None:
        self.remote.set_permissions(path, mode)

    def utime(self, path: str, timeval: float) -> None:
        when = datetime.fromtimestamp(timeval, tz=timezone.utc)
        self.remote.set_times(path, when, when)

    def stat(self, path: str) -> os.stat_result:
        return to_stat_result(self.remote.stat(path))

    lstat = stat

    def readlink(self, path: str) -> str:
        raise UnsupportedOperationError(f"symbolic links not supported: {path}")

    # --- predicates (os.path semantics: errors mean False)

    def isfile(self, path: str) -> bool:
        try:
            return not self.remote.stat(path).is_directory
        except OSError:
            return False

    def islink(self, path: str) -> bool:
        return False

    def isdir(self, path: str) -> bool:
        try:
            return self.remote.stat(path).is_directory
        except OSError:
            return False

    def lexists(self, path: str) -> bool:
        try:
            self.remote.stat(path)
        except OSError:
            return False
        return True

    def getsize(self, path: str) -> int:
        return self.remote.stat(path).size

    def getmtime(self, path: str) -> float:
        return self.remote.stat(path).modified_time.timestamp()

    def get_user_by_uid(self, uid) -> str:
        return "owner"

    def get_group_by_gid(self, gid) -> str:
        return "group"

    # --- listings

    def _infos_for(self, basedir: str, listing: Iterable[str], ignore_err: bool) -> Iterator[FileInfo]:
        """
        Resolve names under basedir to FileInfo.

        A single name (LIST/MLST on one path) is a stat; several names are
        served from one directory listing.
        """
        names = list(listing)
        if len(names) == 1:
            try:
                info = self.remote.stat(posixpath.join(basedir, names[0]))
            except OSError:
                if ignore_err:
                    return
                raise
            yield FileInfo(names[0], info.size, info.mode, info.modified_time, info.is_directory)
            return

        by_name = {info.name: info for info in self.remote.list_directory(basedir)}
        for name in names:
            info = by_name.get(name)
            if info is None:
                if ignore_err:
                    continue
                raise FileNotFoundError(2, "No such file or directory", posixpath.join(basedir, name))
            yield info

    def _timefunc(self):
        return time.gmtime if getattr(self.cmd_channel, "use_gmt_times", True) else time.localtime

    def _encode(self, line: str) -> bytes:
        return line.encode("utf8", getattr(self.cmd_channel, "unicode_errors", "replace"))

    def format_list(self, basedir: str, listing: Iterable[str], ignore_err: bool = True) -> Iterator[bytes]:
        """Yield /bin/ls -l style lines."""
        return self._list_lines(self._infos_for(basedir, listing, ignore_err))

    def _list_lines(self, infos: Iterable[FileInfo]) -> Iterator[bytes]:
        timefunc = self._timefunc()
        now = time.time()
        for info in infos:
            mtime = info.modified_time.timestamp()
            if now - SIX_MONTHS < mtime <= now:
                mtimestr = time.strftime("%b %d %H:%M", timefunc(mtime))
            else:
                mtimestr = time.strftime("%b %d  %Y", timefunc(mtime))
            nlinks = 2 if info.is_directory else 1
            line = "%s %3s %-8s %-8s %8s %s %s\r\n" % (
                stat_module.filemode(info.mode),
                nlinks,
                self.get_user_by_uid(0),
                self.get_group_by_gid(0),
                info.size,
                mtimestr,
                info.name,
            )
            yield self._encode(line)

    def format_mlsx(self, basedir: str, listing: Iterable[str], perms: str, facts, ignore_err: bool = True) -> Iterator[bytes]:
        """Yield MLSD/MLST fact lines."""
        timefunc = self._timefunc()
        permdir = "".join([x for x in perms if x not in "arw"])
        permfile = "".join([x for x in perms if x not in "celmp"])
        if "w" in perms or "a" in perms or "f" in perms:
            permdir += "c"
        if "d" in perms:
            permdir += "p"

        for info in self._infos_for(basedir, listing, ignore_err):
            retfacts = {}
            if "type" in facts:
                retfacts["type"] = "dir" if info.is_directory else "file"
            if "perm" in facts:
                retfacts["perm"] = permdir if info.is_directory else permfile
            if "size" in facts:
                retfacts["size"] = info.size
            if "modify" in facts:
                retfacts["modify"] = time.strftime("%Y%m%d%H%M%S", timefunc(info.modified_time.timestamp()))
            if "unix.mode" in facts:
                retfacts["unix.mode"] = oct(stat_module.S_IMODE(info.mode))
            factstring = "".join(["%s=%s;" % (x, retfacts[x]) for x in sorted(retfacts.keys())])
            yield self._encode("%s %s\r\n" % (factstring, info.name))

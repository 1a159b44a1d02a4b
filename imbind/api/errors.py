"""Public binding error hierarchy."""

from __future__ import annotations

from enum import IntEnum
from typing import NoReturn


class ImbindError(Exception):
    """Base class for all binding errors."""


class DeletedError(ImbindError):
    """Raised when a released handle is used."""

    def __init__(self, message: str = "image deleted") -> None:
        super().__init__(message)


class TypeMismatch(ImbindError, TypeError):
    """Raised when call arguments match no accepted shape."""


class LoadError(IntEnum):
    """Numeric engine file error codes."""

    NONE = 0
    FILE_DOES_NOT_EXIST = 1
    FILE_IS_DIRECTORY = 2
    PERMISSION_DENIED_TO_READ = 3
    NO_LOADER_FOR_FILE_FORMAT = 4
    PATH_TOO_LONG = 5
    PATH_COMPONENT_NON_EXISTANT = 6
    PATH_COMPONENT_NOT_DIRECTORY = 7
    PATH_POINTS_OUTSIDE_ADDRESS_SPACE = 8
    TOO_MANY_SYMBOLIC_LINKS = 9
    OUT_OF_MEMORY = 10
    OUT_OF_FILE_DESCRIPTORS = 11
    PERMISSION_DENIED_TO_WRITE = 12
    OUT_OF_DISK_SPACE = 13
    UNKNOWN = 14


class FileError(ImbindError):
    """Engine failure tied to a file path."""

    code: LoadError = LoadError.UNKNOWN
    description: str = "Unknown or unspecified error"

    def __init__(self, path: str) -> None:
        self.path = str(path)
        super().__init__(f'"{self.path}": {self.description}')


class FileDoesNotExist(FileError):
    code = LoadError.FILE_DOES_NOT_EXIST
    description = "File does not exist"


class FileIsDirectory(FileError):
    code = LoadError.FILE_IS_DIRECTORY
    description = "File is directory"


class PermissionDeniedRead(FileError):
    code = LoadError.PERMISSION_DENIED_TO_READ
    description = "Permission denied to read"


class NoLoaderForFormat(FileError):
    code = LoadError.NO_LOADER_FOR_FILE_FORMAT
    description = "No loader for file format"


class PathTooLong(FileError):
    code = LoadError.PATH_TOO_LONG
    description = "Path too long"


class PathComponentMissing(FileError):
    code = LoadError.PATH_COMPONENT_NON_EXISTANT
    description = "Path component nonexistant"


class PathComponentNotDirectory(FileError):
    code = LoadError.PATH_COMPONENT_NOT_DIRECTORY
    description = "Path component not directory"


class PathOutsideAddressSpace(FileError):
    code = LoadError.PATH_POINTS_OUTSIDE_ADDRESS_SPACE
    description = "Path points outside address space"


class TooManySymlinks(FileError):
    code = LoadError.TOO_MANY_SYMBOLIC_LINKS
    description = "Too many symbolic links"


class OutOfMemory(FileError):
    code = LoadError.OUT_OF_MEMORY
    description = "Out of memory"


class OutOfFileDescriptors(FileError):
    code = LoadError.OUT_OF_FILE_DESCRIPTORS
    description = "Out of file descriptors"


class PermissionDeniedWrite(FileError):
    code = LoadError.PERMISSION_DENIED_TO_WRITE
    description = "Permission denied to write"


class OutOfDiskSpace(FileError):
    code = LoadError.OUT_OF_DISK_SPACE
    description = "Out of disk space"


class UnknownFileError(FileError):
    code = LoadError.UNKNOWN
    description = "Unknown or unspecified error"


FILE_ERRORS: dict[LoadError, type[FileError]] = {
    cls.code: cls
    for cls in (
        FileDoesNotExist,
        FileIsDirectory,
        PermissionDeniedRead,
        NoLoaderForFormat,
        PathTooLong,
        PathComponentMissing,
        PathComponentNotDirectory,
        PathOutsideAddressSpace,
        TooManySymlinks,
        OutOfMemory,
        OutOfFileDescriptors,
        PermissionDeniedWrite,
        OutOfDiskSpace,
        UnknownFileError,
    )
}


def coerce_load_error(code: int) -> LoadError:
    """Map a raw engine code to a known error kind; out-of-range codes become UNKNOWN."""
    try:
        return LoadError(int(code))
    except ValueError:
        return LoadError.UNKNOWN


def file_error_for(path: str, code: int) -> FileError:
    """Build the typed error instance for an engine code."""
    kind = coerce_load_error(code)
    if kind is LoadError.NONE:
        kind = LoadError.UNKNOWN
    return FILE_ERRORS[kind](path)


def raise_file_error(path: str, code: int) -> NoReturn:
    """Raise the typed error for an engine code."""
    raise file_error_for(path, code)

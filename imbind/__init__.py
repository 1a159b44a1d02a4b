"""Python binding for a 2D imaging engine with a process-wide rendering context."""

from imbind.api import colors
from imbind.api.colors import CmyaColor, HlsaColor, HsvaColor, RgbaColor
from imbind.api.enums import Direction, Encoding, Operation
from imbind.api.errors import (
    DeletedError,
    FileDoesNotExist,
    FileError,
    FileIsDirectory,
    ImbindError,
    LoadError,
    NoLoaderForFormat,
    OutOfDiskSpace,
    OutOfFileDescriptors,
    OutOfMemory,
    PathComponentMissing,
    PathComponentNotDirectory,
    PathOutsideAddressSpace,
    PathTooLong,
    PermissionDeniedRead,
    PermissionDeniedWrite,
    TooManySymlinks,
    TypeMismatch,
    UnknownFileError,
)
from imbind.api.geometry import Border
from imbind.cache import Cache
from imbind.color_modifier import ColorModifier
from imbind.context import X11_SUPPORT, Context
from imbind.filter import Filter
from imbind.font import Font, TextIndex
from imbind.gradient import Gradient
from imbind.image import Image, LoadResult
from imbind.polygon import Polygon

__version__ = "0.5.2"

__all__ = [
    "Border",
    "Cache",
    "CmyaColor",
    "ColorModifier",
    "Context",
    "DeletedError",
    "Direction",
    "Encoding",
    "FileDoesNotExist",
    "FileError",
    "FileIsDirectory",
    "Filter",
    "Font",
    "Gradient",
    "HlsaColor",
    "HsvaColor",
    "Image",
    "ImbindError",
    "LoadError",
    "LoadResult",
    "NoLoaderForFormat",
    "Operation",
    "OutOfDiskSpace",
    "OutOfFileDescriptors",
    "OutOfMemory",
    "PathComponentMissing",
    "PathComponentNotDirectory",
    "PathOutsideAddressSpace",
    "PathTooLong",
    "PermissionDeniedRead",
    "PermissionDeniedWrite",
    "Polygon",
    "RgbaColor",
    "TextIndex",
    "TooManySymlinks",
    "TypeMismatch",
    "UnknownFileError",
    "X11_SUPPORT",
    "colors",
]

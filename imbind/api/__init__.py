"""Public binding API contracts."""

from imbind.api.colors import COLOR_VARIANTS, CmyaColor, ColorValue, HlsaColor, HsvaColor, RgbaColor
from imbind.api.engine import EngineResource, ImagingEngine, create_imaging_engine
from imbind.api.enums import Direction, Encoding, Operation
from imbind.api.errors import (
    DeletedError,
    FileError,
    ImbindError,
    LoadError,
    TypeMismatch,
    file_error_for,
)
from imbind.api.geometry import Border, ShapeRecord
from imbind.api.logging import BindingLoggingConfig, configure_binding_logging

__all__ = [
    "BindingLoggingConfig",
    "Border",
    "COLOR_VARIANTS",
    "CmyaColor",
    "ColorValue",
    "DeletedError",
    "Direction",
    "Encoding",
    "EngineResource",
    "FileError",
    "HlsaColor",
    "HsvaColor",
    "ImagingEngine",
    "ImbindError",
    "LoadError",
    "Operation",
    "RgbaColor",
    "ShapeRecord",
    "TypeMismatch",
    "configure_binding_logging",
    "create_imaging_engine",
    "file_error_for",
]

from __future__ import annotations

import logging

import pytest

from imbind.api.errors import (
    FileDoesNotExist,
    ImbindError,
    LoadError,
    NoLoaderForFormat,
    PermissionDeniedWrite,
    UnknownFileError,
)
from imbind.api.geometry import Border
from imbind.image import Image, LoadResult


def test_constructor_rejects_failed_creation(fake_engine) -> None:
    with pytest.raises(ImbindError, match="could not create 0x5 image"):
        Image(0, 5)


def test_load_raises_typed_error_with_path(fake_engine) -> None:
    fake_engine.results["load_image"] = (None, LoadError.FILE_DOES_NOT_EXIST)
    with pytest.raises(FileDoesNotExist) as excinfo:
        Image.load("missing.png")
    assert excinfo.value.path == "missing.png"
    assert excinfo.value.code is LoadError.FILE_DOES_NOT_EXIST
    assert str(excinfo.value) == '"missing.png": File does not exist'


def test_load_with_callback_suppresses_error(fake_engine) -> None:
    fake_engine.results["load_image"] = (None, LoadError.NO_LOADER_FOR_FILE_FORMAT)
    seen: list[Image] = []
    assert Image.load("odd.xyz", seen.append) is None
    assert seen == []


def test_load_with_callback_passes_image(fake_engine) -> None:
    seen: list[Image] = []
    image = Image.load("ok.png", seen.append)
    assert seen == [image]
    assert fake_engine.calls[-1] == ("load_image", ("ok.png", False, True))


def test_silent_loads_yield_dead_wrapper_and_log(fake_engine, caplog) -> None:
    fake_engine.results["load_image"] = (None, LoadError.PERMISSION_DENIED_TO_READ)
    with caplog.at_level(logging.DEBUG, logger="imbind.image"):
        image = Image.load_image("locked.png")
    assert not image.live
    assert "image_load_failed path=locked.png code=3" in caplog.text


@pytest.mark.parametrize(
    ("loader", "immediate", "cache"),
    [
        (Image.load_image, False, True),
        (Image.load_immediately, True, True),
        (Image.load_without_cache, False, False),
        (Image.load_immediately_without_cache, True, False),
    ],
)
def test_silent_load_variants_pass_flags(fake_engine, loader, immediate, cache) -> None:
    image = loader("a.png")
    assert image.live
    assert fake_engine.calls[-1] == ("load_image", ("a.png", immediate, cache))


def test_load_with_error_return_reports_code(fake_engine) -> None:
    fake_engine.results["load_image"] = (None, 99)
    result = Image.load_with_error_return("bad.png")
    assert isinstance(result, LoadResult)
    assert not result.image.live
    assert result.error is LoadError.UNKNOWN


def test_save_variants(fake_engine) -> None:
    image = Image(2, 2)
    fake_engine.results["save_image"] = int(LoadError.PERMISSION_DENIED_TO_WRITE)

    with pytest.raises(PermissionDeniedWrite):
        image.save("/readonly/out.png")
    image.save_image("/readonly/out.png")
    assert image.save_with_error_return("/readonly/out.png") is LoadError.PERMISSION_DENIED_TO_WRITE

    fake_engine.results["save_image"] = 0
    image.save("out.png")
    assert image.save_with_error_return("out.png") is LoadError.NONE


def test_unknown_save_code_maps_to_unknown_error(fake_engine) -> None:
    image = Image(2, 2)
    fake_engine.results["save_image"] = 42
    with pytest.raises(UnknownFileError):
        image.save("x.png")


def test_no_loader_error_message(fake_engine) -> None:
    fake_engine.results["load_image"] = (None, 4)
    with pytest.raises(NoLoaderForFormat, match='"x.abc": No loader for file format'):
        Image.load("x.abc")


def test_context_manager_deletes_on_exit(fake_engine) -> None:
    with Image(2, 2) as image:
        assert image.live
    assert not image.live
    assert len(fake_engine.freed) == 1


def test_border_property_round_trip(fake_engine) -> None:
    image = Image(2, 2)
    fake_engine.results["image_border"] = (1, 2, 3, 4)
    assert image.border == Border(1, 2, 3, 4)
    image.border = {"left": 4, "top": 3, "right": 2, "bottom": 1}
    assert fake_engine.calls[-1] == ("set_image_border", (4, 3, 2, 1))


def test_irrelevant_flags_and_attached_values(fake_engine) -> None:
    image = Image(2, 2)
    image.set_irrelevant_alpha(True)
    assert fake_engine.calls[-1] == ("set_image_irrelevant", ("alpha", True))
    image["quality"] = 90
    assert fake_engine.calls[-1] == ("attach_value", ("quality", 90))
    del image["quality"]
    assert fake_engine.calls[-1] == ("remove_attached_value", ("quality",))


def test_property_access_activates_image(fake_engine) -> None:
    first = Image(2, 2)
    second = Image(3, 3)
    fake_engine.results["image_width"] = lambda: fake_engine.stack.active.image
    assert first.width is first._resource()
    assert second.w is second._resource()

from __future__ import annotations

import logging

import pytest

from imbind import (
    FileDoesNotExist,
    FileIsDirectory,
    Image,
    LoadError,
    NoLoaderForFormat,
    PathComponentMissing,
    RgbaColor,
)

PIXEL = RgbaColor(12, 34, 56, 255)


def _saved_png(path) -> str:
    image = Image(3, 2)
    image.fill_rect(0, 0, 3, 2, PIXEL)
    image.save(str(path))
    return str(path)


def test_png_save_load_round_trip(pillow_runtime, tmp_path) -> None:
    target = _saved_png(tmp_path / "out.png")

    loaded = Image.load(target)
    assert (loaded.width, loaded.height) == (3, 2)
    assert loaded.query_pixel(2, 1) == PIXEL
    assert loaded.filename == target
    assert loaded.format == "png"
    assert loaded.has_alpha is True


def test_load_callback_receives_image(pillow_runtime, tmp_path) -> None:
    target = _saved_png(tmp_path / "cb.png")
    seen: list[Image] = []
    image = Image.load(target, seen.append)
    assert seen == [image]


def test_missing_file_raises_file_does_not_exist(pillow_runtime, tmp_path) -> None:
    with pytest.raises(FileDoesNotExist) as excinfo:
        Image.load(str(tmp_path / "nope.png"))
    assert excinfo.value.code is LoadError.FILE_DOES_NOT_EXIST


def test_missing_directory_raises_path_component_missing(pillow_runtime, tmp_path) -> None:
    with pytest.raises(PathComponentMissing):
        Image.load(str(tmp_path / "absent" / "nope.png"))


def test_directory_raises_file_is_directory(pillow_runtime, tmp_path) -> None:
    with pytest.raises(FileIsDirectory):
        Image.load(str(tmp_path))


def test_unreadable_format_raises_no_loader(pillow_runtime, tmp_path) -> None:
    junk = tmp_path / "junk.png"
    junk.write_bytes(b"definitely not an image")
    with pytest.raises(NoLoaderForFormat):
        Image.load(str(junk))
    result = Image.load_with_error_return(str(junk))
    assert result.error is LoadError.NO_LOADER_FOR_FILE_FORMAT
    assert not result.image.live


def test_save_failures_map_to_codes(pillow_runtime, tmp_path) -> None:
    image = Image(2, 2)
    with pytest.raises(NoLoaderForFormat):
        image.save(str(tmp_path / "out.unknownext"))
    with pytest.raises(PathComponentMissing):
        image.save(str(tmp_path / "absent" / "out.png"))
    assert image.save_with_error_return(str(tmp_path / "fine.png")) is LoadError.NONE


def test_silent_load_logs_and_returns_dead_wrapper(pillow_runtime, tmp_path, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="imbind.image"):
        image = Image.load_image(str(tmp_path / "nope.png"))
    assert not image.live
    assert "image_load_failed" in caplog.text


def test_load_without_cache_defers_decoding(pillow_runtime, tmp_path) -> None:
    target = _saved_png(tmp_path / "lazy.png")
    image = Image.load_without_cache(target)
    resource = pillow_runtime.registry.resource(image)
    assert resource.pixels is None
    assert image.width == 3
    assert resource.pixels is None
    assert image.query_pixel(0, 0) == PIXEL
    assert resource.pixels is not None


def test_cached_load_is_reused_until_changes_on_disk(pillow_runtime, tmp_path, caplog) -> None:
    target = _saved_png(tmp_path / "cached.png")
    first = Image.load_immediately(target)
    with caplog.at_level(logging.DEBUG, logger="imbind.engine"):
        second = Image.load_image(target)
    assert "image_cache_hit" in caplog.text
    assert second.query_pixel(1, 1) == PIXEL

    second.draw_pixel(1, 1, RgbaColor(0, 0, 0, 255))
    assert first.query_pixel(1, 1) == PIXEL

    caplog.clear()
    first.set_changes_on_disk()
    with caplog.at_level(logging.DEBUG, logger="imbind.engine"):
        Image.load_image(target)
    assert "image_cache_hit" not in caplog.text


def test_save_without_alpha_drops_transparency(pillow_runtime, tmp_path) -> None:
    image = Image(1, 1)
    image.clear_color_inplace(RgbaColor(200, 100, 50, 10))
    image.set_irrelevant_alpha(True)
    image.has_alpha = False
    target = str(tmp_path / "opaque.png")
    image.save(target)
    loaded = Image.load_immediately_without_cache(target)
    assert loaded.has_alpha is False
    assert loaded.query_pixel(0, 0).alpha == 255

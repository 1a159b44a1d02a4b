from __future__ import annotations

from collections.abc import Iterator

import pytest

from imbind.runtime.binding import BindingRuntime, reset_runtime, set_runtime
from imbind.runtime.config import BindingConfig
from imbind.runtime.context_stack import ContextStack


class FakeResource:
    def __init__(self, label: str) -> None:
        self.label = label

    def __repr__(self) -> str:
        return f"FakeResource({self.label!r})"


class FakeEngine:
    """Records every primitive call together with the active context image."""

    def __init__(self, stack: ContextStack) -> None:
        self.stack = stack
        self.calls: list[tuple[str, tuple]] = []
        self.results: dict[str, object] = {}
        self.freed: list[tuple[str, object, dict]] = []
        self._counter = 0

    def _new(self, label: str) -> FakeResource:
        self._counter += 1
        return FakeResource(f"{label}-{self._counter}")

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args, **kwargs):
            self.calls.append((name, args))
            result = self.results.get(name)
            return result(*args) if callable(result) else result

        return record

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def set_color(self, red, green, blue, alpha) -> None:
        self.calls.append(("set_color", (red, green, blue, alpha)))
        self.stack.active.color = (red, green, blue, alpha)

    def create_image(self, width: int, height: int):
        self.calls.append(("create_image", (width, height)))
        if width <= 0 or height <= 0:
            return None
        return self._new("image")

    def clone_image(self):
        self.calls.append(("clone_image", ()))
        return self._new("image")

    def crop(self, x, y, w, h):
        self.calls.append(("crop", (x, y, w, h)))
        return self._new("image")

    def load_image(self, path, *, immediate=False, cache=True):
        self.calls.append(("load_image", (path, immediate, cache)))
        result = self.results.get("load_image")
        if result is not None:
            return result
        return self._new("image"), 0

    def free_image(self, **options) -> None:
        self.freed.append(("image", self.stack.active.image, options))

    def free_font(self) -> None:
        self.freed.append(("font", self.stack.active.font, {}))

    def free_filter(self) -> None:
        self.freed.append(("filter", self.stack.active.filter, {}))

    def free_color_range(self) -> None:
        self.freed.append(("gradient", self.stack.active.gradient, {}))

    def free_color_modifier(self) -> None:
        self.freed.append(("color_modifier", self.stack.active.color_modifier, {}))

    def polygon_free(self, polygon) -> None:
        self.freed.append(("polygon", polygon, {}))

    def load_font(self, name):
        self.calls.append(("load_font", (name,)))
        return None if name.startswith("missing") else self._new("font")

    def create_color_range(self):
        return self._new("gradient")

    def create_filter(self, size):
        return self._new("filter")

    def create_color_modifier(self):
        return self._new("color_modifier")

    def polygon_new(self):
        return self._new("polygon")


@pytest.fixture(autouse=True)
def _isolated_runtime() -> Iterator[None]:
    reset_runtime()
    yield
    reset_runtime()


@pytest.fixture
def fake_runtime() -> BindingRuntime:
    stack = ContextStack()
    runtime = BindingRuntime(FakeEngine(stack), stack=stack, config=BindingConfig())
    return set_runtime(runtime)


@pytest.fixture
def fake_engine(fake_runtime: BindingRuntime) -> FakeEngine:
    return fake_runtime.engine  # type: ignore[return-value]


@pytest.fixture
def pillow_runtime() -> BindingRuntime:
    return set_runtime(BindingRuntime(config=BindingConfig()))

from __future__ import annotations

import gc

import pytest

from imbind.api.errors import DeletedError
from imbind.runtime.context_stack import ContextStack
from imbind.runtime.registry import Handle, HandleRegistry


class ImageHandle(Handle):
    kind = "image"


class PolygonHandle(Handle):
    kind = "polygon"


def _registry() -> tuple[HandleRegistry, ContextStack, list[tuple[object, dict]]]:
    stack = ContextStack()
    registry = HandleRegistry(stack)
    freed: list[tuple[object, dict]] = []
    registry.register_kind(
        "image",
        lambda **options: freed.append((stack.active.image, options)),
        slot="image",
    )
    registry.register_kind("polygon", lambda polygon: freed.append((polygon, {})))
    return registry, stack, freed


def test_bind_and_resource_lookup() -> None:
    registry, _, _ = _registry()
    resource = object()
    handle = registry.bind(ImageHandle(), resource)
    assert handle.live
    assert registry.resource(handle) is resource
    assert registry.lookup("image", resource) is handle
    assert registry.live_count("image") == 1


def test_binding_none_yields_dead_handle() -> None:
    registry, _, _ = _registry()
    handle = registry.bind(ImageHandle(), None)
    assert not handle.live
    with pytest.raises(DeletedError, match="image deleted"):
        handle._resource()


def test_unbound_handle_is_dead() -> None:
    with pytest.raises(DeletedError):
        ImageHandle()._resource()


def test_unknown_kind_is_rejected() -> None:
    registry, _, _ = _registry()

    class Unknown(Handle):
        kind = "mystery"

    with pytest.raises(KeyError):
        registry.bind(Unknown(), object())


def test_rejects_empty_kind_registration() -> None:
    registry, _, _ = _registry()
    with pytest.raises(ValueError):
        registry.register_kind("  ")


def test_release_installs_slot_then_restores_previous_occupant() -> None:
    registry, stack, freed = _registry()
    current = object()
    stack.active.image = current
    resource = object()
    handle = registry.bind(ImageHandle(), resource)

    registry.release(handle, decache=True)

    assert freed == [(resource, {"decache": True})]
    assert stack.active.image is current
    assert not handle.live
    with pytest.raises(DeletedError):
        registry.resource(handle)


def test_release_clears_slot_when_freed_resource_was_active() -> None:
    registry, stack, _ = _registry()
    resource = object()
    handle = registry.bind(ImageHandle(), resource)
    stack.active.image = resource
    registry.release(handle)
    assert stack.active.image is None


def test_release_twice_frees_once() -> None:
    registry, _, freed = _registry()
    handle = registry.bind(PolygonHandle(), "poly")
    registry.release(handle)
    registry.release(handle)
    assert freed == [("poly", {})]


def test_non_slot_kind_receives_resource_directly() -> None:
    registry, stack, freed = _registry()
    handle = registry.bind(PolygonHandle(), "poly")
    registry.release(handle)
    assert freed == [("poly", {})]
    assert stack.active.image is None


def test_collected_handle_frees_resource() -> None:
    registry, _, freed = _registry()
    resource = object()
    registry.bind(PolygonHandle(), resource)
    gc.collect()
    assert freed == [(resource, {})]
    assert registry.live_count() == 0


def test_non_owning_handle_never_frees() -> None:
    registry, _, freed = _registry()
    resource = object()
    owner = registry.bind(ImageHandle(), resource)
    borrowed = registry.bind(ImageHandle(), resource, owned=False)

    registry.release(borrowed)
    assert freed == []
    assert registry.lookup("image", resource) is owner
    assert not registry.is_owner(borrowed)


def test_rebind_frees_previous_resource() -> None:
    registry, _, freed = _registry()
    first, second = object(), object()
    handle = registry.bind(ImageHandle(), first)
    registry.rebind(handle, second)
    assert registry.resource(handle) is second
    assert [resource for resource, _ in freed] == [first]
    assert registry.lookup("image", second) is handle


def test_clear_frees_every_owned_resource() -> None:
    registry, _, freed = _registry()
    handles = [registry.bind(PolygonHandle(), name) for name in ("a", "b")]
    registry.clear()
    assert sorted(resource for resource, _ in freed) == ["a", "b"]
    assert not any(handle.live for handle in handles)

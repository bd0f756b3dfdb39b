from __future__ import annotations

from html import escape
from typing import Callable, Mapping, Protocol

FORM_ELEMENT_CLASS = "behat-form-element"
HAS_DEFAULT_CLASS = "behat-has-default-value"
YES_NO_OPTIONS = (("yes", "Yes"), ("no", "No"))


class ParameterRenderer(Protocol):
    def render(self, key: str, type: str, name: str, options: Mapping[str, object] | None = None) -> str: ...


def _wrap(key: str, name: str, control: str, default: object | None, description: object | None) -> str:
    classes = [FORM_ELEMENT_CLASS]
    if default is not None:
        classes.append(HAS_DEFAULT_CLASS)
    element = f'<div class="{" ".join(classes)}">'
    element += f'<label for="{escape(key)}">{escape(name)}</label>'
    element += control
    if description:
        element += f'<div class="description">{escape(str(description))}</div>'
    element += "</div>"
    return element


class GenericRenderer:
    """Single-line text box, used for every type without a dedicated renderer."""

    def render(self, key: str, type: str, name: str, options: Mapping[str, object] | None = None) -> str:
        options = options or {}
        default = options.get("default")
        value = f' value="{escape(str(default))}"' if default is not None else ""
        control = f'<input id="{escape(key)}" name="{escape(key)}" class="{escape(type)}" type="text"{value}/>'
        return _wrap(key, name, control, default, options.get("description"))


class YesNoRenderer:
    """Select box offering exactly `yes` and `no`."""

    def render(self, key: str, type: str, name: str, options: Mapping[str, object] | None = None) -> str:
        options = options or {}
        default = options.get("default")
        choices = ""
        for value, label in YES_NO_OPTIONS:
            selected = " selected" if default == value else ""
            choices += f'<option value="{value}"{selected}>{label}</option>'
        control = f'<select id="{escape(key)}" name="{escape(key)}" class="{escape(type)}">{choices}</select>'
        return _wrap(key, name, control, default, options.get("description"))


class ParameterRendererFactory:
    """Maps a parameter type tag to the renderer that draws it.

    Unknown tags fall back to `GenericRenderer`.
    """

    def __init__(self) -> None:
        self._registry: dict[str, Callable[[], ParameterRenderer]] = {"yesno": YesNoRenderer}
        self._fallback: Callable[[], ParameterRenderer] = GenericRenderer

    def register(self, type: str, renderer: Callable[[], ParameterRenderer]) -> None:
        self._registry[type] = renderer

    def create(self, type: str) -> ParameterRenderer:
        return self._registry.get(type, self._fallback)()

"""Simulated native widget layer. Scripts never see these objects directly: lba.ui.bindings wraps each Widget in a
NativeInstance whose property table delegates to it.

A Toolkit belongs to a single interpreter and remembers every top-level window it created, so that the widget tree can
be rendered to an HTML preview once the script has finished.
"""

import logging
from html import escape

logger = logging.getLogger(__name__)


class Widget:
    """A node of the widget tree. kind is the script-facing class name, e.g. 'Window'."""
    CONTAINER = False

    def __init__(self, kind, text="", classes=None, **attributes):
        self.kind = kind
        self.text = text
        self.classes = list(classes) if classes else []
        self.attributes = attributes
        self.children = []
        self.parent = None
        self.background = None
        self.handlers = {}

        logger.debug("initializing %s %r", kind, text)

    def add(self, child):
        if not self.CONTAINER:
            raise ValueError(f"{self.kind} cannot contain other components")
        logger.debug("adding %s to %s", child, self)
        child.parent = self
        self.children.append(child)

    def set_background_color(self, color):
        self.background = color

    def set_event_handler(self, name, callback):
        """callback is an LbaCallable taking no arguments. Setting a handler again replaces the previous one."""
        self.handlers[name] = callback

    def trigger(self, name, interpreter):
        """Invokes the handler registered for event name, if any. Returns whether a handler ran."""
        callback = self.handlers.get(name)
        if callback is None:
            return False
        callback.call(interpreter, [])
        return True

    def __str__(self):
        return f"{self.kind}({self.text})" if self.text else self.kind

    def __repr__(self):
        return f"<{self.kind} {self.text!r} children={len(self.children)}>"


class Container(Widget):
    CONTAINER = True


class TabBar(Container):
    """Container of Tabs with one active tab."""

    def __init__(self):
        super().__init__("TabBar")
        self.active = 0

    def add_tab(self, tab):
        self.add(tab)

    def set_active_tab(self, index):
        if not 0 <= index < len(self.children):
            raise IndexError(f"tab index {index} out of range")
        self.active = index


class Toolkit:
    """Factory for widgets. Every factory returns a new Widget; windows are also recorded for rendering."""

    def __init__(self):
        self.windows = []

    def create_window(self, title):
        window = Container("Window", title)
        self.windows.append(window)
        return window

    def create_button(self, label):
        return Widget("Button", label)

    def create_label(self, text, classes=None):
        return Widget("Label", text, classes)

    def create_icon_grid(self):
        return Container("IconGrid")

    def create_dock(self):
        return Container("Dock")

    def create_app_icon(self, label, icon_path):
        return Widget("AppIcon", label, icon_path=icon_path)

    def create_background_image(self, path):
        return Widget("BackgroundImage", path=path)

    def create_background_color(self, color):
        widget = Widget("BackgroundColor", color=color)
        widget.set_background_color(color)
        return widget

    def create_tab_bar(self):
        return TabBar()

    def create_tab(self, title, content):
        tab = Container("Tab", title)
        tab.add(content)
        return tab

    def reset(self):
        self.windows = []


def _render(widget, depth):
    indent = "  " * depth
    classes = " ".join(["lba-" + widget.kind.lower()] + widget.classes)
    style = []
    if widget.background:
        style.append(f"background-color: {widget.background}")
    if "path" in widget.attributes:
        style.append(f"background-image: url('{widget.attributes['path']}')")
    style_attr = f' style="{escape("; ".join(style))}"' if style else ""
    open_tag = f'{indent}<div class="{escape(classes)}"{style_attr}>'

    if widget.kind == "Button":
        return [f"{indent}<button class=\"{escape(classes)}\"{style_attr}>{escape(widget.text)}</button>"]
    if widget.kind == "AppIcon":
        icon = escape(widget.attributes.get("icon_path", ""))
        return [open_tag, f'{indent}  <img src="{icon}" alt="{escape(widget.text)}">',
                f"{indent}  <span>{escape(widget.text)}</span>", f"{indent}</div>"]

    lines = [open_tag]
    if widget.kind == "Window":
        lines.append(f"{indent}  <h1>{escape(widget.text)}</h1>")
    elif widget.text:
        lines.append(f"{indent}  <span>{escape(widget.text)}</span>")
    for child in widget.children:
        lines.extend(_render(child, depth + 1))
    lines.append(f"{indent}</div>")
    return lines


def render_preview(toolkit):
    """Serializes every top-level window of toolkit to an HTML document. Windows nested in another component are
    rendered inside it. Returns None if the script created no window.
    """
    windows = [window for window in toolkit.windows if window.parent is None]
    if not windows:
        return None

    body = []
    for window in windows:
        body.extend(_render(window, 2))

    title = escape(windows[0].text)
    return "\n".join([
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '  <meta charset="utf-8">',
        f"  <title>{title}</title>",
        "</head>",
        "<body>",
        *body,
        "</body>",
        "</html>",
        "",
    ])

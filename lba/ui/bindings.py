"""Script-facing UI constructors. register_ui_bindings defines Window, Button, Label, ... in a global frame; each
constructor creates a Widget through the interpreter's Toolkit and wraps it in a NativeInstance exposing a fixed property
table of native callables:

```
Window          add, setBackgroundColor, setEventHandler
Button          setBackgroundColor, setEventHandler
Label           setBackgroundColor
IconGrid, Dock  add
TabBar          addTab, setActiveTab, setEventHandler   ; addTab only takes Tabs, setActiveTab fires 'change'
AppIcon, BackgroundImage, BackgroundColor, Tab          (no properties)
```
"""

from lba.core.values import VARIADIC, LbaCallable, NativeFunction, NativeInstance, stringify
from lba.lang.error import ArityMismatch, TypeMismatch


def _widget(value, what):
    """Returns the Widget behind value, which must be a UI component."""
    if not isinstance(value, NativeInstance):
        raise TypeMismatch(None, "{} expects a UI component, got '{}'.", [what, stringify(value)])
    return value.handle


def _method(name, arity, function):
    return NativeFunction(name, arity, function, kind="native method")


def _add(widget, name="add", kind=None):
    """add-style method of widget. When kind is given, only components of that kind are accepted."""
    def add(interpreter, arguments):
        child = _widget(arguments[0], f"{name}()")
        if kind is not None and child.kind != kind:
            raise TypeMismatch(None, "{} expects a {}, got '{}'.", [f"{name}()", kind, stringify(arguments[0])])
        try:
            widget.add(child)
        except ValueError as error:
            raise TypeMismatch(None, str(error)) from error
    return _method(name, 1, add)


def _set_background_color(widget):
    def set_background_color(interpreter, arguments):
        widget.set_background_color(stringify(arguments[0]))
    return _method("setBackgroundColor", 1, set_background_color)


def _set_event_handler(widget):
    def set_event_handler(interpreter, arguments):
        name, callback = arguments
        if not isinstance(callback, LbaCallable):
            raise TypeMismatch(None, "setEventHandler() expects a function, got '{}'.", stringify(callback))
        widget.set_event_handler(stringify(name), callback)
    return _method("setEventHandler", 2, set_event_handler)


def _set_active_tab(widget):
    def set_active_tab(interpreter, arguments):
        index, = arguments
        if isinstance(index, bool) or not isinstance(index, float) or not index.is_integer():
            raise TypeMismatch(None, "setActiveTab() expects a number index.")
        try:
            widget.set_active_tab(int(index))
        except IndexError as error:
            raise TypeMismatch(None, str(error)) from error
        widget.trigger("change", interpreter)
    return _method("setActiveTab", 1, set_active_tab)


def _instance(widget, description, *properties):
    return NativeInstance(widget.kind, widget, {prop.name: prop for prop in properties}, description)


class UiBindings:
    """Constructors bound to one Toolkit. Each public method is a native function body: (interpreter, arguments)."""

    def __init__(self, toolkit):
        self.toolkit = toolkit

    def window(self, interpreter, arguments):
        title = stringify(arguments[0])
        widget = self.toolkit.create_window(title)
        return _instance(
            widget, f"<ui window: {title}>",
            _add(widget), _set_background_color(widget), _set_event_handler(widget),
        )

    def button(self, interpreter, arguments):
        label = stringify(arguments[0])
        widget = self.toolkit.create_button(label)
        return _instance(widget, f"<ui button: {label}>", _set_background_color(widget), _set_event_handler(widget))

    def label(self, interpreter, arguments):
        if not 1 <= len(arguments) <= 2:
            msg = "Label() expects 1 or 2 arguments: (text, [classes]), got {}."
            raise ArityMismatch(None, msg, str(len(arguments)))

        text = stringify(arguments[0])
        classes = []
        if len(arguments) == 2:
            if not isinstance(arguments[1], list):
                raise TypeMismatch(None, "Second argument to Label() must be a list of strings.")
            classes = [stringify(item) for item in arguments[1]]

        widget = self.toolkit.create_label(text, classes)
        return _instance(widget, f"<ui label: {text}>", _set_background_color(widget))

    def icon_grid(self, interpreter, arguments):
        widget = self.toolkit.create_icon_grid()
        return _instance(widget, "<ui icongrid>", _add(widget))

    def dock(self, interpreter, arguments):
        widget = self.toolkit.create_dock()
        return _instance(widget, "<ui dock>", _add(widget))

    def app_icon(self, interpreter, arguments):
        label, icon_path = (stringify(argument) for argument in arguments)
        return _instance(self.toolkit.create_app_icon(label, icon_path), f"<ui appicon: {label}>")

    def background_image(self, interpreter, arguments):
        path = stringify(arguments[0])
        return _instance(self.toolkit.create_background_image(path), f"<ui background: {path}>")

    def background_color(self, interpreter, arguments):
        color = stringify(arguments[0])
        return _instance(self.toolkit.create_background_color(color), f"<ui background-color: {color}>")

    def tab_bar(self, interpreter, arguments):
        widget = self.toolkit.create_tab_bar()
        return _instance(
            widget, "<ui tabbar>",
            _add(widget, "addTab", "Tab"), _set_active_tab(widget), _set_event_handler(widget),
        )

    def tab(self, interpreter, arguments):
        title = stringify(arguments[0])
        content = _widget(arguments[1], "Tab() second argument")
        return _instance(self.toolkit.create_tab(title, content), f"<ui tab: {title}>")

    def constructors(self):
        """(script name, arity, body) for every constructor."""
        return [
            ("Window", 1, self.window),
            ("Button", 1, self.button),
            ("Label", VARIADIC, self.label),
            ("IconGrid", 0, self.icon_grid),
            ("Dock", 0, self.dock),
            ("AppIcon", 2, self.app_icon),
            ("BackgroundImage", 1, self.background_image),
            ("BackgroundColor", 1, self.background_color),
            ("TabBar", 0, self.tab_bar),
            ("Tab", 2, self.tab),
        ]


def register_ui_bindings(environment, toolkit):
    """Defines every UI constructor in environment, creating widgets through toolkit."""
    for name, arity, body in UiBindings(toolkit).constructors():
        environment.define(name, NativeFunction(name, arity, body, kind="native class"))
    return environment

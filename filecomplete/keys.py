from gi.repository import Gtk

class Bindings():
    stylesheet = b"""
        @binding-set filecomplete-key-bindings {
            bind "Tab" { "tab-completion" () };
            bind "<ctrl>i" { "tab-completion" () };
            bind "<ctrl>u" { "kill-input" () };
            bind "<ctrl>a" { "move-input-start" () };
            bind "<ctrl>e" { "move-input-end" () };
            bind "<ctrl>l" { "clear-view" () };

            bind "<ctrl>w" { "delete-from-cursor" (word-ends, -1) };
            bind "<ctrl>h" { "backspace" () };
        }

        * {
             -gtk-key-bindings: filecomplete-key-bindings;
        }
    """

    def __init__(self, widget):
        self.provider = Gtk.CssProvider()
        self.provider.load_from_data(self.stylesheet)

        style_ctx = widget.get_style_context()
        style_ctx.add_provider(self.provider,
                Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION)

    def add_bind(self, key, signal, arg=""):
        bindings = self.__binding_set()
        # Using Gtk.BindingEntry.add_signall() would be preferable
        # https://gitlab.gnome.org/GNOME/pygobject/-/issues/474
        Gtk.BindingEntry().add_signal_from_string(bindings,
                F'bind "{key}" {{ "{signal}" ({arg}) }};')

    def __binding_set(self):
        return Gtk.BindingSet.find("filecomplete-key-bindings")

import sys

from . import keys
from .editview import EditView

from gi.repository import Gtk

NAME = "filecomplete"

# Keys listing all possible completions directly.
LIST_KEYS = ["<alt>question", "<alt>equal"]

class Window(Gtk.Window):
    config = {
        'autoscroll': True,
        'wordwrap': True,
    }

    def __init__(self, completer):
        Gtk.Window.__init__(self, title=NAME)
        self.set_name(NAME)
        self.set_default_size(640, 400)

        self.editview = EditView(completer)
        self.editview.connect("new-user-input", self.user_input)
        self.editview.connect("size-allocate", self.autoscroll)

        bindings = keys.Bindings(self.editview)
        for key in LIST_KEYS:
            bindings.add_bind(key, "list-completions")

        self.scroll = Gtk.ScrolledWindow().new(None, None)
        self.scroll.set_policy(Gtk.PolicyType.AUTOMATIC, Gtk.PolicyType.ALWAYS)
        self.scroll.add(self.editview)
        self.update_wrapmode()
        self.add(self.scroll)

    def update_wrapmode(self):
        if self.config['wordwrap']:
            wmode = Gtk.WrapMode.WORD_CHAR
            hscroll = Gtk.PolicyType.NEVER
        else:
            wmode = Gtk.WrapMode.NONE
            hscroll = Gtk.PolicyType.AUTOMATIC

        self.editview.set_wrap_mode(wmode)

        _, vscroll = self.scroll.get_policy()
        self.scroll.set_policy(hscroll, vscroll)

    def autoscroll(self, widget, rect):
        if not self.config['autoscroll']:
            return

        adj = self.scroll.get_vadjustment()
        adj.set_value(adj.get_upper() - adj.get_page_size())

    def user_input(self, editview, line):
        sys.stdout.write(line)
        sys.stdout.flush()

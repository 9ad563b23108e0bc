from gi.repository import Gtk
from gi.repository import GObject
from gi.repository import Pango

from .completion import LineBuffer, Mode, TabComp

class ViewOutput():
    """
    Output sink writing completion listings into an EditView. Text is
    inserted in front of the current input line.
    """

    def __init__(self, view):
        self.__view = view

    @property
    def width(self):
        return self.__view.columns()

    def write(self, text):
        self.__view.insert_data(text)

    def flush(self):
        pass

class EditView(Gtk.TextView):
    """
    TextView-based line editor with tab completion. The buffer consists
    of an output region followed by the line currently being edited. The
    start of the input line is tracked by the _input_mark, output is
    always inserted in front of it.

    Once the user finishes a line by entering a newline character, a
    new-user-input signal is emitted with the entered line. Pressing
    the completion key completes the word before the cursor, pressing
    it again lists the possible completions.
    """

    def __init__(self, completer):
        Gtk.TextView.__init__(self)

        self._textbuffer = Gtk.TextBuffer()
        self._textbuffer.connect("end-user-action", self.__end_user_action)
        self.connect("move-cursor", self.__move_cursor)
        self.set_buffer(self._textbuffer)

        completer.alert = self.error_bell
        completer.confirm = self.__confirm
        self._completer = completer
        self._tabcomp = TabComp(completer)
        self._output = ViewOutput(self)

        self.set_monospace(True)
        self.set_input_hints(Gtk.InputHints.NO_SPELLCHECK)

        self._input_mark = self._textbuffer.create_mark(None,
                self._textbuffer.get_end_iter(), True)

        signals = {
            "kill-input": self.__kill_input,
            "move-input-start": self.__move_input_start,
            "move-input-end": self.__move_input_end,
            "clear-view": self.__clear_view,
            "tab-completion": self.__tabcomp,
            "list-completions": self.__list_completions,
        }

        for name, func in signals.items():
            GObject.signal_new(name, self,
                    GObject.SIGNAL_ACTION, GObject.TYPE_NONE,
                    ())

            self.connect(name, func)

        GObject.signal_new("new-user-input", self,
                GObject.SIGNAL_RUN_LAST, GObject.TYPE_NONE,
                (GObject.TYPE_PYOBJECT,))

    def insert_data(self, str):
        buf = self._textbuffer
        loc = buf.get_iter_at_mark(self._input_mark)
        buf.insert(loc, str)

        # The iterator was revalidated to point after the inserted text.
        buf.move_mark(self._input_mark, loc)

    def columns(self):
        "Returns the width of the view in characters."
        ctx = self.get_pango_context()
        layout = Pango.Layout(ctx)
        layout.set_text(" ", -1) # assumes monospace
        fw, _ = layout.get_pixel_size()

        width = self.get_allocated_width() - self.get_left_margin() - self.get_right_margin()
        return max(1, int(width / fw)) if fw > 0 else 1

    def input_bounds(self):
        buf = self._textbuffer
        return buf.get_iter_at_mark(self._input_mark), buf.get_end_iter()

    def cursor_at_input(self):
        buf = self._textbuffer
        if buf.get_has_selection():
            return False

        cur = buf.get_iter_at_offset(buf.props.cursor_position)
        start, _ = self.input_bounds()

        return cur.compare(start) == 0

    def do_backspace(self):
        # Never delete into the output region.
        if not self.cursor_at_input():
            Gtk.TextView.do_backspace(self)

    def flush(self):
        start, end = self.input_bounds()
        line = self._textbuffer.get_text(start, end, True)

        self.emit("new-user-input", line)
        self._textbuffer.move_mark(self._input_mark, end)

    def __end_user_action(self, buffer):
        start, end = self.input_bounds()

        text = buffer.get_text(start, end, True)
        if len(text) != 0 and text[-1] == "\n":
            self.flush()

        # User entered new text → reset tab completion state machine
        self._tabcomp.reset()

    def __move_cursor(self, textview, step, count, extend):
        self._tabcomp.reset()

    def __complete(self, func):
        buf = self._textbuffer
        start, end = self.input_bounds()

        text = buf.get_text(start, end, True)
        cur = buf.get_iter_at_offset(buf.props.cursor_position)
        cursor = cur.get_offset() - start.get_offset()
        if cursor < 0:
            # Cursor is in the output region.
            self.error_bell()
            return

        line = LineBuffer(text, cursor)
        func(line, self._output)

        # Listings may have been inserted, revalidate the iterators.
        start, end = self.input_bounds()
        if line.text != text:
            buf.delete(start, end)
            start, _ = self.input_bounds()
            buf.insert(start, line.text)

        start, _ = self.input_bounds()
        start.forward_chars(line.cursor)
        buf.place_cursor(start)

    def __tabcomp(self, textview):
        self.__complete(self._tabcomp.next)

    def __list_completions(self, textview):
        self.__complete(lambda line, out:
                self._completer.complete(line, out, Mode.LIST))

    def __confirm(self):
        dialog = Gtk.MessageDialog(transient_for=self.get_toplevel(),
                modal=True, message_type=Gtk.MessageType.QUESTION,
                buttons=Gtk.ButtonsType.YES_NO,
                text="Display all possibilities?")
        response = dialog.run()
        dialog.destroy()

        return "y" if response == Gtk.ResponseType.YES else "n"

    def __kill_input(self, textview):
        start, end = self.input_bounds()
        self._textbuffer.delete(start, end)

    def __move_input_start(self, textview):
        start, _ = self.input_bounds()
        self._textbuffer.place_cursor(start)

    def __move_input_end(self, textview):
        _, end = self.input_bounds()
        self._textbuffer.place_cursor(end)

    def __clear_view(self, textview):
        buf = self._textbuffer
        start, _ = self.input_bounds()
        buf.delete(buf.get_start_iter(), start)

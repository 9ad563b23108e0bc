import os
import sys
import tty
import termios

DEFWIDTH = 80

class Output():
    """Output sink for completion listings. The display width is
       queried from the underlying terminal unless given explicitly."""

    def __init__(self, stream=None, width=None):
        self.stream = stream if stream is not None else sys.stdout
        self.__width = width

    @property
    def width(self):
        if self.__width is not None:
            return self.__width

        try:
            return os.get_terminal_size(self.stream.fileno()).columns
        except (AttributeError, OSError, ValueError):
            return DEFWIDTH

    def write(self, text):
        self.stream.write(text)

    def flush(self):
        self.stream.flush()

def read_char(stream=None):
    "Reads a single character, without waiting for a newline on terminals."
    if stream is None:
        stream = sys.stdin

    try:
        fd = stream.fileno()
        isatty = os.isatty(fd)
    except (AttributeError, OSError, ValueError):
        isatty = False
    if not isatty:
        return stream.read(1)

    old = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        return stream.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)

def format_table(candidates, width, suffix=None):
    """
    Format candidates as a table fitting into the given width. The
    candidates are sorted case-insensitively and laid out in column
    major order, i.e. each column is sorted from top to bottom. If a
    suffix function is given, its result for each candidate is printed
    after the candidate. Returns a list of lines.
    """

    matches = sorted(candidates, key=str.casefold)
    if not matches:
        return []

    maxlen = max(len(m) for m in matches)

    # One space between columns plus one for the suffix.
    cols = max(1, width // (maxlen + 2))
    rows = (len(matches) + cols - 1) // cols

    lines = []
    for row in range(rows):
        cells = []
        for col in range(cols):
            idx = row + col * rows
            if idx >= len(matches):
                break

            m = matches[idx]
            app = suffix(m) if suffix else ""
            cells.append((m + app).ljust(maxlen + len(app)))
        lines.append(" ".join(cells).rstrip())

    return lines

def present(candidates, out, query_items, confirm=read_char, suffix=None):
    """
    Print a table of candidates to out. If there are more than
    query_items candidates, the user is asked for confirmation first.
    Returns True if the table was printed.
    """

    # Get on the next line from the command line.
    out.write("\n")

    if len(candidates) > query_items:
        out.write("Display all {} possibilities? (y or n) ".format(len(candidates)))
        out.flush()
        answer = confirm()
        out.write("\n")
        if answer != "y":
            out.flush()
            return False

    for line in format_table(candidates, out.width, suffix):
        out.write(line + "\n")
    out.flush()

    return True

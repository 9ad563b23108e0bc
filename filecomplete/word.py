from . import quoting

# Characters which separate words, see the readline default.
BREAK_CHARS = " \t\n\"\\'`@$><=;|&{("

class WordSpan():
    "Location of the word to be completed within a line buffer."

    def __init__(self, start, length, quote):
        self.start = start
        self.length = length
        self.quote = quote

    @property
    def end(self):
        return self.start + self.length

    def __eq__(self, other):
        if not isinstance(other, WordSpan):
            return NotImplemented
        return (self.start, self.length, self.quote) == \
                (other.start, other.length, other.quote)

    def __repr__(self):
        return "WordSpan(start={}, length={}, quote={})".format(
                self.start, self.length, self.quote)

def find_word(text, cursor, word_break=BREAK_CHARS, special_prefixes=None, unescape=False):
    """
    Find the word before the cursor. Returns a tuple consisting of a
    WordSpan and the word itself. If unescape is true, backslashes
    are removed from the returned word. The span always ends at the
    cursor, its quote is the quoting context at the start of the word.
    """

    pos = cursor

    # If the cursor is placed after a backslash or quote,
    # we need to find the word before it.
    if pos > 0 and text[pos - 1] in "\\'\"":
        pos -= 1

    while pos > 0:
        c = text[pos - 1]
        if c in word_break:
            # Escaped break characters are part of the word.
            if pos >= 2 and text[pos - 2] == "\\":
                pos -= 2
                continue
            break
        if special_prefixes and c in special_prefixes:
            break
        pos -= 1

    length = cursor - pos
    if length == 1 and text[pos] in "'\"":
        pos += 1
        length = 0

    # Quoting context in front of the word, the word itself is replaced.
    span = WordSpan(pos, length, quoting.scan(text, pos))
    word = text[pos:cursor]
    if unescape:
        word = quoting.unescape(word)

    return span, word

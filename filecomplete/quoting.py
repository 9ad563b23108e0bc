from enum import Enum, auto

# Characters which must be escaped with a backslash outside of quotes.
NEEDS_ESCAPING = "'\"()\\<>$# \n\t?;`@=|{}&*["

# Characters which must be escaped inside double quotes.
NEEDS_DQUOTE_ESCAPING = "\"\\`$"

class Quote(Enum):
    NONE = auto()
    SINGLE = auto()
    DOUBLE = auto()

    def char(self):
        "Returns the character opening and closing this kind of quote."
        if self is Quote.SINGLE:
            return "'"
        elif self is Quote.DOUBLE:
            return '"'
        return ""

def scan(text, cursor):
    """
    Determine the quoting context at the given cursor position.

    A single quote only toggles the context if it is not preceded by a
    backslash and we are not inside double quotes. A double quote
    toggles the context if we are not inside single quotes, a preceding
    backslash is not taken into account for double quotes.
    """

    s_quoted = False
    d_quoted = False

    for i in range(cursor):
        c = text[i]
        if c == "'" and not d_quoted and (i == 0 or text[i - 1] != "\\"):
            s_quoted = not s_quoted
        elif c == '"' and not s_quoted:
            d_quoted = not d_quoted

    if s_quoted:
        return Quote.SINGLE
    elif d_quoted:
        return Quote.DOUBLE
    return Quote.NONE

def unescape(text):
    "Removes all backslashes from text."
    return text.replace("\\", "")

def escape(name, quote, single_match=False, suffix=None):
    """
    Escape name for insertion into a buffer with the given quoting
    context. If single_match is true and a suffix is given, the suffix
    is appended. A trailing space is only appended outside of quotes
    and an open quote is closed after a single match.
    """

    escaped = []
    for c in name:
        if quote is Quote.SINGLE:
            # Close quote, insert literal quote, reopen quote.
            escaped.append("'\\''" if c == "'" else c)
        elif quote is Quote.DOUBLE:
            escaped.append("\\" + c if c in NEEDS_DQUOTE_ESCAPING else c)
        else:
            escaped.append("\\" + c if c in NEEDS_ESCAPING else c)

    if single_match and suffix:
        if suffix != " " or quote is Quote.NONE:
            escaped.append(suffix)
        escaped.append(quote.char())

    return "".join(escaped)

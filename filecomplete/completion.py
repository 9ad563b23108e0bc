import os
import logging
from enum import Enum, auto

from . import quoting
from .display import Output, present, read_char
from .generator import FileNameGenerator, directory_suffix
from .matches import MatchSet, reduce
from .word import BREAK_CHARS, find_word

logger = logging.getLogger(__name__)

DEFQUERY = 100
QUERY_ENV = "FILECOMPLETE_QUERY_ITEMS"

class Outcome(Enum):
    NO_CHANGE = auto()
    BUFFER_REFRESHED = auto()
    RESULTS_DISPLAYED = auto()

class Mode(Enum):
    "What to do with the matches, see readline's rl_completion_type."
    COMPLETE = "\t"
    LIST = "?"

class LineBuffer():
    """
    Text of the line being edited. Only the characters before lastchar
    are part of the line, the cursor is an index into the text.
    """

    def __init__(self, text, cursor=None, lastchar=None):
        if lastchar is None:
            lastchar = len(text)
        if cursor is None:
            cursor = lastchar
        if not 0 <= cursor <= lastchar <= len(text):
            raise ValueError("invalid cursor {} or lastchar {} for line of length {}"
                    .format(cursor, lastchar, len(text)))

        self.text = text
        self.cursor = cursor
        self.lastchar = lastchar

    @property
    def line(self):
        return self.text[:self.lastchar]

    def replace(self, start, end, text):
        "Replaces the given range and places the cursor after it."
        self.text = self.text[:start] + text + self.text[end:]
        self.lastchar += len(text) - (end - start)
        self.cursor = start + len(text)

    def __repr__(self):
        return "LineBuffer({!r}, cursor={}, lastchar={})".format(
                self.text, self.cursor, self.lastchar)

class Completer():
    """
    Completes the word before the cursor of a LineBuffer.

    Candidates are obtained from the attempted hook, if given, and
    otherwise from the generator which defaults to file name completion.
    A generator is called as generator(text, state) until it returns
    None, the attempted hook as attempted(text, start, end) and should
    return a list of candidates or None. The suffix function returns the
    character to append to a unique match.
    """

    def __init__(self, word_break=BREAK_CHARS, special_prefixes=None,
            generator=None, attempted=None, suffix=None, query_items=None,
            quote_aware=True, alert=None, confirm=read_char, cwd=None):
        self.word_break = word_break
        self.special_prefixes = special_prefixes
        self.generator = generator
        self.attempted = attempted
        self.quote_aware = quote_aware
        self.alert = alert
        self.confirm = confirm
        self.cwd = cwd

        if suffix is None:
            suffix = lambda name: directory_suffix(name, self.cwd)
        self.suffix = suffix

        if query_items is None:
            query_items = int(os.environ[QUERY_ENV]) if QUERY_ENV in os.environ else DEFQUERY
        self.query_items = query_items

        self.completion_type = None

    def complete(self, buffer, out=None, mode=Mode.COMPLETE):
        if out is None:
            out = Output()
        self.completion_type = mode

        span, word = find_word(buffer.text, buffer.cursor, self.word_break,
                self.special_prefixes, self.quote_aware)

        matches = self.__matches(word, span)
        if matches is None:
            logger.debug("no matches for %r", word)
            self.__alert(out)
            return Outcome.NO_CHANGE

        prefix = matches.prefix
        extended = prefix != "" and prefix != word
        single = matches.single or (extended and prefix in matches.candidates)

        if not single and not extended:
            if mode is Mode.LIST:
                present(matches.candidates, out, self.query_items,
                        self.confirm, self.suffix)
                return Outcome.RESULTS_DISPLAYED

            self.__alert(out)
            return Outcome.NO_CHANGE

        # All candidates have been computed, now modify the buffer.
        text = self.__insertion(prefix, span, matches.single)
        if text != buffer.text[span.start:span.end]:
            buffer.replace(span.start, span.end, text)

        if not single:
            # Common part was inserted but more input is required.
            self.__alert(out)

        return Outcome.BUFFER_REFRESHED

    def __matches(self, word, span):
        if self.attempted is not None:
            candidates = self.attempted(word, span.start, span.end)
            if candidates:
                return MatchSet.from_list(candidates)

        generator = self.generator
        if generator is None:
            generator = FileNameGenerator(self.cwd)

        return reduce(word, generator)

    def __insertion(self, prefix, span, single_match):
        app = self.suffix(prefix) if single_match else None
        if self.quote_aware:
            return quoting.escape(prefix, span.quote, single_match, app)
        return prefix + (app or "")

    def __alert(self, out):
        if self.alert is not None:
            self.alert()
        else:
            out.write("\a")
            out.flush()

def complete(buffer, out=None, word_break=BREAK_CHARS, special_prefixes=None,
        generator=None, suffix=None, query_items=None, quote_aware=True,
        mode=Mode.COMPLETE):
    "Completes the word before the cursor of buffer, see Completer."
    completer = Completer(word_break, special_prefixes, generator=generator,
            suffix=suffix, query_items=query_items, quote_aware=quote_aware)
    return completer.complete(buffer, out, mode)

class TabComp():
    """Implements a state machine for repeated completion requests. The
       first request completes the word, a directly following request
       lists the possible completions. A request only follows directly
       if neither the line nor the cursor changed in between."""

    def __init__(self, completer):
        self.__completer = completer
        self._tabcomp_pending = False
        self._tabcomp_line = None

    def reset(self):
        """Should be called when the user presses any key other than
           the key configured for tab completions."""

        self._tabcomp_pending = False
        self._tabcomp_line = None

    def next(self, buffer, out):
        if self._tabcomp_line != (buffer.text, buffer.cursor):
            self._tabcomp_pending = False

        mode = Mode.LIST if self._tabcomp_pending else Mode.COMPLETE
        self._tabcomp_pending = True

        outcome = self.__completer.complete(buffer, out, mode)
        self._tabcomp_line = (buffer.text, buffer.cursor)

        return outcome

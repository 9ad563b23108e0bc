import os
import stat
import logging

from . import tilde

logger = logging.getLogger(__name__)

class FileNameGenerator():
    """
    Generates file names starting with a given prefix. The generator
    keeps an open directory iterator between calls which is released
    once all entries have been returned or close() is called.

    Instances can be called as fn(text, state) where state is the
    index of the requested candidate. A state of zero always restarts
    the generator for the given text.
    """

    def __init__(self, cwd=None):
        self.__cwd = cwd
        self.__iter = None
        self.__dirname = ""
        self.__filename = ""

    def __call__(self, text, state):
        if state == 0 or self.__iter is None:
            self.reset(text)
        return self.next()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def reset(self, text):
        "Start generating candidates for the given text."
        self.close()

        pos = text.rfind("/")
        if pos == -1:
            self.__dirname = ""
            self.__filename = text
        else:
            self.__dirname = text[:pos + 1]
            self.__filename = text[pos + 1:]

        if self.__dirname == "":
            path = "./"
        else:
            path = tilde.expand(self.__dirname)
        if self.__cwd is not None:
            path = os.path.join(self.__cwd, path)

        try:
            self.__iter = os.scandir(path)
        except OSError as e:
            logger.debug("cannot open directory %r: %s", path, e)
            self.__iter = None

    def next(self):
        "Returns the next candidate or None if there are no more."
        if self.__iter is None:
            return None

        for entry in self.__iter:
            # os.scandir() never yields . and ..
            if entry.name.startswith(self.__filename):
                return self.__dirname + entry.name

        self.close()
        return None

    def close(self):
        if self.__iter is not None:
            self.__iter.close()
            self.__iter = None

class WordListGenerator():
    "Generates candidates from a fixed list of words."

    def __init__(self, words):
        self.__words = list(words)
        self.__index = 0

    def __call__(self, text, state):
        if state == 0:
            self.__index = 0

        while self.__index < len(self.__words):
            word = self.__words[self.__index]
            self.__index += 1
            if word.startswith(text):
                return word

        return None

def directory_suffix(name, cwd=None):
    """Returns the character to append to a unique completion: a slash
       for directories and a space otherwise."""

    path = tilde.expand(name)
    if cwd is not None:
        path = os.path.join(cwd, path)

    try:
        st = os.stat(path)
    except OSError as e:
        logger.debug("cannot stat %r: %s", path, e)
        return " "

    return "/" if stat.S_ISDIR(st.st_mode) else " "

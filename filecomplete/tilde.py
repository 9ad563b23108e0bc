import os
import pwd
import logging

logger = logging.getLogger(__name__)

def home_directory(user):
    """Returns the home directory of the given user or None if the
       user does not exist. An empty user name refers to the user
       running the current process."""

    try:
        if user == "":
            entry = pwd.getpwuid(os.getuid())
        else:
            entry = pwd.getpwnam(user)
    except KeyError:
        logger.debug("no passwd entry for user %r", user)
        return None

    return entry.pw_dir

def expand(text, lookup=home_directory):
    """Expands strings of the form ~user/foo. If text doesn't start
       with a tilde or the user is unknown, text is returned as is."""

    if not text.startswith("~"):
        return text

    pos = text.find("/")
    if pos == -1:
        user = text[1:]
        rest = ""
    else:
        user = text[1:pos]
        rest = text[pos + 1:]

    home = lookup(user)
    if home is None:
        return text

    return home + "/" + rest

import sys
import argparse
import logging
import os

import gi
gi.require_version("Gtk", "3.0")

from gi.repository import Gtk

from .completion import Completer, DEFQUERY, QUERY_ENV
from .generator import WordListGenerator
from .window import Window

def get_parser():
    default_query = int(os.environ[QUERY_ENV]) if QUERY_ENV in os.environ else DEFQUERY

    parser = argparse.ArgumentParser()
    parser.add_argument('-q', metavar='LIMIT', type=int,
                        default=default_query, help='Ask before listing more than LIMIT completions')
    parser.add_argument('-C', metavar='DIR', type=str,
                        default=None, help='Complete file names relative to DIR')
    parser.add_argument('-w', metavar='WORD', type=str, action='append',
                        default=[], help='Complete from the given words instead of file names')
    parser.add_argument('-d', action='store_true',
                        default=False, help='Enable debug output')

    return parser

def main():
    parser = get_parser()
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.d else logging.WARNING,
            format="%(name)s: %(levelname)s: %(message)s")

    if args.w:
        completer = Completer(generator=WordListGenerator(args.w),
                suffix=lambda _: " ", query_items=args.q)
    else:
        completer = Completer(query_items=args.q, cwd=args.C)

    win = Window(completer)
    win.connect("destroy", Gtk.main_quit)
    win.show_all()
    Gtk.main()

if __name__ == "__main__":
    sys.exit(main())

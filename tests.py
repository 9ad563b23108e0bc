import io
import os
import tempfile
import unittest
from unittest import mock

from filecomplete import display, quoting, tilde
from filecomplete.completion import Completer, LineBuffer, Mode, Outcome, TabComp, complete
from filecomplete.generator import FileNameGenerator, WordListGenerator, directory_suffix
from filecomplete.matches import MatchSet, common_prefix, reduce
from filecomplete.quoting import Quote
from filecomplete.word import WordSpan, find_word

HOMES = {
    "": "/home/me",
    "bob": "/home/bob",
}

def touch(path):
    with open(path, "w"):
        pass

class TempDirTestCase(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = os.path.realpath(tmp.name)

    def path(self, *names):
        return os.path.join(self.tmp, *names)

class TestTilde(unittest.TestCase):
    def test_no_tilde(self):
        self.assertEqual(tilde.expand("foo/~bar", HOMES.get), "foo/~bar")

    def test_current_user(self):
        self.assertEqual(tilde.expand("~", HOMES.get), "/home/me/")
        self.assertEqual(tilde.expand("~/src", HOMES.get), "/home/me/src")

    def test_named_user(self):
        self.assertEqual(tilde.expand("~bob", HOMES.get), "/home/bob/")
        self.assertEqual(tilde.expand("~bob/foo/bar", HOMES.get), "/home/bob/foo/bar")

    def test_unknown_user(self):
        self.assertEqual(tilde.expand("~nobody/foo", HOMES.get), "~nobody/foo")

    def test_lookup_receives_user(self):
        lookup = mock.Mock(return_value=None)
        tilde.expand("~alice/x/y", lookup)
        lookup.assert_called_once_with("alice")

    def test_home_directory_unknown(self):
        with mock.patch("pwd.getpwnam", side_effect=KeyError("nope")):
            self.assertIsNone(tilde.home_directory("nope"))

class TestQuoteScan(unittest.TestCase):
    def test_unquoted(self):
        self.assertIs(quoting.scan("echo foo", 8), Quote.NONE)

    def test_single(self):
        self.assertIs(quoting.scan("echo 'foo", 9), Quote.SINGLE)
        self.assertIs(quoting.scan("echo 'foo' bar", 14), Quote.NONE)

    def test_double(self):
        self.assertIs(quoting.scan('echo "foo', 9), Quote.DOUBLE)
        self.assertIs(quoting.scan('echo "foo" bar', 14), Quote.NONE)

    def test_nested(self):
        self.assertIs(quoting.scan("echo \"it's", 10), Quote.DOUBLE)
        self.assertIs(quoting.scan("echo 'say \"hi", 13), Quote.SINGLE)

    def test_escaped_single_quote(self):
        self.assertIs(quoting.scan("echo \\'foo", 10), Quote.NONE)

    def test_escaped_double_quote_toggles(self):
        self.assertIs(quoting.scan('echo \\"foo', 10), Quote.DOUBLE)

    def test_stops_at_cursor(self):
        self.assertIs(quoting.scan("'abc'", 3), Quote.SINGLE)
        self.assertIs(quoting.scan("'abc'", 0), Quote.NONE)

class TestFindWord(unittest.TestCase):
    def test_path(self):
        span, word = find_word("cd /usr/sh", 10)

        self.assertEqual(span, WordSpan(3, 7, Quote.NONE))
        self.assertEqual(word, "/usr/sh")

    def test_empty(self):
        span, word = find_word("", 0)

        self.assertEqual(span, WordSpan(0, 0, Quote.NONE))
        self.assertEqual(word, "")

    def test_escaped_break(self):
        text = "ls fo\\ o"

        span, raw = find_word(text, len(text))
        self.assertEqual(raw, "fo\\ o")
        self.assertEqual(span.start, 3)

        _, word = find_word(text, len(text), unescape=True)
        self.assertEqual(word, "fo o")

    def test_lone_quote(self):
        span, word = find_word("echo '", 6)

        self.assertEqual(word, "")
        self.assertEqual(span.start, 6)
        self.assertEqual(span.length, 0)
        self.assertIs(span.quote, Quote.SINGLE)

    def test_quoted_word(self):
        span, word = find_word("cat 'my fi", 10)

        self.assertEqual(word, "fi")
        self.assertIs(span.quote, Quote.SINGLE)

    def test_quote_before_word(self):
        span, word = find_word("ls a\\\"b", 7)

        self.assertEqual(word, "a\\\"b")
        self.assertIs(span.quote, Quote.NONE)

    def test_special_prefix(self):
        _, word = find_word("echo $HO", 8, word_break=" ", special_prefixes="$")
        self.assertEqual(word, "HO")

        _, word = find_word("echo $HO", 8, word_break=" ")
        self.assertEqual(word, "$HO")

    def test_cursor_in_middle(self):
        span, word = find_word("cat foo bar", 7)

        self.assertEqual(word, "foo")
        self.assertEqual(span.end, 7)

    def test_span_ends_at_cursor(self):
        texts = ["", "a", "'", "\\", "ls fo\\ o", "echo 'it's", 'x "y z', "a\\\\ b", "  "]
        for text in texts:
            for cursor in range(len(text) + 1):
                span, _ = find_word(text, cursor)
                self.assertEqual(span.end, cursor, "{!r} at {}".format(text, cursor))

class TestFileNameGenerator(TempDirTestCase):
    def setUp(self):
        super().setUp()

        os.mkdir(self.path("share"))
        os.mkdir(self.path("shbin"))
        touch(self.path("other"))
        touch(self.path(".hidden"))

    def drain(self, gen, text):
        results = []
        state = 0
        while True:
            c = gen(text, state)
            if c is None:
                return results
            results.append(c)
            state += 1

    def test_prefix(self):
        gen = FileNameGenerator()
        results = self.drain(gen, self.path("sh"))

        self.assertEqual(sorted(results), [self.path("share"), self.path("shbin")])

    def test_empty_prefix(self):
        gen = FileNameGenerator()
        results = self.drain(gen, self.tmp + "/")

        names = sorted(os.path.basename(r) for r in results)
        self.assertEqual(names, [".hidden", "other", "share", "shbin"])

    def test_case_sensitive(self):
        gen = FileNameGenerator()
        self.assertEqual(self.drain(gen, self.path("SH")), [])

    def test_missing_directory(self):
        gen = FileNameGenerator()
        self.assertIsNone(gen(self.path("nonexistent", "foo"), 0))
        self.assertIsNone(gen(self.path("nonexistent", "foo"), 1))

    def test_cwd(self):
        gen = FileNameGenerator(self.tmp)
        self.assertEqual(self.drain(gen, "ot"), ["other"])

    def test_restart(self):
        gen = FileNameGenerator()

        first = gen(self.path("sh"), 0)
        self.assertTrue(first.startswith(self.path("sh")))

        # A new attempt must not continue the old scan.
        self.assertEqual(gen(self.path("ot"), 0), self.path("other"))
        self.assertIsNone(gen(self.path("ot"), 1))

    def test_close(self):
        with FileNameGenerator() as gen:
            self.assertIsNotNone(gen(self.path("sh"), 0))
        self.assertIsNone(gen.next())

    def test_tilde(self):
        expand = lambda text: text.replace("~", self.tmp, 1)
        with mock.patch("filecomplete.tilde.expand", side_effect=expand):
            gen = FileNameGenerator()
            self.assertEqual(self.drain(gen, "~/ot"), ["~/other"])

class TestWordListGenerator(unittest.TestCase):
    def test_words(self):
        gen = WordListGenerator(["help", "history", "quit"])

        self.assertEqual(gen("h", 0), "help")
        self.assertEqual(gen("h", 1), "history")
        self.assertIsNone(gen("h", 2))

        # Restart
        self.assertEqual(gen("q", 0), "quit")

class TestDirectorySuffix(TempDirTestCase):
    def test_suffix(self):
        os.mkdir(self.path("dir"))
        touch(self.path("file"))

        self.assertEqual(directory_suffix(self.path("dir")), "/")
        self.assertEqual(directory_suffix(self.path("file")), " ")
        self.assertEqual(directory_suffix(self.path("missing")), " ")
        self.assertEqual(directory_suffix("dir", cwd=self.tmp), "/")

class TestMatches(unittest.TestCase):
    def test_common_prefix(self):
        self.assertEqual(common_prefix(["share", "shbin"]), "sh")
        self.assertEqual(common_prefix(["foo"]), "foo")
        self.assertEqual(common_prefix(["foobar", "foo", "foobaz"]), "foo")
        self.assertEqual(common_prefix(["abc", "xyz"]), "")
        self.assertEqual(common_prefix(["Foo", "foo"]), "")

    def test_maximality(self):
        sets = [
            ["share", "shbin"],
            ["a", "ab", "abc"],
            ["x"],
            ["same", "same"],
            ["tree", "trie", "trip"],
        ]

        for candidates in sets:
            prefix = common_prefix(candidates)
            for c in candidates:
                self.assertTrue(c.startswith(prefix))

            first = candidates[0]
            if len(prefix) < len(first):
                longer = first[:len(prefix) + 1]
                self.assertFalse(all(c.startswith(longer) for c in candidates))

    def test_reduce(self):
        matches = reduce("h", WordListGenerator(["history", "help", "quit", "hello"]))

        self.assertEqual(matches.prefix, "h")
        self.assertEqual(matches.candidates, ["history", "help", "hello"])
        self.assertFalse(matches.single)
        self.assertEqual(len(matches), 3)

    def test_reduce_single(self):
        matches = reduce("q", WordListGenerator(["help", "quit"]))

        self.assertTrue(matches.single)
        self.assertEqual(matches.prefix, "quit")

    def test_reduce_none(self):
        self.assertIsNone(reduce("x", WordListGenerator(["help"])))
        self.assertIsNone(MatchSet.from_list([]))

    def test_generator_closed_on_error(self):
        gen = mock.Mock(side_effect=["one", RuntimeError("broken")])

        with self.assertRaises(RuntimeError):
            reduce("o", gen)
        gen.close.assert_called_once_with()

class TestEscape(unittest.TestCase):
    def test_unquoted(self):
        self.assertEqual(quoting.escape("my file(1).txt", Quote.NONE),
                "my\\ file\\(1\\).txt")
        self.assertEqual(quoting.escape("a&b;c", Quote.NONE), "a\\&b\\;c")

    def test_single_quote(self):
        self.assertEqual(quoting.escape("it's_file", Quote.SINGLE), "it'\\''s_file")
        self.assertEqual(quoting.escape("a b$c", Quote.SINGLE), "a b$c")

    def test_double_quote(self):
        self.assertEqual(quoting.escape('a "b" $c d', Quote.DOUBLE),
                'a \\"b\\" \\$c d')
        self.assertEqual(quoting.escape("it's", Quote.DOUBLE), "it's")

    def test_suffix(self):
        self.assertEqual(quoting.escape("foo", Quote.NONE, True, " "), "foo ")
        self.assertEqual(quoting.escape("dir", Quote.NONE, True, "/"), "dir/")

        # Ambiguous matches never get a suffix.
        self.assertEqual(quoting.escape("foo", Quote.NONE, False, " "), "foo")

    def test_suffix_quoted(self):
        self.assertEqual(quoting.escape("foo", Quote.SINGLE, True, " "), "foo'")
        self.assertEqual(quoting.escape("foo", Quote.DOUBLE, True, " "), 'foo"')
        self.assertEqual(quoting.escape("dir", Quote.DOUBLE, True, "/"), 'dir/"')

    def test_unescape(self):
        self.assertEqual(quoting.unescape("fo\\ o"), "fo o")
        self.assertEqual(quoting.unescape("plain"), "plain")

    def test_roundtrip(self):
        chars = quoting.NEEDS_ESCAPING.replace("\\", "")
        text = "x" + chars + "y"

        self.assertEqual(quoting.unescape(quoting.escape(text, Quote.NONE)), text)

class TestTable(unittest.TestCase):
    def test_column_major(self):
        lines = display.format_table(["b", "a", "C", "d"], 8)
        self.assertEqual(lines, ["a C", "b d"])

    def test_uneven(self):
        lines = display.format_table(["e", "d", "c", "b", "a"], 9)
        self.assertEqual(lines, ["a c e", "b d"])

    def test_narrow(self):
        lines = display.format_table(["alpha", "beta"], 3)
        self.assertEqual(lines, ["alpha", "beta"])

    def test_padding_and_suffix(self):
        suffix = lambda m: "/" if m == "dir" else " "
        lines = display.format_table(["file", "dir", "x"], 80, suffix)

        self.assertEqual(lines, ["dir/  file  x"])

    def test_empty(self):
        self.assertEqual(display.format_table([], 80), [])

class TestPresent(unittest.TestCase):
    def setUp(self):
        self.stream = io.StringIO()
        self.out = display.Output(self.stream, width=80)

    def test_present(self):
        self.assertTrue(display.present(["b", "a"], self.out, 100))
        self.assertEqual(self.stream.getvalue(), "\na b\n")

    def test_confirm_declined(self):
        confirm = mock.Mock(return_value="n")

        self.assertFalse(display.present(["a", "b", "c"], self.out, 2, confirm))
        self.assertEqual(self.stream.getvalue(),
                "\nDisplay all 3 possibilities? (y or n) \n")
        confirm.assert_called_once_with()

    def test_confirm_accepted(self):
        confirm = mock.Mock(return_value="y")

        self.assertTrue(display.present(["a", "b", "c"], self.out, 2, confirm))
        self.assertTrue(self.stream.getvalue().endswith("a b c\n"))

    def test_output_width_fallback(self):
        self.assertEqual(display.Output(io.StringIO()).width, display.DEFWIDTH)

    def test_read_char(self):
        self.assertEqual(display.read_char(io.StringIO("yes")), "y")

class TestLineBuffer(unittest.TestCase):
    def test_defaults(self):
        buf = LineBuffer("abc")

        self.assertEqual(buf.cursor, 3)
        self.assertEqual(buf.lastchar, 3)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            LineBuffer("abc", cursor=4)
        with self.assertRaises(ValueError):
            LineBuffer("abc", cursor=2, lastchar=1)

    def test_replace(self):
        buf = LineBuffer("cat fo bar", cursor=6)
        buf.replace(4, 6, "foo ")

        self.assertEqual(buf.text, "cat foo  bar")
        self.assertEqual(buf.cursor, 8)
        self.assertEqual(buf.lastchar, 12)

class TestCompleter(TempDirTestCase):
    def setUp(self):
        super().setUp()

        self.stream = io.StringIO()
        self.out = display.Output(self.stream, width=80)
        self.alert = mock.Mock()

    def completer(self, **kwargs):
        kwargs.setdefault("alert", self.alert)
        kwargs.setdefault("confirm", mock.Mock(return_value="y"))
        return Completer(**kwargs)

    def test_ambiguous_without_extension(self):
        os.makedirs(self.path("usr", "share"))
        os.makedirs(self.path("usr", "shbin"))

        text = "cd {}".format(self.path("usr", "sh"))
        buf = LineBuffer(text)
        outcome = self.completer().complete(buf, self.out)

        self.assertIs(outcome, Outcome.NO_CHANGE)
        self.assertEqual(buf.text, text)
        self.alert.assert_called_once_with()

    def test_ambiguous_list(self):
        os.makedirs(self.path("usr", "share"))
        os.makedirs(self.path("usr", "shbin"))

        text = "cd {}".format(self.path("usr", "sh"))
        buf = LineBuffer(text)
        outcome = self.completer().complete(buf, self.out, Mode.LIST)

        self.assertIs(outcome, Outcome.RESULTS_DISPLAYED)
        self.assertEqual(buf.text, text)
        self.assertIn(self.path("usr", "share") + "/", self.stream.getvalue())
        self.assertIn(self.path("usr", "shbin") + "/", self.stream.getvalue())

    def test_list_declined(self):
        for name in ["a1", "a2", "a3"]:
            touch(self.path(name))

        buf = LineBuffer("ls a")
        completer = self.completer(cwd=self.tmp, query_items=2,
                confirm=mock.Mock(return_value="n"))
        outcome = completer.complete(buf, self.out, Mode.LIST)

        self.assertIs(outcome, Outcome.RESULTS_DISPLAYED)
        self.assertNotIn("a1", self.stream.getvalue())

    def test_single_directory(self):
        os.makedirs(self.path("usr", "share"))

        buf = LineBuffer("cd {}".format(self.path("usr", "sh")))
        outcome = self.completer().complete(buf, self.out)

        self.assertIs(outcome, Outcome.BUFFER_REFRESHED)
        self.assertEqual(buf.text, "cd {}/".format(self.path("usr", "share")))
        self.assertEqual(buf.cursor, len(buf.text))
        self.alert.assert_not_called()

    def test_single_file(self):
        touch(self.path("README"))

        buf = LineBuffer("cat READ")
        outcome = self.completer(cwd=self.tmp).complete(buf, self.out)

        self.assertIs(outcome, Outcome.BUFFER_REFRESHED)
        self.assertEqual(buf.text, "cat README ")

    def test_partial(self):
        touch(self.path("foobar1"))
        touch(self.path("foobar2"))

        buf = LineBuffer("ls fo")
        completer = self.completer(cwd=self.tmp)

        self.assertIs(completer.complete(buf, self.out), Outcome.BUFFER_REFRESHED)
        self.assertEqual(buf.text, "ls foobar")
        self.alert.assert_called_once_with()

        # Fully completed as far as possible, nothing changes anymore.
        self.assertIs(completer.complete(buf, self.out), Outcome.NO_CHANGE)
        self.assertEqual(buf.text, "ls foobar")

    def test_prefix_is_candidate(self):
        touch(self.path("foo"))
        touch(self.path("foobar"))

        buf = LineBuffer("ls f")
        outcome = self.completer(cwd=self.tmp).complete(buf, self.out)

        self.assertIs(outcome, Outcome.BUFFER_REFRESHED)
        self.assertEqual(buf.text, "ls foo")
        self.alert.assert_not_called()

    def test_no_match(self):
        buf = LineBuffer("ls nothing")
        outcome = self.completer(cwd=self.tmp).complete(buf, self.out)

        self.assertIs(outcome, Outcome.NO_CHANGE)
        self.assertEqual(buf.text, "ls nothing")
        self.alert.assert_called_once_with()

    def test_default_alert(self):
        buf = LineBuffer("ls nothing")
        Completer(cwd=self.tmp).complete(buf, self.out)

        self.assertEqual(self.stream.getvalue(), "\a")

    def test_escaping(self):
        touch(self.path("my file"))

        buf = LineBuffer("cat my")
        self.completer(cwd=self.tmp).complete(buf, self.out)
        self.assertEqual(buf.text, "cat my\\ file ")

        buf = LineBuffer("cat my\\ f")
        self.completer(cwd=self.tmp).complete(buf, self.out)
        self.assertEqual(buf.text, "cat my\\ file ")

    def test_single_quoted(self):
        touch(self.path("my file"))

        buf = LineBuffer("cat 'my")
        self.completer(cwd=self.tmp).complete(buf, self.out)

        self.assertEqual(buf.text, "cat 'my file'")

    def test_single_quoted_quote(self):
        touch(self.path("it's_file"))

        buf = LineBuffer("cat 'it")
        self.completer(cwd=self.tmp).complete(buf, self.out)

        self.assertEqual(buf.text, "cat 'it'\\''s_file'")

    def test_double_quoted_directory(self):
        os.mkdir(self.path("some dir"))

        buf = LineBuffer('cd "so')
        self.completer(cwd=self.tmp).complete(buf, self.out)

        self.assertEqual(buf.text, 'cd "some dir/"')

    def test_escaped_double_quote_in_word(self):
        gen = WordListGenerator(['a"bc'])

        buf = LineBuffer('ls a\\"b')
        outcome = self.completer(generator=gen, suffix=lambda _: " ").complete(buf, self.out)

        self.assertIs(outcome, Outcome.BUFFER_REFRESHED)
        self.assertEqual(buf.text, 'ls a\\"bc ')

    def test_word_equals_candidate(self):
        touch(self.path("foo"))
        touch(self.path("foobar"))

        buf = LineBuffer("ls foo")
        completer = self.completer(cwd=self.tmp)

        self.assertIs(completer.complete(buf, self.out), Outcome.NO_CHANGE)
        self.alert.assert_called_once_with()

        self.assertIs(completer.complete(buf, self.out, Mode.LIST), Outcome.RESULTS_DISPLAYED)
        self.assertEqual(buf.text, "ls foo")
        self.assertIn("foobar", self.stream.getvalue())

    def test_text_after_cursor(self):
        touch(self.path("README"))

        buf = LineBuffer("cat READ more", cursor=8)
        self.completer(cwd=self.tmp).complete(buf, self.out)

        self.assertEqual(buf.text, "cat README  more")
        self.assertEqual(buf.cursor, 11)

    def test_attempted(self):
        attempted = mock.Mock(return_value=["alpha"])

        buf = LineBuffer("run al")
        completer = self.completer(attempted=attempted, suffix=lambda _: " ")
        completer.complete(buf, self.out)

        self.assertEqual(buf.text, "run alpha ")
        attempted.assert_called_once_with("al", 4, 6)

    def test_attempted_fallback(self):
        touch(self.path("README"))

        buf = LineBuffer("cat READ")
        completer = self.completer(attempted=lambda *args: None, cwd=self.tmp)
        completer.complete(buf, self.out)

        self.assertEqual(buf.text, "cat README ")

    def test_word_list_unquoted(self):
        gen = WordListGenerator(["my word"])

        buf = LineBuffer("say my")
        completer = self.completer(generator=gen, suffix=lambda _: "!",
                quote_aware=False)
        completer.complete(buf, self.out)

        self.assertEqual(buf.text, "say my word!")

    def test_query_items_env(self):
        with mock.patch.dict(os.environ, {"FILECOMPLETE_QUERY_ITEMS": "7"}):
            self.assertEqual(Completer().query_items, 7)
        self.assertEqual(Completer(query_items=3).query_items, 3)

    def test_complete_function(self):
        touch(self.path("README"))

        buf = LineBuffer("cat {}".format(self.path("READ")))
        outcome = complete(buf, self.out)

        self.assertIs(outcome, Outcome.BUFFER_REFRESHED)
        self.assertEqual(buf.text, "cat {} ".format(self.path("README")))

class TestTabComp(TempDirTestCase):
    def test_second_request_lists(self):
        touch(self.path("foo1"))
        touch(self.path("foo2"))

        stream = io.StringIO()
        out = display.Output(stream, width=80)
        completer = Completer(cwd=self.tmp, alert=mock.Mock())
        tabcomp = TabComp(completer)

        buf = LineBuffer("ls foo")
        self.assertIs(tabcomp.next(buf, out), Outcome.NO_CHANGE)
        self.assertIs(completer.completion_type, Mode.COMPLETE)

        self.assertIs(tabcomp.next(buf, out), Outcome.RESULTS_DISPLAYED)
        self.assertIs(completer.completion_type, Mode.LIST)
        self.assertEqual(stream.getvalue(), "\nfoo1  foo2\n")

        tabcomp.reset()
        self.assertIs(tabcomp.next(buf, out), Outcome.NO_CHANGE)

    def test_cursor_moved(self):
        touch(self.path("foo1"))
        touch(self.path("foo2"))

        out = display.Output(io.StringIO(), width=80)
        tabcomp = TabComp(Completer(cwd=self.tmp, alert=mock.Mock()))

        self.assertIs(tabcomp.next(LineBuffer("ls foo foo", 6), out), Outcome.NO_CHANGE)

        # Same word elsewhere on the line, this is a new request.
        buf = LineBuffer("ls foo foo", 10)
        self.assertIs(tabcomp.next(buf, out), Outcome.NO_CHANGE)
        self.assertIs(tabcomp.next(buf, out), Outcome.RESULTS_DISPLAYED)

if __name__ == '__main__':
    unittest.main()

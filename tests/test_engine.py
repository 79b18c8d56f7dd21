"""
End-to-end engine tests

Tests the full path: source files on disk → process_file → rendered text,
including nested includes sharing one Context.
"""

import pytest

from preposterous.config import appsettings
from preposterous.lib.context import Context
from preposterous.lib.engine import Preprocessor, process_file
from preposterous.lib.errors import (
    ArgumentCountError,
    InvalidIdentifierError,
    IoFailureError,
    UnknownDirectiveError,
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Temporary directory as cwd; include paths resolve against it"""
    monkeypatch.chdir(tmp_path)

    def write(name, text):
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return write


class TestPassThrough:
    """Test files without the enable header"""

    def test_output_is_byte_identical(self, workdir):
        """Pass-through output matches the file byte for byte"""
        text = "no header\n$PREP bogus %X% \\$ \\%\r\n$$ not a comment\n"
        path = workdir("plain.txt", text)

        assert process_file(path).render() == text

    def test_header_without_newline_is_pass_through(self, workdir):
        """The header line needs its newline to enable a file"""
        path = workdir("plain.txt", "$PREP enable")
        assert process_file(path).render() == "$PREP enable"

    def test_header_must_be_first_line(self, workdir):
        """A header on any line but the first is plain text"""
        text = "\n$PREP enable\n$PREP bogus\n"
        path = workdir("plain.txt", text)

        assert process_file(path).render() == text

    def test_empty_file(self, workdir):
        """An empty file produces empty output"""
        assert process_file(workdir("empty.txt", "")).render() == ""


class TestEnabledFiles:
    """Test line dispatch in enabled files"""

    def test_plain_lines(self, workdir):
        """Lines without directives are emitted joined by newlines"""
        path = workdir("a.txt", "$PREP enable\nline one\nline two\n")
        assert process_file(path).render() == "line one\nline two"

    def test_empty_body(self, workdir):
        """A header with no body produces empty output"""
        assert process_file(workdir("a.txt", "$PREP enable\n")).render() == ""

    def test_comments_removed(self, workdir):
        """$$ lines never reach the output"""
        path = workdir("a.txt", "$PREP enable\n$$ comment\nkeep\n$$ another\n")
        assert process_file(path).render() == "keep"

    def test_disable_truncates(self, workdir):
        """Nothing after $PREP disable is read or emitted"""
        path = workdir("a.txt", "$PREP enable\nA\nB\n$PREP disable\nC\n$PREP bogus\n")
        output = process_file(path).render()

        assert output == "A\nB"
        assert "C" not in output

    def test_define_then_reference(self, workdir):
        """A defined variable is substituted on later lines"""
        path = workdir("a.txt", "$PREP enable\n$PREP define GREETING hi\n%GREETING%\n")
        output = process_file(path).render()

        assert output.split("\n")[-1] == "hi"
        assert output == "\nhi"

    def test_define_value_keeps_spaces(self, workdir):
        """The define value keeps its inner spaces"""
        path = workdir("a.txt", "$PREP enable\n$PREP define MSG hello big world\n[%MSG%]\n")
        assert process_file(path).render() == "\n[hello big world]"

    def test_redefinition(self, workdir):
        """A later define replaces the earlier value"""
        path = workdir("a.txt", "$PREP enable\n$PREP define V 1\n%V%\n$PREP define V 2\n%V%\n")
        assert process_file(path).render() == "\n1\n\n2"

    def test_escapes_in_output(self, workdir):
        """Escaped markers render as plain characters"""
        path = workdir("a.txt", "$PREP enable\n100\\% sure\n\\$PREP define X 1\nY$Z\n")
        assert process_file(path).render() == "100% sure\n$PREP define X 1\nY$Z"

    def test_escaped_reference_not_substituted(self, workdir):
        """An escaped reference is left alone next to a real one"""
        path = workdir("a.txt", "$PREP enable\n$PREP define X 1\n\\%X\\% %X%\n")
        assert process_file(path).render() == "\n%X% 1"

    def test_concat(self, workdir):
        """concat stores a delimited value usable in later lines"""
        path = workdir("a.txt", '$PREP enable\n$PREP define V x\n$PREP concat C a %V% "q"\n%C%\n')
        assert process_file(path).render() == '\n"a x q"'

    def test_stringify(self, workdir):
        """stringify embeds another file as an escaped string"""
        workdir("s.txt", 'a "b"\nc')
        path = workdir("a.txt", "$PREP enable\n$PREP stringify S s.txt\nconst char *s = %S%;\n")

        assert process_file(path).render() == 'const char *s = "a \\"b\\"\\\nc";'

    def test_custom_delimiters(self, workdir):
        """Delimiter variables set in the file apply to stringify"""
        workdir("s.txt", "body")
        path = workdir(
            "a.txt",
            "$PREP enable\n"
            '$PREP define OPENING_STRINGIFY_DELIMITER R"(\n'
            '$PREP define CLOSING_STRINGIFY_DELIMITER )"\n'
            "$PREP stringify S s.txt\n"
            "$PREP disable\n",
        )
        ctx = Context()
        process_file(path, ctx)

        assert ctx["S"] == 'R"(body)"'


class TestIncludes:
    """Test recursive include and shared context"""

    def test_include_inlines_processed_file(self, workdir):
        """The included file's processed lines replace the include line"""
        workdir("inc.txt", "$PREP enable\n$PREP define X 42\ninc line\n")
        path = workdir("main.txt", "$PREP enable\nbefore\n$PREP include inc.txt\nafter %X%\n")

        assert process_file(path).render() == "before\n\ninc line\nafter 42"

    def test_include_pass_through_file(self, workdir):
        """A pass-through include is inserted verbatim"""
        workdir("inc.txt", "raw %X% $\n")
        path = workdir("main.txt", "$PREP enable\n[\n$PREP include inc.txt\n]\n")

        assert process_file(path).render() == "[\nraw %X% $\n\n]"

    def test_included_text_is_substituted(self, workdir):
        """Variables defined before the include apply to the included output"""
        workdir("inc.txt", "$PREP enable\nvalue=%V%\n")
        path = workdir("main.txt", "$PREP enable\n$PREP define V 7\n$PREP include inc.txt\n")

        assert process_file(path).render() == "\nvalue=7"

    def test_sibling_visibility(self, workdir):
        """Definitions from one include are visible to the next"""
        workdir("a.txt", "$PREP enable\n$PREP define NAME alice\n")
        workdir("b.txt", "$PREP enable\nhello %NAME%\n")
        path = workdir("main.txt", "$PREP enable\n$PREP include a.txt\n$PREP include b.txt\n")

        assert process_file(path).render() == "\nhello alice"

    def test_nested_includes(self, workdir):
        """Definitions survive several include levels"""
        workdir("c.txt", "$PREP enable\n$PREP define DEPTH three\n")
        workdir("b.txt", "$PREP enable\n$PREP include c.txt\n")
        path = workdir("a.txt", "$PREP enable\n$PREP include b.txt\n%DEPTH%\n")

        assert process_file(path).render().split("\n")[-1] == "three"

    def test_context_shared_with_caller(self, workdir):
        """The caller's context receives definitions from includes"""
        workdir("inc.txt", "$PREP enable\n$PREP define FROM_INC yes\n")
        path = workdir("main.txt", "$PREP enable\n$PREP include inc.txt\n")
        ctx = Context({"PRESET": "1"})
        process_file(path, ctx)

        assert dict(ctx) == {"PRESET": "1", "FROM_INC": "yes"}

    def test_runs_do_not_share_state(self, workdir):
        """Each module-level process_file call starts with a fresh context"""
        first = workdir("a.txt", "$PREP enable\n$PREP define X 1\n")
        second = workdir("b.txt", "$PREP enable\n%X%\n")
        process_file(first)

        assert process_file(second).render() == "%X%"

    def test_preprocessor_reuses_context(self, workdir):
        """One Preprocessor keeps its context between files"""
        first = workdir("a.txt", "$PREP enable\n$PREP define X 1\n")
        second = workdir("b.txt", "$PREP enable\n%X%\n")
        pre = Preprocessor()
        pre.process_file(first)

        assert pre.process_file(second).render() == "1"

    def test_pass_through_backslash_doubled_when_context_set(self, workdir):
        r"""An included raw \$ comes back as \\$ once any variable exists"""
        workdir("inc.txt", "a\\$b")
        path = workdir("main.txt", "$PREP enable\n$PREP define V 1\n$PREP include inc.txt\n")

        assert process_file(path).render() == "\na\\\\$b"


class TestFailures:
    """Test that errors abort the whole call chain"""

    def test_unknown_directive(self, workdir):
        """An unregistered directive raises UnknownDirectiveError"""
        path = workdir("a.txt", "$PREP enable\nok\n$PREP bogus\n")

        with pytest.raises(UnknownDirectiveError) as excinfo:
            process_file(path)
        assert excinfo.value.directive == "bogus"

    def test_unknown_directive_keeps_arguments(self, workdir):
        """The error carries everything after the prefix"""
        path = workdir("a.txt", "$PREP enable\n$PREP bogus 1 2\n")

        with pytest.raises(UnknownDirectiveError) as excinfo:
            process_file(path)
        assert excinfo.value.directive == "bogus 1 2"

    def test_directive_name_without_arguments(self, workdir):
        """A directive name without its trailing space is unknown"""
        path = workdir("a.txt", "$PREP enable\n$PREP include\n")

        with pytest.raises(UnknownDirectiveError) as excinfo:
            process_file(path)
        assert excinfo.value.directive == "include"

    def test_missing_file(self, workdir):
        """A missing top-level file raises IoFailureError chained to the OS error"""
        with pytest.raises(IoFailureError) as excinfo:
            process_file("does-not-exist.txt")

        assert isinstance(excinfo.value.cause, FileNotFoundError)
        assert excinfo.value.__cause__ is excinfo.value.cause

    def test_missing_include(self, workdir):
        """A missing include reports the include path"""
        path = workdir("a.txt", "$PREP enable\n$PREP include gone.txt\n")

        with pytest.raises(IoFailureError) as excinfo:
            process_file(path)
        assert excinfo.value.path == "gone.txt"

    def test_undecodable_file(self, tmp_path):
        """Bytes that do not decode raise IoFailureError"""
        path = tmp_path / "bin.dat"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(IoFailureError) as excinfo:
            process_file(path)
        assert isinstance(excinfo.value.cause, UnicodeDecodeError)

    def test_error_in_nested_include_propagates(self, workdir):
        """An error inside an include aborts the including file"""
        workdir("inc.txt", "$PREP enable\n$PREP bogus\n")
        path = workdir("main.txt", "$PREP enable\n$PREP include inc.txt\n")

        with pytest.raises(UnknownDirectiveError):
            process_file(path)

    def test_define_without_value(self, workdir):
        """define without a value aborts processing"""
        path = workdir("a.txt", "$PREP enable\n$PREP define X\n")

        with pytest.raises(ArgumentCountError):
            process_file(path)

    def test_invalid_identifier(self, workdir):
        """A digit-leading name aborts processing"""
        path = workdir("a.txt", "$PREP enable\n$PREP define 2bad x\n")

        with pytest.raises(InvalidIdentifierError):
            process_file(path)

    def test_include_arity(self, workdir):
        """Extra include arguments report expected and given counts"""
        path = workdir("a.txt", "$PREP enable\n$PREP include a.txt b.txt\n")

        with pytest.raises(ArgumentCountError) as excinfo:
            process_file(path)
        assert (excinfo.value.expected, excinfo.value.got) == (1, 2)


class TestConfiguration:
    """Test that every stage follows the appsettings singleton"""

    @pytest.fixture
    def hash_prefix(self, monkeypatch):
        """Switch the header and directive prefix to #PREP"""
        monkeypatch.setattr(appsettings, "enable_header", "#PREP enable\n")
        monkeypatch.setattr(appsettings, "directive_prefix", "#PREP ")

    def test_custom_prefix_recognised(self, workdir, hash_prefix):
        """A custom header enables the file and its directives dispatch"""
        path = workdir("a.txt", "#PREP enable\n#PREP define X 1\n%X%\n")

        assert process_file(path).render() == "\n1"

    def test_custom_prefix_unknown_directive(self, workdir, hash_prefix):
        """Unknown directives are detected under the custom prefix"""
        path = workdir("a.txt", "#PREP enable\n#PREP bogus\n")

        with pytest.raises(UnknownDirectiveError) as excinfo:
            process_file(path)
        assert excinfo.value.directive == "bogus"

    def test_default_prefix_passes_through_when_changed(self, workdir, hash_prefix):
        """The stock $PREP header no longer enables a file"""
        text = "$PREP enable\n$PREP define X 1\n%X%\n"
        path = workdir("a.txt", text)

        assert process_file(path).render() == text

    def test_custom_default_delimiter(self, workdir, monkeypatch):
        """concat falls back to the configured delimiter"""
        monkeypatch.setattr(appsettings, "default_delimiter", "'")
        path = workdir("a.txt", "$PREP enable\n$PREP concat C a b\n%C%\n")

        assert process_file(path).render() == "'a b'"

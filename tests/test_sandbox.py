"""Tests for the sandbox executor."""

import pytest
import pydash
from json_workbench.sandbox import SandboxExecutor, ConsoleCapture
from json_workbench.types import ConsoleEntry, ConsoleLevel, UNDEFINED


class TestConsoleCapture:
    """Tests for ConsoleCapture class."""

    def test_records_in_call_order(self):
        """Test that every level is captured with its arguments."""
        console = ConsoleCapture()
        console.log("a", 1)
        console.warn("careful")
        console.info({"k": "v"})
        console.error()

        assert console.entries == [
            ConsoleEntry(ConsoleLevel.LOG, ("a", 1)),
            ConsoleEntry(ConsoleLevel.WARN, ("careful",)),
            ConsoleEntry(ConsoleLevel.INFO, ({"k": "v"},)),
            ConsoleEntry(ConsoleLevel.ERROR, ()),
        ]

    def test_appends_to_shared_list(self):
        """Test that a given list is appended to in place."""
        entries = [ConsoleEntry(ConsoleLevel.LOG, ("old",))]
        ConsoleCapture(entries).log("new")

        assert [e.args for e in entries] == [("old",), ("new",)]


class TestSandboxExecutor:
    """Tests for SandboxExecutor class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.executor = SandboxExecutor()

    def test_returns_value(self, sample_users_json):
        """Test a script that returns a derived value."""
        result = self.executor.execute(
            'return [u["name"] for u in data["users"] if u["active"]]',
            sample_users_json
        )

        assert result.success
        assert result.value == ["Alice", "Carol"]
        assert result.error is None

    def test_no_return_is_undefined(self):
        """Test that a script without a return yields UNDEFINED."""
        result = self.executor.execute("x = 1", {"a": 1})

        assert result.success
        assert result.value is UNDEFINED

    def test_empty_script(self):
        """Test that an empty body runs."""
        result = self.executor.execute("   \n", [1])

        assert result.success
        assert result.value is UNDEFINED

    def test_library_bound_to_underscore(self, sample_users_json):
        """Test that pydash is available as ``_``."""
        result = self.executor.execute('return _.map_(data["users"], "name")', sample_users_json)

        assert result.value == ["Alice", "Bob", "Carol"]

    def test_custom_library(self):
        """Test that another library object can be injected."""
        class Lib:
            @staticmethod
            def double(x):
                return x * 2

        result = self.executor.execute("return _.double(data)", 21, library=Lib)
        assert result.value == 42

    def test_input_is_not_mutated(self, sample_users_json):
        """Test that the script works on a copy of the input."""
        before = pydash.clone_deep(sample_users_json)
        result = self.executor.execute('data["users"].clear()\nreturn data', sample_users_json)

        assert result.value["users"] == []
        assert sample_users_json == before

    def test_console_and_print_are_captured(self):
        """Test console calls from a script."""
        console = ConsoleCapture()
        result = self.executor.execute(
            'console.log("start", data)\nprint("via print")\nconsole.warn("w")\nreturn data',
            {"n": 1},
            console=console
        )

        assert result.success
        assert [(e.level, e.args) for e in console.entries] == [
            (ConsoleLevel.LOG, ("start", {"n": 1})),
            (ConsoleLevel.LOG, ("via print",)),
            (ConsoleLevel.WARN, ("w",)),
        ]

    def test_console_entries_kept_on_failure(self):
        """Test that output written before an exception is kept."""
        console = ConsoleCapture()
        result = self.executor.execute('console.log("before")\nraise ValueError("boom")', {}, console=console)

        assert not result.success
        assert result.error == "boom"
        assert len(console.entries) == 1

    def test_runtime_error_message(self):
        """Test that exceptions become error messages."""
        result = self.executor.execute('return data["missing"]', {})

        assert not result.success
        assert result.error == "'missing'"

    def test_syntax_error_has_body_line(self):
        """Test that syntax errors point into the script body."""
        result = self.executor.execute("x = 1\nreturn 1 2", {})

        assert not result.success
        assert "(line 2)" in result.error

    def test_multiline_string_is_kept_verbatim(self):
        """Test that continuation lines of string literals are not re-indented."""
        result = self.executor.execute('s = """a\nb"""\nreturn s', {})

        assert result.success
        assert result.value == "a\nb"

    def test_comment_only_script(self):
        """Test that a script with no statements returns nothing."""
        result = self.executor.execute("# nothing yet\n", {"a": 1})

        assert result.success
        assert result.value is UNDEFINED

    @pytest.mark.parametrize("script", [
        'import os\nreturn 1',
        'return open("/etc/passwd").read()',
        'return __import__("os").getcwd()',
        'return eval("1 + 1")',
    ])
    def test_restricted_builtins(self, script):
        """Test that filesystem and import access is unavailable."""
        result = self.executor.execute(script, {})

        assert not result.success
        assert result.error

    def test_non_json_result_fails(self):
        """Test that non-serializable results are rejected."""
        result = self.executor.execute("return {1, 2}", None)

        assert not result.success
        assert "not JSON serializable" in result.error

    def test_circular_result_fails(self):
        """Test that circular results are rejected."""
        result = self.executor.execute('data["self"] = data\nreturn data', {})

        assert not result.success
        assert "circular" in result.error

    def test_result_is_normalized_to_json(self):
        """Test that tuples and integer keys become plain JSON."""
        result = self.executor.execute("return {1: (2, 3)}", None)

        assert result.value == {"1": [2, 3]}

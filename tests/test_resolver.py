# tests/test_resolver.py
"""Tests for query resolution and interactive narrowing."""

import io
from pathlib import Path

import pytest

from fastcd.console import Console
from fastcd.errors import CancelledError, NotFoundError
from fastcd.registry import Entry, Registry
from fastcd.resolver import Resolver, format_listing, tilde_path


def make_resolver(inputs: str = "", home: Path = None):
    """Resolver reading scripted input and capturing output."""
    out = io.StringIO()
    console = Console(stdin=io.StringIO(inputs), stdout=out, styled=False)
    return Resolver(console, home=home), out


@pytest.fixture
def projects():
    return Registry({"project1": "/a", "project2": "/b", "other": "/c"})


class TestResolve:
    """Test the matching rules."""

    def test_exact_match_beats_substring(self):
        resolver, out = make_resolver()
        registry = Registry({"project1": "/a", "project12": "/b"})

        entry = resolver.resolve("project1", registry)

        assert entry == Entry("project1", Path("/a"))
        assert out.getvalue() == ""

    def test_single_substring_match(self, projects):
        resolver, out = make_resolver()
        assert resolver.resolve("oth", projects).name == "other"
        assert out.getvalue() == ""

    def test_substring_is_case_sensitive(self, projects):
        resolver, _ = make_resolver()
        with pytest.raises(NotFoundError):
            resolver.resolve("OTH", projects)

    def test_ambiguous_query_narrows(self):
        resolver, out = make_resolver("2\n")
        registry = Registry({"project1": "/a", "project2": "/b"})

        entry = resolver.resolve("proj", registry)

        assert entry.name == "project2"
        assert "2 projects found" in out.getvalue()

    def test_narrowed_set_excludes_other_projects(self, projects):
        # "other" exists, but not among the "proj" matches
        resolver, _ = make_resolver("other\n")
        with pytest.raises(NotFoundError):
            resolver.resolve("proj", projects)

    def test_exact_match_within_narrowed_set(self):
        resolver, _ = make_resolver("app\n")
        registry = Registry({"app": "/a", "apple": "/b", "zzz": "/c"})
        # "ap" matches app and apple; typing the full name picks it exactly
        assert resolver.resolve("ap", registry).name == "app"

    def test_empty_input_rebroadens(self, projects):
        resolver, out = make_resolver("\nother\n")

        entry = resolver.resolve("proj", projects)

        assert entry.name == "other"
        output = out.getvalue()
        narrowed = output.index("2 projects found")
        full = output.index("3 projects found")
        assert narrowed < full

    def test_empty_query_lists_everything(self, projects):
        resolver, out = make_resolver("project1\n")
        entry = resolver.resolve("", projects, "Which project should be loaded?")

        assert entry.name == "project1"
        output = out.getvalue()
        assert output.startswith("Which project should be loaded?\n\n")
        assert "other" in output
        assert "Enter project: " in output

    def test_empty_query_prompts_even_with_one_project(self):
        resolver, out = make_resolver("\nonly\n")
        assert resolver.resolve("", Registry({"only": "/a"})).name == "only"
        assert out.getvalue().count("1 project found") == 2

    def test_prompt_shown_for_narrowed_listing(self, projects):
        resolver, out = make_resolver("1\n")
        resolver.resolve("proj", projects, "Which project should be deleted?")
        assert "Which project should be deleted?" in out.getvalue()

    def test_no_match_fails_without_prompting(self, projects):
        resolver, out = make_resolver("project1\n")
        with pytest.raises(NotFoundError, match="No matching project found"):
            resolver.resolve("nothing", projects)
        assert out.getvalue() == ""

    def test_empty_registry_fails_without_prompting(self):
        resolver, out = make_resolver("anything\n")
        with pytest.raises(NotFoundError, match="No saved projects found"):
            resolver.resolve("", Registry())
        assert out.getvalue() == ""

    def test_end_of_input_cancels(self, projects):
        resolver, _ = make_resolver("")
        with pytest.raises(CancelledError):
            resolver.resolve("proj", projects)


class TestListing:
    """Test listing layout."""

    def test_columns_aligned_and_sorted(self):
        console = Console(stdin=io.StringIO(), stdout=io.StringIO(), styled=False)
        entries = [Entry("long", Path("/tmp/y")), Entry("a", Path("/home/u/x"))]

        lines = format_listing(entries, "Pick one", console, home=Path("/home/u"))

        assert lines == [
            "Pick one",
            "",
            "a     ~/x",
            "long  /tmp/y",
        ]

    def test_count_header_without_prompt(self):
        console = Console(stdin=io.StringIO(), stdout=io.StringIO(), styled=False)
        lines = format_listing([Entry("a", Path("/a"))], "", console)
        assert lines[0] == "1 project found"

    def test_bold_names_on_terminal(self):
        console = Console(stdin=io.StringIO(), stdout=io.StringIO(), styled=True)
        lines = format_listing([Entry("ab", Path("/a"))], "", console)
        assert lines[2] == "\x1b[1mab  \x1b[0m/a"


class TestTildePath:
    """Test home directory abbreviation."""

    def test_inside_home(self):
        assert tilde_path(Path("/home/u/code"), Path("/home/u")) == "~/code"

    def test_home_itself(self):
        assert tilde_path(Path("/home/u"), Path("/home/u")) == "~"

    def test_sibling_with_common_prefix(self):
        assert tilde_path(Path("/home/user2/x"), Path("/home/user")) == "/home/user2/x"

    def test_no_home(self):
        assert tilde_path(Path("/a/b"), None) == "/a/b"

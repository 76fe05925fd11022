"""
Tests for the synthesized usage text.
"""

from dataclasses import dataclass, field
from typing import Annotated

from tagflags import TagFlagParser, parse


class SmallOptions:
    Usage: Annotated[str, "  small demo  "] = ""
    Name: Annotated[str, "who to greet | world"] = ""
    Times: Annotated[int, "repeat count"] = 1
    Loud: Annotated[bool, "shout | true"] = False
    Scale: Annotated[float, "! size ! 1.5"] = 0.0
    Args: list[str] = []


class NoUsageOptions:
    Name: Annotated[str, "who to greet | world"] = ""


@dataclass
class CustomUsageField:
    Help: str = field(default="", metadata={"tag": "custom header"})
    Level: int = field(default=0, metadata={"tag": "verbosity | 2"})


class TestUsageText:
    """Test suite for the usage text written into the record."""

    def test_exact_usage_text(self):
        """Test the complete usage text for a small record."""
        opts = parse(SmallOptions(), [], prog="greet")
        assert opts.Usage == (
            "\n Usage of greet #   small demo  "
            "\n ARGS:"
            "\n\t--Name: world <-- Default, str # who to greet"
            "\n\t--Times:  <-- Default, int # repeat count"
            "\n\t--Loud: true <-- Default, bool # shout"
            "\n\t--Scale: 1.5 <-- Default, float # size"
        )

    def test_usage_written_before_parsing(self):
        """Test that the usage field is filled when the parser is created."""
        opts = SmallOptions()
        binder = TagFlagParser(opts, prog="greet")
        assert opts.Usage == binder.usage
        assert opts.Usage.startswith("\n Usage of greet #")

    def test_one_line_per_flag_in_declaration_order(self):
        """Test that each bindable field has one line, in order."""
        binder = TagFlagParser(SmallOptions(), prog="greet")
        lines = binder.usage.split("\n\t")[1:]
        assert [line.split(":", 1)[0] for line in lines] == [
            "--Name",
            "--Times",
            "--Loud",
            "--Scale",
        ]
        for line, type_name in zip(lines, ["str", "int", "bool", "float"]):
            assert f"<-- Default, {type_name} # " in line

    def test_record_without_usage_field(self):
        """Test that no usage attribute is added when none is declared."""
        opts = NoUsageOptions()
        binder = TagFlagParser(opts, prog="greet")
        assert not hasattr(opts, "Usage")
        assert binder.usage.startswith("\n Usage of greet # \n ARGS:")
        assert "--Name: world" in binder.usage

    def test_custom_usage_field(self):
        """Test that the usage field name can be changed."""
        opts = parse(CustomUsageField(), [], prog="tool", usage_field="Help")
        assert opts.Help.startswith("\n Usage of tool # custom header\n ARGS:")
        assert "--Level: 2 <-- Default, int # verbosity" in opts.Help

    def test_default_prog_from_argv(self, monkeypatch):
        """Test that the program name defaults to argv[0] as invoked."""
        monkeypatch.setattr("sys.argv", ["/usr/local/bin/greeter"])
        binder = TagFlagParser(NoUsageOptions())
        assert binder.prog == "/usr/local/bin/greeter"
        assert binder.usage.startswith("\n Usage of /usr/local/bin/greeter # \n ARGS:")

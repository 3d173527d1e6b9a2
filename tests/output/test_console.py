"""Tests for the Rich theme and render_to_text."""

from prioctl.output.console import PRIO_THEME, render_to_text, style_for_kind


class TestRenderToText:
    def test_captures_output(self) -> None:
        assert render_to_text(lambda console: console.print("hello")) == "hello"

    def test_no_color_disables_ansi(self) -> None:
        output = render_to_text(
            lambda console: console.print("[prio.error]hello[/prio.error]"), no_color=True
        )
        assert "\x1b" not in output
        assert output == "hello"

    def test_width(self) -> None:
        widths: list[int] = []
        render_to_text(lambda console: widths.append(console.width), width=80)
        assert widths == [80]


class TestStyleForKind:
    def test_known_kinds(self) -> None:
        assert style_for_kind("quadrant") == "prio.kind.quadrant"
        assert style_for_kind("routine_section") == "prio.kind.routine_section"

    def test_unknown_kind(self) -> None:
        assert style_for_kind("mystery") == ""

    def test_theme_has_kind_styles(self) -> None:
        for kind in ("quadrant", "list", "routine_section"):
            assert f"prio.kind.{kind}" in PRIO_THEME.styles

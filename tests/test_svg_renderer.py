import xml.etree.ElementTree as ET
from datetime import date

from contributions_api.services.contributions_service import DayRecord
from contributions_api.services.contributions_service import ParsedContributions
from contributions_api.services.svg_renderer import LEVEL_COLORS
from contributions_api.services.svg_renderer import MIN_CARD_WIDTH
from contributions_api.services.svg_renderer import build_weeks
from contributions_api.services.svg_renderer import card_size
from contributions_api.services.svg_renderer import level_color
from contributions_api.services.svg_renderer import month_labels
from contributions_api.services.svg_renderer import render_contributions_svg
from contributions_api.services.svg_renderer import render_error_svg


SVG_NS = "{http://www.w3.org/2000/svg}"

EMPTY = ParsedContributions(total_contributions=0, contributions=())


def rects_with_class(root: ET.Element, class_name: str) -> list[ET.Element]:
    return [
        rect for rect in root.iter(f"{SVG_NS}rect") if rect.get("class") == class_name
    ]


def test_render_single_week_of_empty_days() -> None:
    svg = render_contributions_svg(EMPTY, "octocat", date(2024, 1, 7), date(2024, 1, 13))
    root = ET.fromstring(svg)

    squares = rects_with_class(root, "contrib-square")
    swatches = rects_with_class(root, "contrib-swatch")

    assert len(squares) == 7
    assert {square.get("fill") for square in squares} == {LEVEL_COLORS[0]}
    assert {square.get("data-level") for square in squares} == {"0"}
    assert [swatch.get("fill") for swatch in swatches] == list(LEVEL_COLORS)
    assert int(root.get("width")) >= MIN_CARD_WIDTH


def test_render_colors_days_by_level_and_reports_stats() -> None:
    parsed = ParsedContributions(
        total_contributions=15,
        contributions=(
            DayRecord(date=date(2024, 1, 2), count=3, level=1),
            DayRecord(date=date(2024, 1, 3), count=12, level=4),
        ),
    )

    svg = render_contributions_svg(parsed, "octocat", date(2024, 1, 1), date(2024, 1, 7))
    root = ET.fromstring(svg)

    squares = {
        square.get("data-date"): square for square in rects_with_class(root, "contrib-square")
    }
    texts = [text.text for text in root.iter(f"{SVG_NS}text")]

    assert len(squares) == 7
    assert squares["2024-01-02"].get("fill") == LEVEL_COLORS[1]
    assert squares["2024-01-03"].get("fill") == LEVEL_COLORS[4]
    assert squares["2024-01-04"].get("fill") == LEVEL_COLORS[0]
    assert squares["2024-01-03"].find(f"{SVG_NS}title").text == (
        "12 contributions on 2024-01-03"
    )
    assert "octocat's GitHub Contributions" in texts
    assert "15" in texts
    assert "2" in texts
    assert "Less" in texts
    assert "More" in texts


def test_render_reversed_range_has_no_day_cells() -> None:
    svg = render_contributions_svg(EMPTY, "octocat", date(2024, 2, 1), date(2024, 1, 1))
    root = ET.fromstring(svg)

    assert rects_with_class(root, "contrib-square") == []
    assert len(rects_with_class(root, "contrib-swatch")) == 5


def test_render_escapes_username() -> None:
    svg = render_contributions_svg(
        EMPTY, "<b>&co</b>", date(2024, 1, 7), date(2024, 1, 13)
    )

    assert "&lt;b&gt;&amp;co&lt;/b&gt;" in svg
    ET.fromstring(svg)


def test_render_is_deterministic() -> None:
    first = render_contributions_svg(EMPTY, "octocat", date(2024, 1, 1), date(2024, 3, 31))
    second = render_contributions_svg(EMPTY, "octocat", date(2024, 1, 1), date(2024, 3, 31))

    assert first == second


def test_build_weeks_starts_on_sunday_and_covers_range() -> None:
    weeks = build_weeks(date(2024, 1, 1), date(2024, 1, 7))

    assert len(weeks) == 2
    assert weeks[0][0] == date(2023, 12, 31)
    assert weeks[1][0] == date(2024, 1, 7)
    assert all(len(week) == 7 for week in weeks)


def test_card_size_grows_with_weeks_beyond_minimum() -> None:
    assert card_size(1) == (MIN_CARD_WIDTH, 258)
    assert card_size(53) == (53 * 14 + 35 + 50 + 60, 258)


def test_month_labels_skip_first_column() -> None:
    weeks = build_weeks(date(2024, 1, 1), date(2024, 3, 31))

    labels = month_labels(weeks)

    assert [name for name, _ in labels] == ["Jan", "Feb", "Mar"]
    assert labels[0][1] == 14


def test_level_color_defaults_to_lightest_for_unknown_level() -> None:
    assert level_color(9) == LEVEL_COLORS[0]


def test_render_error_svg_contains_message() -> None:
    svg = render_error_svg("Failed to fetch contributions: 404 Not Found")
    root = ET.fromstring(svg)

    texts = [text.text for text in root.iter(f"{SVG_NS}text")]
    assert texts == [
        "Error loading contributions",
        "Failed to fetch contributions: 404 Not Found",
    ]
    assert root.get("width") == "400"


def test_build_weeks_stays_within_calendar_bounds() -> None:
    first_weeks = build_weeks(date.min, date(1, 1, 7))
    last_weeks = build_weeks(date(9999, 12, 25), date.max)

    assert first_weeks[0][0] is None
    assert first_weeks[0][1] == date.min
    assert last_weeks[-1][-1] is None
    assert date.max in last_weeks[-1]


def test_render_handles_calendar_edges() -> None:
    svg = render_contributions_svg(EMPTY, "octocat", date.min, date(1, 1, 7))
    root = ET.fromstring(svg)

    assert len(rects_with_class(root, "contrib-square")) == 7

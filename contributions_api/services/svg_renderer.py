from datetime import date

import svgwrite

from contributions_api.services.contributions_service import DayRecord
from contributions_api.services.contributions_service import ParsedContributions
from contributions_api.services.streaks import current_streak
from contributions_api.services.streaks import longest_streak


LEVEL_COLORS = ("#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39")
MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
DAY_LABELS = ("", "Mon", "", "Wed", "", "Fri", "")

CELL_SIZE = 11
CELL_GAP = 3
CELL_PITCH = CELL_SIZE + CELL_GAP
DAY_LABEL_WIDTH = 35
CHART_LEFT_MARGIN = 50
CARD_PADDING = 30
MIN_CARD_WIDTH = 550
CARD_EXTRA_HEIGHT = 160

CARD_STYLE = """
.header { font: 600 18px 'Segoe UI', Ubuntu, Sans-Serif; fill: #2f80ed; animation: fadeInAnimation 0.8s ease-in-out forwards; }
@supports(-moz-appearance: auto) { .header { font-size: 15.5px; } }
.stat { font: 600 14px 'Segoe UI', Ubuntu, "Helvetica Neue", Sans-Serif; fill: #434d58; }
@supports(-moz-appearance: auto) { .stat { font-size: 12px; } }
.stagger { opacity: 0; animation: fadeInAnimation 0.3s ease-in-out forwards; }
.contrib-month { font: 10px 'Segoe UI', Ubuntu, Sans-Serif; fill: #656d76; }
.contrib-day { font: 9px 'Segoe UI', Ubuntu, Sans-Serif; fill: #656d76; text-anchor: start; }
.contrib-legend { font: 12px 'Segoe UI', Ubuntu, Sans-Serif; fill: #656d76; }
.contrib-square, .contrib-swatch { shape-rendering: crispEdges; opacity: 0; animation: fadeInAnimation 0.3s ease-in-out forwards; }
.bold { font-weight: 700; }
@keyframes fadeInAnimation { from { opacity: 0; } to { opacity: 1; } }
"""


def level_color(level: int) -> str:
    """Return the heatmap fill color for a contribution level."""

    if 0 <= level < len(LEVEL_COLORS):
        return LEVEL_COLORS[level]
    return LEVEL_COLORS[0]


def _day_from_ordinal(ordinal: int) -> date | None:
    if date.min.toordinal() <= ordinal <= date.max.toordinal():
        return date.fromordinal(ordinal)
    return None


def build_weeks(from_date: date, to_date: date) -> list[list[date | None]]:
    """Split the range into Sunday-first weeks of seven consecutive days.

    Slots falling outside the representable calendar (before 0001-01-01 or
    after 9999-12-31) are None.
    """

    first = from_date.toordinal() - (from_date.weekday() + 1) % 7
    return [
        [_day_from_ordinal(start + offset) for offset in range(7)]
        for start in range(first, to_date.toordinal() + 1, 7)
    ]


def card_size(week_count: int) -> tuple[int, int]:
    """Return card width and height for a grid of `week_count` columns."""

    chart_width = week_count * CELL_PITCH
    width = max(
        MIN_CARD_WIDTH,
        chart_width + DAY_LABEL_WIDTH + CHART_LEFT_MARGIN + CARD_PADDING * 2,
    )
    height = 7 * CELL_PITCH + CARD_EXTRA_HEIGHT
    return width, height


def month_labels(weeks: list[list[date | None]]) -> list[tuple[str, int]]:
    """Return (month name, x offset) for each column that starts a new month."""

    labels: list[tuple[str, int]] = []
    last_month: int | None = None
    for week_index, week in enumerate(weeks):
        first_day = next(day for day in week if day is not None)
        month = first_day.month
        if week_index > 0 and month != last_month:
            labels.append((MONTH_NAMES[month - 1], week_index * CELL_PITCH))
            last_month = month
    return labels


def _contribution_title(count: int, day: date) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} contribution{suffix} on {day.isoformat()}"


def render_contributions_svg(
    parsed: ParsedContributions,
    username: str,
    from_date: date,
    to_date: date,
) -> str:
    """Render the contribution heatmap card as an SVG document.

    Each day of the inclusive range gets a square colored by its level; days
    missing from `parsed` render as level 0. The header shows total
    contributions and the number of active days, with a legend at the
    bottom right.
    """

    days_by_date: dict[date, DayRecord] = {
        day.date: day for day in parsed.contributions
    }
    weeks = build_weeks(from_date, to_date)
    width, height = card_size(len(weeks))

    active_days = sum(1 for day in parsed.contributions if day.count > 0)
    longest = longest_streak(parsed.contributions)
    current = current_streak(parsed.contributions)

    dwg = svgwrite.Drawing(
        size=(width, height),
        viewBox=f"0 0 {width} {height}",
        profile="full",
        debug=False,
        role="img",
    )
    dwg.set_desc(
        title=f"{username}'s GitHub Contributions",
        desc=f"Longest streak: {longest} days. Current streak: {current} days.",
    )
    dwg.embed_stylesheet(CARD_STYLE)

    dwg.add(
        dwg.rect(
            insert=(0.5, 0.5),
            size=(width - 1, height - 1),
            rx=4.5,
            fill="#fffefe",
            stroke="#e4e2e2",
            stroke_width=1,
        )
    )

    title = dwg.g(transform=f"translate({CARD_PADDING}, 35)", data_testid="card-title")
    title.add(
        dwg.text(f"{username}'s GitHub Contributions", insert=(0, 0), class_="header")
    )
    dwg.add(title)

    stats = dwg.g(transform=f"translate({CARD_PADDING}, 70)")
    total_group = dwg.g(class_="stagger", style="animation-delay: 150ms")
    total_group.add(dwg.text("Total Contributions:", insert=(0, 0), class_="stat"))
    total_group.add(
        dwg.text(
            str(parsed.total_contributions),
            insert=(180, 0),
            class_="stat bold",
            style="fill: #2f80ed;",
        )
    )
    stats.add(total_group)
    active_group = dwg.g(
        class_="stagger", style="animation-delay: 300ms", transform="translate(280, 0)"
    )
    active_group.add(dwg.text("Active Days:", insert=(0, 0), class_="stat"))
    active_group.add(
        dwg.text(
            str(active_days), insert=(120, 0), class_="stat bold", style="fill: #2f80ed;"
        )
    )
    stats.add(active_group)
    dwg.add(stats)

    chart = dwg.g(transform=f"translate({CARD_PADDING}, 90)")
    for month_name, x in month_labels(weeks):
        chart.add(
            dwg.text(
                month_name,
                insert=(x + CHART_LEFT_MARGIN, 15),
                class_="contrib-month",
            )
        )
    for row, label in enumerate(DAY_LABELS):
        if label:
            chart.add(
                dwg.text(label, insert=(10, 35 + row * CELL_PITCH), class_="contrib-day")
            )

    for week_index, week in enumerate(weeks):
        for row, day in enumerate(week):
            if day is None or day < from_date or day > to_date:
                continue
            record = days_by_date.get(day)
            count = record.count if record else 0
            level = record.level if record else 0
            delay = (week_index * 7 + row) * 10
            square = dwg.rect(
                insert=(week_index * CELL_PITCH + CHART_LEFT_MARGIN, row * CELL_PITCH + 25),
                size=(CELL_SIZE, CELL_SIZE),
                rx=2,
                ry=2,
                fill=level_color(level),
                class_="contrib-square",
                style=f"animation-delay: {delay}ms",
                data_date=day.isoformat(),
                data_level=level,
            )
            square.set_desc(title=_contribution_title(count, day))
            chart.add(square)
    dwg.add(chart)

    legend = dwg.g(transform=f"translate({width - 150}, {height - 30})")
    legend.add(dwg.text("Less", insert=(0, 0), class_="contrib-legend"))
    for level, color in enumerate(LEVEL_COLORS):
        legend.add(
            dwg.rect(
                insert=(30 + level * CELL_PITCH, -8),
                size=(CELL_SIZE, CELL_SIZE),
                rx=2,
                ry=2,
                fill=color,
                class_="contrib-swatch",
            )
        )
    legend.add(
        dwg.text(
            "More",
            insert=(30 + len(LEVEL_COLORS) * CELL_PITCH + 8, 0),
            class_="contrib-legend",
        )
    )
    dwg.add(legend)

    return dwg.tostring()


def render_error_svg(message: str) -> str:
    """Render a small SVG card describing why the heatmap could not load."""

    dwg = svgwrite.Drawing(size=(400, 100), profile="full", debug=False)
    dwg.add(dwg.rect(insert=(0, 0), size=("100%", "100%"), fill="#f6f8fa"))
    dwg.add(
        dwg.text(
            "Error loading contributions",
            insert=(20, 30),
            font_family="Arial, sans-serif",
            font_size=14,
            fill="#d1242f",
        )
    )
    dwg.add(
        dwg.text(
            message,
            insert=(20, 50),
            font_family="Arial, sans-serif",
            font_size=12,
            fill="#656d76",
        )
    )
    return dwg.tostring()

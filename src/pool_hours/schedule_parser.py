"""Schedule parsing utilities for the pool hours service."""

import logging
import re
from collections.abc import Callable

from bs4 import BeautifulSoup, NavigableString, Tag

from .models import RawSession, SessionType

logger = logging.getLogger(__name__)

day_prefix_regex = re.compile(r"^(mon|tue|wed|thu|fri|sat|sun)", re.IGNORECASE)
day_name_regex = re.compile(
    r"(mon|tue|wed|thu|fri|sat|sun|monday|tuesday|wednesday|thursday|friday|saturday|sunday)",
    re.IGNORECASE,
)
time_regex = re.compile(r"\d{1,2}:\d{2}(?:am|pm)", re.IGNORECASE)
time_range_regex = re.compile(
    r"\d{1,2}:\d{2}(?:am|pm)\s*-\s*\d{1,2}:\d{2}(?:am|pm)", re.IGNORECASE
)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

# Exact heading text per category
CATEGORY_HEADINGS: dict[str, str] = {
    "lap": "Lap Swim Hours",
    "recreational": "Rec Swim Hours",
}

# Substrings that must all appear in a lowercased heading
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "lap": ("lap", "swim"),
    "recreational": ("rec", "swim"),
}

# Only lap tables are located by nearby text
PROXIMITY_KEYWORDS: dict[str, str] = {"lap": "lap"}

# Section titles that set the default type of the tables after them
SECTION_MARKERS: list[tuple[str, SessionType]] = [
    ("lap swim hours", "lap"),
    ("rec swim hours", "recreational"),
]

LAP_MARKERS = ("lap swim",)
REC_MARKERS = ("rec swim", "recreational swim", "open swim", "family swim")

DAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]
SHORT_DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

DAY_ABBREVIATIONS = {
    "mon": "Monday",
    "monday": "Monday",
    "tue": "Tuesday",
    "tuesday": "Tuesday",
    "wed": "Wednesday",
    "wednesday": "Wednesday",
    "thu": "Thursday",
    "thr": "Thursday",
    "thursday": "Thursday",
    "fri": "Friday",
    "friday": "Friday",
    "sat": "Saturday",
    "saturday": "Saturday",
    "sun": "Sunday",
    "sunday": "Sunday",
}

PoolHours = dict[str, list[RawSession]]


def _text(element: Tag) -> str:
    """Element text with whitespace runs collapsed."""
    return " ".join(element.get_text(" ").split())


class ScheduleParser:
    """Parser for lap and recreational swim tables on the pool hours page."""

    @staticmethod
    def make_soup(html: "str | BeautifulSoup") -> BeautifulSoup:
        """Parse raw HTML, passing already parsed documents through."""
        if isinstance(html, BeautifulSoup):
            return html
        return BeautifulSoup(html or "", "html.parser")

    # -- table location -------------------------------------------------

    @staticmethod
    def locate_table(soup: BeautifulSoup, category: SessionType) -> Tag | None:
        """Find the table holding the schedule for a session category.

        Strategies are tried in order and the first table found wins:
        exact heading text, fuzzy heading text, nearby text (lap only) and
        finally the first table that looks like a schedule.

        Args:
            soup: Parsed pool hours page
            category: "lap" or "recreational"

        Returns:
            The table element, or None if no strategy found one
        """
        for strategy in ScheduleParser._strategies(category):
            table = strategy(soup, category)
            if table is not None:
                logger.debug(f"Located {category} table via {strategy.__name__}")
                return table

        logger.warning(f"Could not find {category} swim hours table")
        return None

    @staticmethod
    def _strategies(
        category: SessionType,
    ) -> list[Callable[[BeautifulSoup, SessionType], Tag | None]]:
        strategies = [
            ScheduleParser._by_exact_heading,
            ScheduleParser._by_fuzzy_heading,
        ]
        if category in PROXIMITY_KEYWORDS:
            strategies.append(ScheduleParser._by_proximity)
        strategies.append(ScheduleParser._by_structure)
        return strategies

    @staticmethod
    def _by_exact_heading(soup: BeautifulSoup, category: SessionType) -> Tag | None:
        phrase = CATEGORY_HEADINGS[category]
        headings = [h for h in soup.find_all(HEADING_TAGS) if _text(h) == phrase]
        return ScheduleParser._first_table_after(headings)

    @staticmethod
    def _by_fuzzy_heading(soup: BeautifulSoup, category: SessionType) -> Tag | None:
        keywords = CATEGORY_KEYWORDS[category]
        headings = [
            h
            for h in soup.find_all(HEADING_TAGS)
            if all(k in _text(h).lower() for k in keywords)
        ]
        return ScheduleParser._first_table_after(headings)

    @staticmethod
    def _by_proximity(soup: BeautifulSoup, category: SessionType) -> Tag | None:
        keyword = PROXIMITY_KEYWORDS[category]
        for table in soup.find_all("table"):
            if keyword in ScheduleParser._surrounding_text(table).lower():
                return table
        return None

    @staticmethod
    def _by_structure(soup: BeautifulSoup, category: SessionType) -> Tag | None:
        for table in soup.find_all("table"):
            has_time_range = False
            has_day_name = False
            for cell in table.find_all(["td", "th"]):
                text = _text(cell)
                if time_range_regex.search(text):
                    has_time_range = True
                if day_prefix_regex.match(text):
                    has_day_name = True
            if has_time_range and has_day_name:
                return table
        return None

    @staticmethod
    def _first_table_after(headings: list[Tag]) -> Tag | None:
        """First table among each heading's following siblings.

        The walk for a heading stops at the next sibling with the heading's
        own tag name.
        """
        for heading in headings:
            for sibling in heading.find_next_siblings():
                if sibling.name == heading.name:
                    break
                if sibling.name == "table":
                    return sibling
                table = sibling.find("table")
                if table is not None:
                    return table
        return None

    @staticmethod
    def _surrounding_text(table: Tag) -> str:
        """Text of a table followed by its preceding and following siblings."""
        parts = [table.get_text(" ")]
        parts.extend(s.get_text(" ") for s in table.find_previous_siblings())
        parts.extend(s.get_text(" ") for s in table.find_next_siblings())
        return " ".join(parts)

    # -- extraction -----------------------------------------------------

    @staticmethod
    def parse_category_hours(
        html: "str | BeautifulSoup", category: SessionType
    ) -> PoolHours:
        """Extract one category's sessions from its located table.

        Args:
            html: Raw HTML or parsed document
            category: "lap" or "recreational"

        Returns:
            Mapping of full weekday name to raw sessions, all of `category`
        """
        soup = ScheduleParser.make_soup(html)
        table = ScheduleParser.locate_table(soup, category)
        if table is None:
            return {}
        return ScheduleParser.extract_hours(table, category)

    @staticmethod
    def parse_all_pool_hours(html: "str | BeautifulSoup") -> PoolHours:
        """Extract sessions of both categories from every schedule table.

        Each table takes its default type from the nearest section title
        before it; individual rows can override that with explicit markers
        such as "lap swim" or "family swim".

        Returns:
            Mapping of full weekday name to raw sessions
        """
        soup = ScheduleParser.make_soup(html)
        elements = soup.find_all(True)
        positions = {id(element): i for i, element in enumerate(elements)}

        sections: list[tuple[int, SessionType]] = []
        for i, element in enumerate(elements):
            if element.name == "table":
                continue
            section_type = ScheduleParser._section_marker(
                ScheduleParser._leading_text(element)
            )
            if section_type is not None:
                sections.append((i, section_type))

        hours: PoolHours = {}
        for table in soup.find_all("table"):
            combined_text = ScheduleParser._surrounding_text(table)
            if not time_range_regex.search(combined_text) or not day_name_regex.search(
                combined_text
            ):
                continue

            default_type = ScheduleParser._section_type(
                soup, table, positions[id(table)], sections
            )
            table_hours = ScheduleParser.extract_hours(
                table, default_type, apply_markers=True
            )
            for day, sessions in table_hours.items():
                hours.setdefault(day, []).extend(sessions)

        return hours

    @staticmethod
    def _leading_text(element: Tag) -> str:
        """Text of an element up to its first nested table."""
        first_table = element.find("table")
        if first_table is None:
            return element.get_text(" ")

        parts = []
        for node in element.descendants:
            if node is first_table:
                break
            if isinstance(node, NavigableString):
                parts.append(str(node))
        return " ".join(parts)

    @staticmethod
    def _section_marker(text: str) -> SessionType | None:
        """Type of the section title occurring last in `text`, if any."""
        text = text.lower()
        found = [
            (text.rfind(marker), section_type)
            for marker, section_type in SECTION_MARKERS
            if marker in text
        ]
        if not found:
            return None
        return max(found)[1]

    @staticmethod
    def _section_type(
        soup: BeautifulSoup,
        table: Tag,
        position: int,
        sections: list[tuple[int, SessionType]],
    ) -> SessionType:
        preceding = [s for s in sections if s[0] < position]
        if preceding:
            return max(preceding, key=lambda s: s[0])[1]

        # No section element before the table: fall back to raw page text
        document_text = soup.get_text().lower()
        snippet = table.get_text().lower()[:50]
        index = document_text.find(snippet) if snippet else -1
        if index > 0:
            before = document_text[:index]
            last_lap = before.rfind("lap swim hours")
            last_rec = before.rfind("rec swim hours")
            if last_lap > last_rec:
                return "lap"
        return "recreational"

    @staticmethod
    def extract_hours(
        table: Tag, session_type: SessionType, apply_markers: bool = False
    ) -> PoolHours:
        """Walk table rows and collect time ranges per weekday.

        A row contributes when it has a cell starting with a weekday name and
        at least one cell containing a time. Rows that don't are skipped.

        Args:
            table: Table element
            session_type: Type given to every session found
            apply_markers: Let "lap swim" / "rec swim" style text in the cell
                or row override `session_type`

        Returns:
            Mapping of full weekday name to raw sessions
        """
        hours: PoolHours = {}

        for row in table.find_all("tr"):
            cells = row.find_all(["td", "th"])
            if len(cells) < 2:
                continue

            day_text = ""
            time_cells = []
            for cell in cells:
                text = _text(cell)
                if day_prefix_regex.match(text):
                    day_text = text
                if time_regex.search(text):
                    time_cells.append(text)

            if not day_text or not time_cells:
                continue

            days = ScheduleParser.resolve_days(day_text)
            row_text = row.get_text(" ").lower()
            for time_text in time_cells:
                cell_type = session_type
                if apply_markers:
                    cell_type = ScheduleParser._marked_type(
                        time_text.lower(), row_text, session_type
                    )
                for day in days:
                    hours.setdefault(day, []).append(
                        RawSession(
                            weekday=day,
                            time_range_text=time_text,
                            session_type=cell_type,
                        )
                    )

        return hours

    @staticmethod
    def _marked_type(
        cell_text: str, row_text: str, default: SessionType
    ) -> SessionType:
        """Apply explicit markers; rec markers are checked last and win."""
        session_type = default
        if any(m in cell_text or m in row_text for m in LAP_MARKERS):
            session_type = "lap"
        if any(m in cell_text or m in row_text for m in REC_MARKERS):
            session_type = "recreational"
        return session_type

    # -- day names ------------------------------------------------------

    @staticmethod
    def resolve_days(day_text: str) -> list[str]:
        """Turn day cell text ("Mon-Fri", "Sat/Sun", "Tuesday") into day names."""
        if "-" in day_text:
            start, end = (part.strip() for part in day_text.split("-")[:2])
            return ScheduleParser.get_day_range(start, end)

        names = [ScheduleParser.normalize_day_name(d) for d in re.split(r"[/-]", day_text)]
        return [name for name in names if name]

    @staticmethod
    def normalize_day_name(day_name: str) -> str | None:
        """Map an abbreviation or full name to the full weekday name."""
        return DAY_ABBREVIATIONS.get(day_name.strip().lower())

    @staticmethod
    def get_day_range(start_day: str, end_day: str) -> list[str]:
        """Expand an inclusive weekday range such as ("Mon", "Fri").

        Ranges do not wrap around the week: when the end comes before the
        start only the two endpoint days are returned. Endpoints that are not
        weekday names are returned as given.
        """
        start_index = ScheduleParser._day_index(start_day)
        end_index = ScheduleParser._day_index(end_day)

        if start_index is None or end_index is None:
            return [start_day.strip(), end_day.strip()]

        if end_index < start_index:
            return [DAY_NAMES[start_index], DAY_NAMES[end_index]]

        return DAY_NAMES[start_index : end_index + 1]

    @staticmethod
    def _day_index(day: str) -> int | None:
        lowered = day.strip().lower()
        for names in (SHORT_DAY_NAMES, DAY_NAMES):
            for i, name in enumerate(names):
                if name.lower() == lowered:
                    return i
        return None

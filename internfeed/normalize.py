import re
from datetime import date, datetime, timedelta
from typing import Optional

from .errors import RowParseError
from .logger import get_logger

logger = get_logger()

LINE_BREAK_RE = re.compile(r"<\s*/?\s*br\s*/?\s*>", re.IGNORECASE)
HTML_TAG_RE = re.compile(r"<[^>]+>")
MARKDOWN_LINK_RE = re.compile(r"\[.*?\]\((.*?)\)")
ANCHOR_HREF_RE = re.compile(r'<a\s[^>]*href="([^"]+)"', re.IGNORECASE)

# Badges the upstream table puts next to company/role names:
# sponsorship, US citizenship, closed posting. U+FE0F is the emoji
# presentation selector that may trail any of them.
BADGE_GLYPHS = ("\U0001F6C2", "\U0001F1FA\U0001F1F8", "\U0001F512", "\uFE0F")

DATE_FORMATS = ("%b %d %Y", "%B %d %Y")

# Postings are never dated further ahead than this
MAX_FUTURE_DAYS = 30


def clean_text(text: Optional[str]) -> str:
    if text is None:
        return ""
    text = LINE_BREAK_RE.sub(" ", text)
    text = HTML_TAG_RE.sub("", text)
    text = text.replace("**", "")
    for glyph in BADGE_GLYPHS:
        text = text.replace(glyph, "")
    return text.strip()


def extract_link(cell: Optional[str]) -> str:
    """Pull the application URL out of a Link cell.

    Tries an HTML anchor's href, then a markdown link target, then gives up
    and returns the stripped cell text as-is. The href is returned exactly
    as written; entities in it are not decoded.
    """
    if not cell:
        return ""
    match = ANCHOR_HREF_RE.search(cell)
    if match:
        return match.group(1)
    match = MARKDOWN_LINK_RE.search(cell)
    if match:
        return match.group(1)
    return cell.strip()


def parse_month_day(text: str, year: int) -> date:
    """
    Parse a day-month string such as "Jan 5" or "October 07" in a given year.

    Raises:
        RowParseError: If the text matches none of DATE_FORMATS, or names a
            day that does not exist in that year (Feb 29 outside leap years)
    """
    candidate = f"{' '.join(text.split())} {year}"
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    raise RowParseError(f"Unrecognized date {text!r} for year {year}", line=text)


def infer_posting_date(text: str, today: Optional[date] = None) -> date:
    """
    Resolve a year-less posting date against today.

    The current year is tried first. A result more than MAX_FUTURE_DAYS
    ahead of today means the posting is from last year (a December row read
    in January), so the previous year is tried next. When neither year
    yields a plausible date the posting is dated today.

    Args:
        text: Cleaned Date cell, e.g. "Dec 28"
        today: Reference date (default: date.today())

    Returns:
        The inferred posting date; never None
    """
    today = today or date.today()
    latest = today + timedelta(days=MAX_FUTURE_DAYS)

    for year in (today.year, today.year - 1):
        try:
            parsed = parse_month_day(text, year)
        except RowParseError:
            continue
        if parsed <= latest:
            return parsed

    logger.warning("Could not parse posting date, using today", value=text, today=today)
    logger.record_date_fallback()
    return today

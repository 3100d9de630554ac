"""
Draw records and the record extractor.

Turns one raw tabular row (column label -> cell value) into a canonical
DrawRecord. Sources label their columns inconsistently, so extraction runs
an ordered list of detectors per field: well-known labels first, then a
scan by shape. Each detector returns Found(value) or NOT_FOUND.

FC3D result pages carry no usable column labels; their rows are read by
position relative to a marked cell (see extract_marked_row).
"""
import logging
import numbers
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from .games import GameProfile

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,，\s]+")

DATE_LABELS = ("开奖日期", "日期", "期号", "date", "period")

PRIMARY_LABELS = {
    "SSQ": ("红球", "红球号码"),
    "DLT": ("前区号码", "前区"),
}

# One tuple of accepted labels per secondary slot
SECONDARY_LABELS = {
    "SSQ": (("蓝球", "蓝球号码"),),
    "DLT": (("后区号码1",), ("后区号码2",)),
}

# One tuple of accepted labels per digit position
POSITION_LABELS = {
    "FC3D": (("百位", "hundreds"), ("十位", "tens"), ("个位", "ones")),
}

# Tokens that rule a column out of the shape scan
DATE_TOKENS = ("期号", "日期", "date", "period")
PRIMARY_TOKENS = ("红球", "前区", "red", "front")
SECONDARY_TOKENS = ("蓝球", "后区", "blue", "back")

# Persisted dataset layout
DATASET_COLUMNS = {
    "SSQ": ("期号", "红球号码", "蓝球号码"),
    "DLT": ("期号", "前区号码", "后区号码1", "后区号码2"),
    "FC3D": ("期号", "百位", "十位", "个位"),
}

# Digit cells relative to the marked period cell of an FC3D row
MARKED_DIGIT_OFFSETS = (1, 2, 3)


@dataclass(frozen=True)
class DrawRecord:
    date: str
    primary: Tuple[int, ...]
    secondary: Tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "primary": list(self.primary),
            "secondary": list(self.secondary),
        }


@dataclass(frozen=True)
class Found:
    value: Any


class NotFound:
    """Detector result meaning 'this detector could not locate the field'."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOT_FOUND"


NOT_FOUND = NotFound()

Detector = Callable[[Mapping[str, Any], GameProfile], Any]


# ---------------------------------------------------------------------------
# Cell parsing
# ---------------------------------------------------------------------------

def parse_numbers(value) -> Optional[list]:
    """
    Parse a cell into a list of ints.

    Lists may be separated by commas, full-width commas or whitespace.
    Returns None for empty cells or if any token is not an integer
    (this includes NaN and non-integral floats).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return [int(value)]
    if isinstance(value, float):
        if not value.is_integer():
            return None
        return [int(value)]

    text = str(value).strip()
    if not text:
        return None
    result = []
    for token in _SEPARATORS.split(text):
        if not token:
            continue
        try:
            result.append(int(token))
        except ValueError:
            return None
    return result or None


def parse_scalar(value) -> Optional[int]:
    """Parse a cell that must hold exactly one integer."""
    parsed = parse_numbers(value)
    if parsed is None or len(parsed) != 1:
        return None
    return parsed[0]


def _has_token(label, tokens) -> bool:
    text = str(label).lower()
    return any(token in text for token in tokens)


def _in_range(values, bounds) -> bool:
    lo, hi = bounds
    return all(lo <= v <= hi for v in values)


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------

def date_by_label(row, profile):
    for label in DATE_LABELS:
        value = row.get(label)
        if value is None:
            continue
        text = str(value).strip()
        if text and text.lower() != "nan":
            return Found(text)
    return NOT_FOUND


def primary_by_label(row, profile):
    if profile.is_positional:
        slots = POSITION_LABELS.get(profile.game_id, ())
        digits = []
        for labels in slots:
            label = next((l for l in labels if l in row), None)
            if label is None:
                return NOT_FOUND
            digits.append(parse_scalar(row[label]))
        if not digits:
            return NOT_FOUND
        # A present-but-broken digit still counts as found; validation drops the row
        return Found([] if None in digits else digits)

    for label in PRIMARY_LABELS.get(profile.game_id, ()):
        if label in row:
            return Found(parse_numbers(row[label]) or [])
    return NOT_FOUND


def primary_by_shape(row, profile):
    if profile.is_positional:
        return NOT_FOUND
    skip = DATE_TOKENS + SECONDARY_TOKENS
    for label, value in row.items():
        if _has_token(label, skip):
            continue
        parsed = parse_numbers(value)
        if (
            parsed
            and len(parsed) == profile.primary_count
            and _in_range(parsed, profile.primary_range)
        ):
            return Found(parsed)
    return NOT_FOUND


def secondary_by_label(row, profile):
    slots = SECONDARY_LABELS.get(profile.game_id, ())
    if not slots:
        return NOT_FOUND
    values = []
    for labels in slots:
        label = next((l for l in labels if l in row), None)
        if label is None:
            return NOT_FOUND
        values.append(parse_scalar(row[label]))
    return Found([] if None in values else values)


def secondary_by_shape(row, profile):
    if profile.secondary_count != 1:
        return NOT_FOUND
    skip = DATE_TOKENS + PRIMARY_TOKENS
    primary_labels = PRIMARY_LABELS.get(profile.game_id, ())
    for label, value in row.items():
        if label in primary_labels or _has_token(label, skip):
            continue
        number = parse_scalar(value)
        if number is not None and _in_range([number], profile.secondary_range):
            return Found([number])
    return NOT_FOUND


DATE_DETECTORS = (date_by_label,)
PRIMARY_DETECTORS = (primary_by_label, primary_by_shape)
SECONDARY_DETECTORS = (secondary_by_label, secondary_by_shape)


def detect(detectors: Sequence[Detector], row, profile):
    """Run detectors in order and return the first Found result."""
    for detector in detectors:
        result = detector(row, profile)
        if isinstance(result, Found):
            return result
    return NOT_FOUND


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def extract_record(row: Mapping[str, Any], profile: GameProfile) -> Optional[DrawRecord]:
    """
    Build a DrawRecord from a labelled row, or return None.

    A row is dropped (never coerced) when any field is missing, any number
    is not an integer, cardinalities differ from the profile or a number is
    out of range.
    """
    date = detect(DATE_DETECTORS, row, profile)
    primary = detect(PRIMARY_DETECTORS, row, profile)
    if date is NOT_FOUND or primary is NOT_FOUND:
        logger.debug("Dropping row without date or primary numbers: %r", row)
        return None

    secondary = ()
    if profile.secondary_count:
        found = detect(SECONDARY_DETECTORS, row, profile)
        if found is NOT_FOUND:
            logger.debug("Dropping row without secondary numbers: %r", row)
            return None
        secondary = tuple(found.value)

    record = DrawRecord(date=date.value, primary=tuple(primary.value), secondary=secondary)
    if not profile.is_valid(record):
        logger.debug("Dropping invalid %s row: %r", profile.game_id, row)
        return None
    return record


def _classes(cell) -> list:
    classes = cell.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def extract_marked_row(cells: Sequence, profile: GameProfile, marker: str) -> Optional[DrawRecord]:
    """
    Read a positional row (FC3D) from HTML cells.

    The first cell whose class list contains `marker` holds the period; the
    digits sit at MARKED_DIGIT_OFFSETS after it. Cells only need `.get()`
    and `.get_text()`, as BeautifulSoup tags provide.
    """
    start = next((i for i, cell in enumerate(cells) if marker in _classes(cell)), None)
    if start is None:
        return None

    offsets = MARKED_DIGIT_OFFSETS[: profile.primary_count]
    if start + max(offsets) >= len(cells):
        return None

    digits = []
    for offset in offsets:
        digit = parse_scalar(cells[start + offset].get_text(strip=True))
        if digit is None:
            return None
        digits.append(digit)

    record = DrawRecord(date=cells[start].get_text(strip=True), primary=tuple(digits))
    return record if profile.is_valid(record) else None


def record_to_row(record: DrawRecord, profile: GameProfile) -> dict:
    """Render a record using the persisted column layout of its game."""
    columns = DATASET_COLUMNS[profile.game_id]
    if profile.is_positional:
        values = [record.date, *record.primary]
    else:
        values = [record.date, ", ".join(str(n) for n in record.primary), *record.secondary]
    return dict(zip(columns, values))

"""
Lottery results scraper.

Materialises one dataset per game per acquisition day:

1. Evict any older dataset file of the same game (prefix match).
2. If today's file already exists, do nothing.
3. Otherwise fetch the results page, extract rows, persist them as CSV.

Failures never escape LotteryScraper.scrape(); they come back as a
ScrapeResult with success=False and a message naming what went wrong.
"""
import contextlib
import logging
import os
from dataclasses import asdict, dataclass
from datetime import date
from typing import Dict, List, Optional

import pandas as pd
import requests
from bs4 import BeautifulSoup

from . import config
from .errors import (
    DatasetNotFoundError,
    EmptyPayloadError,
    LotteryError,
    NoValidDataError,
    TransportError,
    WriteError,
)
from .games import PROFILES, GameProfile, profile_for
from .records import (
    DATASET_COLUMNS,
    PRIMARY_LABELS,
    SECONDARY_LABELS,
    DrawRecord,
    extract_marked_row,
    extract_record,
    record_to_row,
)

logger = logging.getLogger(__name__)


@dataclass
class ScrapeResult:
    success: bool
    message: str
    file_name: Optional[str] = None
    is_new_file: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Document parsing
# ---------------------------------------------------------------------------

def _labelled_row(texts: List[str], profile: GameProfile) -> dict:
    """
    Label the cells of a `tr.t_tr1` results row.

    Layout: period, primary numbers, then secondary numbers.
    """
    primary_end = 1 + profile.primary_count
    row = {"期号": texts[0] if texts else ""}
    row[PRIMARY_LABELS[profile.game_id][0]] = ",".join(texts[1:primary_end])
    for i, labels in enumerate(SECONDARY_LABELS.get(profile.game_id, ())):
        idx = primary_end + i
        row[labels[0]] = texts[idx] if idx < len(texts) else ""
    return row


def _chronological(records: List[DrawRecord]) -> List[DrawRecord]:
    """Drop repeated periods (first one wins) and order oldest first."""
    unique: Dict[str, DrawRecord] = {}
    for record in records:
        unique.setdefault(record.date, record)
    return sorted(unique.values(), key=lambda r: (len(r.date), r.date))


def parse_document(html, profile: GameProfile, marker: str = None) -> List[DrawRecord]:
    """Extract every valid DrawRecord from a results page."""
    soup = BeautifulSoup(html, "lxml")
    records = []
    rows_seen = 0

    if profile.is_positional:
        marker = marker or config.FC3D_ROW_MARKER
        for tr in soup.find_all("tr"):
            cells = tr.find_all("td")
            if not cells:
                continue
            rows_seen += 1
            record = extract_marked_row(cells, profile, marker)
            if record is not None:
                records.append(record)
    else:
        for tr in soup.select("tr.t_tr1"):
            rows_seen += 1
            texts = [td.get_text(strip=True) for td in tr.find_all("td")]
            record = extract_record(_labelled_row(texts, profile), profile)
            if record is not None:
                records.append(record)

    logger.info("Parsed %d/%d %s rows", len(records), rows_seen, profile.game_id)
    return _chronological(records)


# ---------------------------------------------------------------------------
# Scraper
# ---------------------------------------------------------------------------

class LotteryScraper:
    """Fetches results pages and keeps one dataset file per game."""

    def __init__(
        self,
        data_dir: str = None,
        session: requests.Session = None,
        today=None,
        source_urls: Dict[str, str] = None,
        file_prefixes: Dict[str, str] = None,
        history_limit: int = None,
        timeout: float = None,
        fc3d_marker: str = None,
    ):
        self.data_dir = data_dir or config.DATA_DIR
        if session is None:
            session = requests.Session()
            session.headers.update(config.REQUEST_HEADERS)
        self.session = session
        self._today = today or date.today
        self.source_urls = source_urls or dict(config.SOURCE_URLS)
        self.file_prefixes = file_prefixes or dict(config.FILE_PREFIXES)
        self.history_limit = history_limit or config.HISTORY_LIMIT
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.fc3d_marker = fc3d_marker or config.FC3D_ROW_MARKER

        os.makedirs(self.data_dir, exist_ok=True)

    # -- Paths ------------------------------------------------------------

    def dataset_path(self, game_id: str, day: date = None) -> str:
        profile = profile_for(game_id)
        day = day or self._today()
        prefix = self.file_prefixes[profile.game_id]
        return os.path.join(self.data_dir, f"{prefix}{day.isoformat()}.{config.DATASET_EXT}")

    def evict_stale(self, game_id: str, day: date = None) -> List[str]:
        """Delete every dataset of `game_id` other than the one for `day`."""
        profile = profile_for(game_id)
        keep = os.path.basename(self.dataset_path(profile.game_id, day))
        prefix = self.file_prefixes[profile.game_id]
        try:
            names = sorted(os.listdir(self.data_dir))
        except OSError as exc:
            raise WriteError(f"Cannot list data directory {self.data_dir}: {exc}") from exc

        removed = []
        for name in names:
            if not name.startswith(prefix) or name == keep:
                continue
            try:
                os.remove(os.path.join(self.data_dir, name))
            except OSError as exc:
                raise WriteError(f"Failed to remove stale dataset {name}: {exc}") from exc
            removed.append(name)
            logger.info("Removed stale dataset %s", name)
        return removed

    # -- Acquisition ------------------------------------------------------

    def scrape(self, game_id: str) -> ScrapeResult:
        """Idempotently acquire today's dataset for `game_id`."""
        try:
            profile = profile_for(game_id)
            today = self._today().isoformat()
            filename = self.dataset_path(profile.game_id)

            self.evict_stale(profile.game_id)

            if os.path.exists(filename):
                return ScrapeResult(
                    success=True,
                    message=f"{profile.game_id} data file for {today} already exists",
                    file_name=filename,
                    is_new_file=False,
                )

            html = self._fetch(profile)
            records = parse_document(html, profile, self.fc3d_marker)
            if not records:
                raise NoValidDataError(
                    f"No valid {profile.game_id} draws could be extracted from the source"
                )

            self._write(records, profile, filename)
            return ScrapeResult(
                success=True,
                message=(
                    f"Successfully created new {profile.game_id} data file for {today} "
                    f"({len(records)} draws)"
                ),
                file_name=filename,
                is_new_file=True,
            )
        except (LotteryError, OSError) as exc:
            logger.error("Error scraping %s data: %s", game_id, exc)
            return ScrapeResult(
                success=False,
                message=f"Failed to scrape {str(game_id).upper()} data: {exc}",
                is_new_file=False,
                error=type(exc).__name__,
            )

    def scrape_ssq(self) -> ScrapeResult:
        return self.scrape("SSQ")

    def scrape_dlt(self) -> ScrapeResult:
        return self.scrape("DLT")

    def scrape_fc3d(self) -> ScrapeResult:
        return self.scrape("FC3D")

    def scrape_all(self) -> Dict[str, ScrapeResult]:
        return {game_id: self.scrape(game_id) for game_id in PROFILES}

    def _fetch(self, profile: GameProfile) -> bytes:
        url = self.source_urls[profile.game_id]
        logger.info("Fetching %s data from %s (limit=%d)", profile.game_id, url, self.history_limit)
        try:
            resp = self.session.get(url, params={"limit": self.history_limit}, timeout=self.timeout)
            resp.raise_for_status()
        except requests.Timeout as exc:
            raise TransportError(f"Request to {url} timed out") from exc
        except requests.RequestException as exc:
            raise TransportError(f"Could not fetch {url}: {exc}") from exc

        logger.info("Response received. Status: %s", resp.status_code)
        content = resp.content
        if not content or not content.strip():
            raise EmptyPayloadError(f"No data received from {url}")
        return content

    def _write(self, records: List[DrawRecord], profile: GameProfile, filename: str):
        frame = pd.DataFrame(
            [record_to_row(r, profile) for r in records],
            columns=list(DATASET_COLUMNS[profile.game_id]),
        )
        tmp_name = f"{filename}.tmp"
        try:
            frame.to_csv(tmp_name, index=False, encoding="utf-8")
            os.replace(tmp_name, filename)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.remove(tmp_name)
            raise WriteError(f"Could not write {filename}: {exc}") from exc
        logger.info("Saved %d %s draws to %s", len(records), profile.game_id, filename)


# ---------------------------------------------------------------------------
# Reading datasets
# ---------------------------------------------------------------------------

def load_dataset(path: str, game_id: str) -> List[DrawRecord]:
    """
    Load a persisted dataset, re-validating every row.

    A file that exists can still be truncated, so rows are run through the
    extractor again and the shortfall is logged.
    """
    profile = profile_for(game_id)
    if not os.path.exists(path):
        raise DatasetNotFoundError(f"Dataset not found: {path}")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        logger.warning("Dataset %s is empty", path)
        return []

    records = []
    for row in df.to_dict("records"):
        record = extract_record(row, profile)
        if record is not None:
            records.append(record)

    dropped = len(df) - len(records)
    if dropped:
        logger.warning("Dropped %d of %d rows while loading %s", dropped, len(df), path)
    return records


def latest_dataset(game_id: str, data_dir: str = None, file_prefixes: Dict[str, str] = None) -> Optional[str]:
    """Path of the most recent dataset file for `game_id`, if any."""
    profile = profile_for(game_id)
    data_dir = data_dir or config.DATA_DIR
    prefix = (file_prefixes or config.FILE_PREFIXES)[profile.game_id]
    suffix = f".{config.DATASET_EXT}"
    if not os.path.isdir(data_dir):
        return None
    names = [n for n in os.listdir(data_dir) if n.startswith(prefix) and n.endswith(suffix)]
    if not names:
        return None
    return os.path.join(data_dir, max(names))


if __name__ == "__main__":
    config.configure_logging()
    results = LotteryScraper().scrape_all()

    print("\n" + "=" * 50)
    print("LOTTERY DATA COLLECTION SUMMARY")
    print("=" * 50)
    for game, result in results.items():
        status = "OK  " if result.success else "FAIL"
        print(f"[{status}] {game}: {result.message}")
    print("=" * 50)

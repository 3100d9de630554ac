import os
from datetime import date

import pandas as pd
import pytest
import requests

from lotterymaster.cache import ResultCache
from lotterymaster.games import profile_for
from lotterymaster.records import DATASET_COLUMNS, DrawRecord, record_to_row

TODAY = date(2024, 5, 1)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeResponse:
    def __init__(self, content=b"", status_code=200, payload=None, text=""):
        self.content = content
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


def ssq_row_html(period, reds, blue):
    cells = "".join(f"<td>{n:02d}</td>" for n in [*reds, blue])
    return f'<tr class="t_tr1"><td>{period}</td>{cells}</tr>'


def fc3d_row_html(period, digits):
    cells = "".join(f"<td>{d}</td>" for d in digits)
    return f'<tr><td class="t_tr1">{period}</td>{cells}</tr>'


def page(rows):
    return f"<html><body><table>{''.join(rows)}</table></body></html>".encode("utf-8")


@pytest.fixture
def ssq_records():
    """Three SSQ draws, oldest first."""
    return [
        DrawRecord("24001", (1, 2, 3, 4, 5, 6), (7,)),
        DrawRecord("24002", (7, 8, 9, 10, 11, 12), (8,)),
        DrawRecord("24003", (1, 13, 14, 15, 16, 17), (7,)),
    ]


@pytest.fixture
def dlt_records():
    return [
        DrawRecord("24001", (1, 5, 9, 20, 35), (2, 11)),
        DrawRecord("24002", (3, 5, 10, 22, 30), (2, 12)),
    ]


@pytest.fixture
def fc3d_records():
    return [
        DrawRecord("2024101", (1, 2, 3)),
        DrawRecord("2024102", (4, 2, 9)),
        DrawRecord("2024103", (0, 5, 3)),
    ]


@pytest.fixture
def write_dataset(tmp_path):
    """Persist records in the dataset layout and return the file path."""

    def _write(records, game_id, name=None):
        profile = profile_for(game_id)
        path = os.path.join(tmp_path, name or f"{game_id.lower()}_data_{TODAY.isoformat()}.csv")
        frame = pd.DataFrame(
            [record_to_row(r, profile) for r in records],
            columns=list(DATASET_COLUMNS[profile.game_id]),
        )
        frame.to_csv(path, index=False, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResultCache(ttl_seconds=60.0, clock=clock)

import os
import shutil

import pytest
import requests

from conftest import TODAY, FakeResponse, FakeSession, fc3d_row_html, page, ssq_row_html
from lotterymaster.errors import DatasetNotFoundError
from lotterymaster.games import profile_for
from lotterymaster.records import DrawRecord
from lotterymaster.scraper import LotteryScraper, latest_dataset, load_dataset, parse_document

SSQ_PAGE = page([
    ssq_row_html("24003", [1, 13, 14, 15, 16, 17], 7),
    ssq_row_html("24001", [1, 2, 3, 4, 5, 6], 7),
    ssq_row_html("24002", [7, 8, 9, 10, 11, 12], 8),
    ssq_row_html("24002", [7, 8, 9, 10, 11, 12], 8),
    '<tr class="t_tr1"><td>24004</td><td>01</td><td>02</td></tr>',
])


def make_scraper(tmp_path, session):
    return LotteryScraper(data_dir=str(tmp_path), session=session, today=lambda: TODAY)


def test_parse_document_orders_and_dedupes():
    records = parse_document(SSQ_PAGE, profile_for("SSQ"))
    assert [r.date for r in records] == ["24001", "24002", "24003"]
    assert records[0] == DrawRecord("24001", (1, 2, 3, 4, 5, 6), (7,))


def test_parse_document_fc3d_marker():
    html = page([
        fc3d_row_html("2024102", [4, 2, 9]),
        fc3d_row_html("2024101", [1, 2, 3]),
        "<tr><td>header</td><td>x</td></tr>",
    ])
    records = parse_document(html, profile_for("FC3D"))
    assert records == [DrawRecord("2024101", (1, 2, 3)), DrawRecord("2024102", (4, 2, 9))]


def test_scrape_writes_new_dataset(tmp_path):
    session = FakeSession(FakeResponse(SSQ_PAGE))
    result = make_scraper(tmp_path, session).scrape("ssq")

    assert result.success and result.is_new_file
    assert result.file_name == os.path.join(str(tmp_path), "ssq_data_2024-05-01.csv")
    assert session.calls[0]["params"] == {"limit": 100}
    assert [r.date for r in load_dataset(result.file_name, "SSQ")] == ["24001", "24002", "24003"]
    assert not any(name.endswith(".tmp") for name in os.listdir(tmp_path))


def test_scrape_is_idempotent_for_the_day(tmp_path):
    existing = tmp_path / "ssq_data_2024-05-01.csv"
    existing.write_text("期号,红球号码,蓝球号码\n", encoding="utf-8")
    session = FakeSession(exc=AssertionError("must not fetch"))

    result = make_scraper(tmp_path, session).scrape("SSQ")

    assert result.success
    assert result.is_new_file is False
    assert "already exists" in result.message
    assert session.calls == []


def test_second_scrape_reuses_the_new_file(tmp_path):
    session = FakeSession(FakeResponse(SSQ_PAGE))
    scraper = make_scraper(tmp_path, session)

    first = scraper.scrape("SSQ")
    second = scraper.scrape("SSQ")

    assert first.success and first.is_new_file is True
    assert second.success and second.is_new_file is False
    assert second.file_name == first.file_name
    assert len(session.calls) == 1


def test_missing_data_dir_is_a_failure_result(tmp_path):
    data_dir = tmp_path / "data"
    scraper = LotteryScraper(data_dir=str(data_dir), session=FakeSession(FakeResponse(SSQ_PAGE)),
                             today=lambda: TODAY)
    shutil.rmtree(data_dir)

    result = scraper.scrape("SSQ")

    assert result.success is False
    assert result.is_new_file is False
    assert result.error == "WriteError"
    assert result.message.startswith("Failed to scrape SSQ data")


def test_plain_os_error_is_a_failure_result(tmp_path, monkeypatch):
    def refuse(*args, **kwargs):
        raise PermissionError("read-only")

    scraper = make_scraper(tmp_path, FakeSession(FakeResponse(SSQ_PAGE)))
    monkeypatch.setattr(scraper, "_fetch", refuse)

    result = scraper.scrape("SSQ")

    assert result.success is False
    assert result.error == "PermissionError"


def test_eviction_only_touches_the_same_game(tmp_path):
    (tmp_path / "ssq_data_2024-04-30.csv").write_text("x", encoding="utf-8")
    (tmp_path / "dlt_data_2024-04-30.csv").write_text("x", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    make_scraper(tmp_path, FakeSession(FakeResponse(SSQ_PAGE))).scrape("SSQ")

    assert sorted(os.listdir(tmp_path)) == [
        "dlt_data_2024-04-30.csv", "notes.txt", "ssq_data_2024-05-01.csv",
    ]


@pytest.mark.parametrize("session, error", [
    (FakeSession(exc=requests.Timeout("slow")), "TransportError"),
    (FakeSession(exc=requests.ConnectionError("down")), "TransportError"),
    (FakeSession(FakeResponse(b"oops", status_code=503)), "TransportError"),
    (FakeSession(FakeResponse(b"   ")), "EmptyPayloadError"),
    (FakeSession(FakeResponse(page(["<tr><td>nothing</td></tr>"]))), "NoValidDataError"),
])
def test_failures_are_reported_not_raised(tmp_path, session, error):
    result = make_scraper(tmp_path, session).scrape("SSQ")

    assert result.success is False
    assert result.is_new_file is False
    assert result.error == error
    assert result.message.startswith("Failed to scrape SSQ data")
    assert not (tmp_path / "ssq_data_2024-05-01.csv").exists()


def test_unknown_game_is_a_failure_result(tmp_path):
    result = make_scraper(tmp_path, FakeSession()).scrape("KENO")
    assert result.success is False
    assert result.error == "UnknownGameError"


def test_scrape_all_covers_every_game(tmp_path):
    results = make_scraper(tmp_path, FakeSession(FakeResponse(SSQ_PAGE))).scrape_all()
    assert set(results) == {"SSQ", "DLT", "FC3D"}
    assert results["SSQ"].success


def test_load_dataset_drops_malformed_rows(tmp_path):
    path = tmp_path / "ssq_data_2024-05-01.csv"
    path.write_text(
        "期号,红球号码,蓝球号码\n"
        '24001,"1, 2, 3, 4, 5, 6",7\n'
        '24002,"1, 2, 3",7\n'
        '24003,"1, 2, 3, 4, 5, 6",abc\n'
        '24004,"8, 9, 10, 11, 12, 13",16\n',
        encoding="utf-8",
    )
    records = load_dataset(str(path), "SSQ")
    assert [r.date for r in records] == ["24001", "24004"]


def test_load_dataset_missing_file(tmp_path):
    with pytest.raises(DatasetNotFoundError):
        load_dataset(str(tmp_path / "nope.csv"), "SSQ")


def test_dataset_round_trip_fc3d(tmp_path, fc3d_records, write_dataset):
    path = write_dataset(fc3d_records, "FC3D")
    assert load_dataset(path, "FC3D") == fc3d_records


def test_latest_dataset(tmp_path):
    assert latest_dataset("SSQ", str(tmp_path)) is None
    (tmp_path / "ssq_data_2024-04-30.csv").write_text("x", encoding="utf-8")
    (tmp_path / "ssq_data_2024-05-01.csv").write_text("x", encoding="utf-8")
    assert latest_dataset("SSQ", str(tmp_path)).endswith("ssq_data_2024-05-01.csv")

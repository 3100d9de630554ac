import pytest

from lotterymaster import analysis
from lotterymaster.analysis import StatisticsService, TrendPoint, frequency_distribution, number_statistics
from lotterymaster.errors import UnknownZoneError
from lotterymaster.records import DrawRecord


def stat_for(result, number):
    return next(s for s in result["number_stats"] if s.number == number)


def test_one_row_per_number_in_range(ssq_records):
    result = number_statistics(ssq_records, "SSQ", "red", 3)
    assert [s.number for s in result["number_stats"]] == list(range(1, 34))
    assert sum(s.frequency for s in result["number_stats"]) == 3 * 6
    assert len(result["dataframe"]) == 33

    blue = number_statistics(ssq_records, "SSQ", "blue", 3)
    assert [s.number for s in blue["number_stats"]] == list(range(1, 17))


def test_three_draw_scenario(ssq_records):
    result = number_statistics(ssq_records, "SSQ", "primary", 3)
    one = stat_for(result, 1)
    assert (one.frequency, one.last_gap, one.current_gap) == (2, 2, 0)
    assert one.max_gap == 2
    assert one.average_gap == 2.0
    assert one.probability == 0.67


def test_gaps_for_single_and_never_seen_numbers(ssq_records):
    result = number_statistics(ssq_records, "SSQ", "primary", 3)
    two = stat_for(result, 2)
    assert (two.frequency, two.current_gap, two.last_gap, two.max_gap, two.average_gap) == (1, 2, 0, 0, 0)

    never = stat_for(result, 33)
    assert never.frequency == 0
    assert never.current_gap == 3
    assert never.probability == 0


def test_gap_walk_over_longer_history():
    records = [DrawRecord(str(i), (0, 0, d)) for i, d in enumerate([5, 1, 5, 2, 3, 5])]
    result = number_statistics(records, "FC3D", "ones", 6)
    five = stat_for(result, 5)
    assert five.frequency == 3
    assert five.last_gap == 3
    assert five.max_gap == 3
    assert five.average_gap == 2.5
    assert five.current_gap == 0
    assert stat_for(result, 1).current_gap == 4


def test_window_uses_most_recent_records(ssq_records):
    result = number_statistics(ssq_records, "SSQ", "primary", 2)
    assert result["period_count"] == 2
    one = stat_for(result, 1)
    assert one.frequency == 1
    assert one.current_gap == 0
    assert [p.value for p in result["trend"]] == [7, 1]


def test_window_larger_than_history(ssq_records):
    assert number_statistics(ssq_records, "SSQ", "primary", 500)["period_count"] == 3


def test_primary_trend_uses_first_number(ssq_records):
    result = number_statistics(ssq_records, "SSQ", "primary", 3)
    assert result["trend"] == [TrendPoint(1, 1), TrendPoint(2, 7), TrendPoint(3, 1)]


def test_secondary_trend_uses_all_numbers(dlt_records):
    result = number_statistics(dlt_records, "DLT", "back", 2)
    assert [(p.position, p.value) for p in result["trend"]] == [(1, 2), (1, 11), (2, 2), (2, 12)]
    assert stat_for(result, 2).frequency == 2
    assert len(result["number_stats"]) == 12


def test_positional_zone(fc3d_records):
    result = number_statistics(fc3d_records, "FC3D", "tens", 3)
    assert [s.number for s in result["number_stats"]] == list(range(0, 10))
    assert stat_for(result, 2).frequency == 2
    assert [p.value for p in result["trend"]] == [2, 2, 5]


def test_zero_window(ssq_records):
    result = number_statistics(ssq_records, "SSQ", "primary", 0)
    assert result["period_count"] == 0
    assert result["trend"] == []
    assert all(s.frequency == 0 and s.probability == 0 for s in result["number_stats"])


def test_negative_window_raises(ssq_records):
    with pytest.raises(ValueError):
        number_statistics(ssq_records, "SSQ", "primary", -1)


def test_unknown_zone_raises(fc3d_records):
    with pytest.raises(UnknownZoneError):
        number_statistics(fc3d_records, "FC3D", "red", 3)


def test_frequency_distribution(ssq_records):
    result = frequency_distribution(ssq_records, "SSQ", "blue", 3)
    assert result["frequency"][7] == 2
    assert result["frequency"][8] == 1
    assert sum(result["frequency"].values()) == 3
    assert result["uniformity"]["chi2_pvalue"] <= 1.0
    assert frequency_distribution(ssq_records, "SSQ", "blue", 0)["uniformity"] is None


def test_service_caches_per_zone_and_window(ssq_records, write_dataset, cache, monkeypatch):
    path = write_dataset(ssq_records, "SSQ")
    loads = []
    real_load = analysis.load_dataset

    def counting_load(*args):
        loads.append(args)
        return real_load(*args)

    monkeypatch.setattr(analysis, "load_dataset", counting_load)
    service = StatisticsService(cache=cache, period_count=3)

    first = service.number_trend(path, "ssq", zone="red")
    again = service.number_trend(path, "SSQ", zone="primary")
    assert again is first
    assert len(loads) == 1

    service.number_trend(path, "SSQ", zone="blue")
    service.number_trend(path, "SSQ", period_count=2, zone="red")
    assert len(loads) == 3


def test_service_trend_payload(ssq_records, write_dataset, cache):
    path = write_dataset(ssq_records, "SSQ")
    service = StatisticsService(cache=cache)

    result = service.number_trend(path, "SSQ", 3, "blue")
    dataset = result["chart_data"]["datasets"][0]
    assert dataset["label"] == "蓝球走势"
    assert dataset["border_color"] == "#1890ff"
    assert dataset["data"] == [{"position": 1, "value": 7}, {"position": 2, "value": 8},
                               {"position": 3, "value": 7}]
    assert len(result["statistics"]["number_stats"]) == 16

    bare = service.number_trend(path, "SSQ", 3, "blue", include_chart_data=False)
    assert "chart_data" not in bare
    assert bare["statistics"] == result["statistics"]


def test_service_frequency_chart(fc3d_records, write_dataset, cache):
    path = write_dataset(fc3d_records, "FC3D")
    result = StatisticsService(cache=cache).frequency_chart(path, "FC3D", 3, "ones")
    data = result["chart_data"]["datasets"][0]["data"]
    assert {"position": 3, "value": 2} in data
    assert len(data) == 10

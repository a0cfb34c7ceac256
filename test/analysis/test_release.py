import pytest

from trackgate import config
from trackgate.analysis import (
    InvalidBatch,
    InvalidDuration,
    ReleaseConfig,
    ReleaseType,
    classify,
    classify_batch,
    classify_release,
    parse_duration,
)


@pytest.mark.parametrize(
    "tracks,minutes,expected",
    [
        (1, 2.5, ReleaseType.single),
        (2, 5.0, ReleaseType.ep),
        (5, 20.0, ReleaseType.ep),
        (3, 31.0, ReleaseType.album),
        (10, 5.0, ReleaseType.album),
        (1, 0.0, ReleaseType.single),
        (3, 29.99, ReleaseType.ep),
        (4, 29.99, ReleaseType.ep),
        (6, 29.99, ReleaseType.ep),
        (6, 30.0, ReleaseType.album),
        (7, 0.0, ReleaseType.album),
        (1, 45.0, ReleaseType.album),
    ],
)
def test_classify(tracks, minutes, expected):
    assert classify(tracks, minutes) is expected
    assert classify_release(tracks, minutes) is expected


@pytest.mark.parametrize("tracks,minutes", [(0, 10.0), (-1, 10.0), (2, -1.0)])
def test_classify_rejects_impossible_batches(tracks, minutes):
    with pytest.raises(ValueError):
        classify(tracks, minutes)


def test_release_type_str():
    assert str(ReleaseType.ep) == "EP"
    assert [t.value for t in ReleaseType] == ["Single", "EP", "Album"]


@pytest.mark.parametrize(
    "text,seconds",
    [("3:05", 185.0), ("0:30", 30.0), ("60:00", 3600.0), (" 4:00 ", 240.0)],
)
def test_parse_duration(text, seconds):
    assert parse_duration(text) == seconds


@pytest.mark.parametrize("text", ["3:5", "3:60", "185", "", "a:bc", "1:02:03"])
def test_parse_duration_rejects_bad_format(text):
    with pytest.raises(InvalidDuration, match="mm:ss"):
        parse_duration(text)


class TestClassifyBatch:
    def test_single(self):
        assert classify_batch([185.0]) is ReleaseType.single

    def test_sums_durations(self):
        # Three tracks of ten minutes are an album by duration.
        assert classify_batch([600.0, 600.0, 600.0]) is ReleaseType.album

    def test_unknown_durations_count_as_zero(self):
        assert classify_batch([None, None, 200.0]) is ReleaseType.ep

    def test_empty_batch(self):
        with pytest.raises(InvalidBatch):
            classify_batch([])

    def test_too_many_tracks(self):
        with pytest.raises(InvalidBatch, match="maximum is 3"):
            classify_batch([60.0] * 4, ReleaseConfig(max_tracks=3))

    @pytest.mark.parametrize("seconds", [29.0, 3601.0])
    def test_duration_out_of_bounds(self, seconds):
        with pytest.raises(InvalidDuration):
            classify_batch([seconds])

    def test_bounds_are_inclusive(self):
        assert classify_batch([30.0, 3600.0]) is ReleaseType.album


class TestReleaseConfig:
    def test_defaults(self):
        assert ReleaseConfig() == ReleaseConfig(20, 30.0, 3600.0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_tracks": 0},
            {"min_track_duration": -1.0},
            {"min_track_duration": 100.0, "max_track_duration": 50.0},
        ],
    )
    def test_rejects_invalid_limits(self, kwargs):
        with pytest.raises(ValueError):
            ReleaseConfig(**kwargs)

    def test_from_view(self):
        config["release"]["max_tracks"] = 12
        release = ReleaseConfig.from_view(config["release"])
        assert release == ReleaseConfig(12, 30.0, 3600.0)

import multiprocessing
import time

import pytest
from mutagen.id3 import TYER

from trackgate.analysis import DecodeFailed, DecodeTimeout, ErrorKind
from trackgate.analysis import decode as decode_module
from trackgate.analysis.decode import (
    MAX_TEXT_LENGTH,
    DecodedInfo,
    decode,
    run_decoder,
)
from trackgate.test.helper import build_mp3, mpeg_stream, xing_stream

# An invalid bitrate index, so no frame can ever be parsed.
BROKEN_STREAM = b"\xff\xfb\xf0\x00" + b"\x00" * 2048


class TestStreamInfo:
    def test_plain_frames(self):
        data = mpeg_stream()
        info = decode(data)
        assert info.bitrate_bps == 128000
        assert info.sample_rate == 44100
        assert info.channels == 2
        assert info.length_seconds > 0
        assert info.filesize == len(data)
        # Frames without a Xing header say nothing about the mode.
        assert info.bitrate_mode == "unknown"

    def test_mpeg2_mono(self):
        info = decode(mpeg_stream(bitrate=96, sample_rate=22050, channels=1))
        assert info.bitrate_bps == 96000
        assert info.sample_rate == 22050
        assert info.channels == 1

    def test_xing_header_marks_vbr(self):
        info = decode(xing_stream())
        assert info.bitrate_mode == "vbr"
        assert round(info.bitrate_bps / 1000) == 128

    def test_no_tags(self):
        info = decode(mpeg_stream())
        assert info.id3v2 == {}
        assert info.id3v1 == {}
        assert not info.has_picture
        assert info.user_text == {}


class TestTags:
    def test_id3v2_fields(self):
        info = decode(
            build_mp3(
                tags={
                    "title": "Night Drive",
                    "artist": "The Examples",
                    "album": "Roads",
                    "year": "2024",
                    "genre": "Rock",
                    "comment": "Mastered twice",
                }
            )
        )
        assert info.id3v2 == {
            "title": "Night Drive",
            "artist": "The Examples",
            "album": "Roads",
            "year": "2024",
            "genre": "Rock",
            "comment": "Mastered twice",
        }
        assert info.id3v1 == {}

    def test_artwork_and_user_text(self):
        info = decode(
            build_mp3(artwork=True, user_text={"INSTRUMENTAL": "Yes"})
        )
        assert info.has_picture
        assert info.user_text == {"instrumental": "Yes"}

    def test_id3v1_fields(self):
        info = decode(
            build_mp3(
                v1={
                    "title": "Old Song",
                    "artist": "Old Band",
                    "year": "1987",
                    "comment": "from tape",
                    "genre": 17,
                }
            )
        )
        assert info.id3v2 == {}
        assert info.id3v1 == {
            "title": "Old Song",
            "artist": "Old Band",
            "year": "1987",
            "genre": "Rock",
            "comment": "from tape",
        }

    def test_both_tags_are_kept_apart(self):
        info = decode(
            build_mp3(
                tags={"title": "New Title"},
                v1={"title": "Old Title", "album": "Old Album"},
            )
        )
        assert info.id3v2 == {"title": "New Title"}
        assert info.id3v1 == {"title": "Old Title", "album": "Old Album"}

    @pytest.mark.parametrize("year", ["Unknown", "circa 1999", "abcd"])
    def test_v23_year_is_kept_as_written(self, year):
        info = decode(
            build_mp3(
                tags={"title": "Night Drive"},
                extra_frames=[TYER(encoding=0, text=[year])],
                v2_version=3,
            )
        )
        assert info.id3v2 == {"title": "Night Drive", "year": year}

    def test_v23_numeric_year(self):
        info = decode(
            build_mp3(
                extra_frames=[TYER(encoding=0, text=["1999"])], v2_version=3
            )
        )
        assert info.id3v2 == {"year": "1999"}

    def test_id3v1_year_is_kept_as_written(self):
        info = decode(build_mp3(v1={"title": "Old Song", "year": "abcd"}))
        assert info.id3v1 == {"title": "Old Song", "year": "abcd"}

    def test_empty_id3v1_year(self):
        info = decode(build_mp3(v1={"title": "Old Song"}))
        assert "year" not in info.id3v1

    def test_long_text_is_truncated(self):
        info = decode(build_mp3(tags={"comment": "x" * (MAX_TEXT_LENGTH * 2)}))
        assert len(info.id3v2["comment"]) == MAX_TEXT_LENGTH


class TestFailures:
    def test_no_mpeg_frames(self):
        with pytest.raises(DecodeFailed, match="while finding MPEG frames"):
            decode(BROKEN_STREAM)

    def test_tag_without_audio(self):
        with pytest.raises(DecodeFailed) as excinfo:
            decode(build_mp3(tags={"title": "Silence"}, stream=b""))
        assert excinfo.value.kind is ErrorKind.decode_failed

    def test_frame_copy_error_is_wrapped(self, monkeypatch):
        def broken(tags):
            raise RuntimeError("bad frame")

        monkeypatch.setattr(decode_module, "_user_text", broken)
        with pytest.raises(DecodeFailed) as excinfo:
            decode(build_mp3(tags={"title": "Night Drive"}))
        message = str(excinfo.value)
        assert message.endswith("while copying ID3v2 frames")
        assert "RuntimeError" in message
        assert excinfo.value.tb


def slow_decode(data):
    time.sleep(0.5)
    return DecodedInfo()


def stuck_decode(data):
    time.sleep(5)
    return DecodedInfo()


class TestRunDecoder:
    @pytest.mark.parametrize("isolation", ["process", "thread", "inline"])
    def test_same_result_in_every_boundary(self, isolation):
        data = build_mp3(tags={"title": "Night Drive"}, artwork=True)
        assert run_decoder(data, isolation, timeout=30.0) == decode(data)

    @pytest.mark.parametrize("isolation", ["process", "thread", "inline"])
    def test_failure_crosses_boundary(self, isolation):
        with pytest.raises(DecodeFailed) as excinfo:
            run_decoder(BROKEN_STREAM, isolation, timeout=30.0)
        message = str(excinfo.value)
        assert message.endswith("while finding MPEG frames")
        assert message.count(" while ") == 1

    def test_thread_timeout(self, monkeypatch):
        monkeypatch.setattr(decode_module, "decode", slow_decode)
        with pytest.raises(DecodeTimeout) as excinfo:
            run_decoder(mpeg_stream(), "thread", timeout=0.05)
        assert excinfo.value.kind is ErrorKind.timeout
        assert "no result after 0.05 seconds" in str(excinfo.value)

    def test_inline_has_no_timeout(self, monkeypatch):
        monkeypatch.setattr(decode_module, "decode", slow_decode)
        info = run_decoder(mpeg_stream(), "inline", timeout=0.05)
        assert info == DecodedInfo()

    @pytest.mark.skipif(
        "fork" not in multiprocessing.get_all_start_methods(),
        reason="needs the fork start method",
    )
    @pytest.mark.filterwarnings("ignore::DeprecationWarning")
    def test_process_timeout_kills_the_child(self, monkeypatch):
        # Forked children see the patched decoder; spawned ones would not.
        fork_context = multiprocessing.get_context("fork")
        monkeypatch.setattr(
            decode_module.multiprocessing,
            "get_context",
            lambda method=None: fork_context,
        )
        monkeypatch.setattr(decode_module, "decode", stuck_decode)

        start = time.monotonic()
        with pytest.raises(DecodeTimeout) as excinfo:
            run_decoder(mpeg_stream(), "process", timeout=0.3)
        elapsed = time.monotonic() - start

        assert excinfo.value.kind is ErrorKind.timeout
        assert "no result after 0.3 seconds" in str(excinfo.value)
        assert elapsed < 3
        assert not [
            p
            for p in multiprocessing.active_children()
            if p.name == "trackgate-decode"
        ]

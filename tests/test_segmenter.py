"""
切分测试：最长匹配、分区性质、直通模式
"""

import random
import time

import pytest

from azuki.engine import Lexicon, ReadingSegmenter

KANA = "あいうえおかきくけこさしすせそたちつてとなにぬねのはひふへほまみむめもやゆよらりるれろわをんきょずっ"


def assert_partition(reading, segments):
    assert ''.join(s.reading for s in segments) == reading
    assert sum(s.length for s in segments) == len(reading)
    pos = 0
    for seg in segments:
        assert seg.start == pos
        assert seg.length == len(seg.reading) > 0
        assert seg.reading == reading[seg.start:seg.end]
        assert seg.candidates
        pos = seg.end


class TestLongestMatch:
    """最长匹配"""

    def test_kyou_wa(self, lexicon):
        segments = ReadingSegmenter(lexicon).segment("きょうは")
        assert [s.reading for s in segments] == ["きょう", "は"]
        assert segments[0].candidates == ["今日", "京", "教", "きょう"]
        assert segments[1].candidates == ["は"]

    def test_prefers_longer_entry(self, lexicon):
        segments = ReadingSegmenter(lexicon).segment("にほんごです")
        assert segments[0].reading == "にほんご"
        assert segments[0].candidates == ["日本語", "にほんご"]
        assert [s.reading for s in segments[1:]] == ["で", "す"]

    def test_unmatched_chars_are_single_spans(self, lexicon):
        segments = ReadingSegmenter(lexicon).segment("あいう")
        assert [s.reading for s in segments] == ["あ", "い", "う"]
        assert [s.candidates for s in segments] == [["あ"], ["い"], ["う"]]

    def test_match_inside_reading(self, lexicon):
        segments = ReadingSegmenter(lexicon).segment("わたしはいい")
        assert [s.reading for s in segments] == ["わたし", "は", "いい"]
        assert [s.start for s in segments] == [0, 3, 4]

    def test_inflected_entries_not_used(self, lexicon):
        # "かく" 只有 okuri-ari 词条，切分时不查
        segments = ReadingSegmenter(lexicon).segment("かく")
        assert [s.reading for s in segments] == ["か", "く"]


class TestPartition:
    """分区性质"""

    @pytest.mark.parametrize("reading", [
        "きょうは", "わたしはにほんじん", "あずきかんじ", "いいいいい", "にほんごのかんじ", "ー",
    ])
    def test_fixed_readings(self, lexicon, reading):
        assert_partition(reading, ReadingSegmenter(lexicon).segment(reading))

    def test_random_readings(self, lexicon):
        rng = random.Random(20240101)
        segmenter = ReadingSegmenter(lexicon)
        for _ in range(200):
            reading = ''.join(rng.choice(KANA) for _ in range(rng.randint(1, 12)))
            assert_partition(reading, segmenter.segment(reading))


class TestEdgeCases:
    """边界情况"""

    def test_empty_input(self, lexicon):
        assert ReadingSegmenter(lexicon).segment("") == []

    def test_no_lexicon_passthrough(self):
        segments = ReadingSegmenter(None).segment("きょうは")
        assert len(segments) == 1
        assert segments[0].reading == "きょうは"
        assert (segments[0].start, segments[0].length) == (0, 4)
        assert segments[0].candidates == ["きょうは"]

    def test_empty_lexicon_passthrough(self):
        segments = ReadingSegmenter(Lexicon.empty()).segment("かく")
        assert [(s.reading, s.candidates) for s in segments] == [("かく", ["かく"])]


class TestLongReadings:
    """长读音"""

    def test_scan_bounded_by_longest_entry(self, lexicon):
        reading = "ぱ" * 20000
        started = time.perf_counter()
        segments = ReadingSegmenter(lexicon).segment(reading)
        elapsed = time.perf_counter() - started

        assert len(segments) == 20000
        assert elapsed < 2.0

    def test_longest_entry_still_matched(self, lexicon):
        reading = "ぱ" * 50 + "にほんご" + "ぱ" * 50
        segments = ReadingSegmenter(lexicon).segment(reading)
        assert_partition(reading, segments)
        assert segments[50].reading == "にほんご"
        assert segments[50].candidates == ["日本語", "にほんご"]

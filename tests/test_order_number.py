"""Tests for the order number pattern cascade."""

import re

import pytest

from src.extraction.order_number import (
    ORDER_NUMBER_FORMATS,
    ORDER_PATTERNS,
    OrderNumberRecognizer,
    canonicalize_prefix,
    clean_candidate,
)
from src.extraction.patterns import IdentifierPattern, build_patterns
from src.extraction.report import Found, IdentifierKind, NotFound


class TestCanonicalForms:
    """Canonical values of every format family are returned unchanged."""

    def setup_method(self) -> None:
        self.recognizer = OrderNumberRecognizer()

    @pytest.mark.parametrize(
        ("value", "family"),
        [
            ("EJR123456-1", "long_prefix"),
            ("EJC654321-2", "long_prefix"),
            ("MH000111-1", "long_prefix"),
            ("R3817-1", "short_prefix"),
            ("AL5862-1", "short_prefix"),
            ("EL649453EL-1", "el_wrapped"),
            ("2000000289-1", "leading_two"),
            ("000232569-1", "nine_digit"),
            ("000235334-1-3", "nine_digit"),
            ("123456-1", "six_digit"),
        ],
    )
    def test_family_value_recognized(self, value: str, family: str) -> None:
        result = self.recognizer.recognize(f"Ship date 03/14\n{value}\nQty 1")
        assert isinstance(result, Found)
        assert result.kind == IdentifierKind.ORDER_NUMBER
        assert result.value == value
        assert result.family == family


class TestCaseNormalization:
    """Prefixes are rewritten to their canonical casing."""

    def setup_method(self) -> None:
        self.recognizer = OrderNumberRecognizer()

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("r3817-1", "R3817-1"),
            ("al5862-1", "AL5862-1"),
            ("ejr123456-1", "EJR123456-1"),
            ("Mh123456-2", "MH123456-2"),
            ("el649453el-1", "EL649453EL-1"),
            ("eL649453El-1", "EL649453EL-1"),
        ],
    )
    def test_lowercase_prefix(self, text: str, expected: str) -> None:
        result = self.recognizer.recognize(text)
        assert isinstance(result, Found)
        assert result.value == expected

    def test_canonicalize_only_touches_prefix(self) -> None:
        assert canonicalize_prefix("ejc123456-1") == "EJC123456-1"
        assert canonicalize_prefix("r3817-1") == "R3817-1"

    def test_canonicalize_el_wrapped(self) -> None:
        assert canonicalize_prefix("el649453el-1") == "EL649453EL-1"

    def test_canonicalize_el_without_suffix_unchanged(self) -> None:
        assert canonicalize_prefix("el649453el") == "el649453el"

    def test_canonicalize_digits_unchanged(self) -> None:
        assert canonicalize_prefix("123456-1") == "123456-1"

    def test_clean_candidate(self) -> None:
        assert clean_candidate(" r 3817 – 1 ") == "R3817-1"


class TestSuffixRequired:
    """A number without a -digit suffix is never an order number."""

    def setup_method(self) -> None:
        self.recognizer = OrderNumberRecognizer()

    @pytest.mark.parametrize(
        "text", ["123456789", "2000000289", "123456", "R3817", "EJR123456", "EL649453EL"]
    )
    def test_bare_value_not_found(self, text: str) -> None:
        result = self.recognizer.recognize(text)
        assert isinstance(result, NotFound)

    def test_bare_match_recorded_as_rejected(self) -> None:
        result = self.recognizer.recognize("Ref 123456789")
        assert isinstance(result, NotFound)
        rejected = result.diagnostics.rejected
        assert [c.cleaned for c in rejected] == ["123456789"]
        assert rejected[0].pattern.name == "nine_digit"


class TestCascade:
    """Ordering and fall-through behavior of the pattern cascade."""

    def setup_method(self) -> None:
        self.recognizer = OrderNumberRecognizer()

    def test_labeled_match_wins_over_bare_number(self) -> None:
        result = self.recognizer.recognize("Ref 654321-9\nOrder #R3817-1")
        assert isinstance(result, Found)
        assert result.value == "R3817-1"
        assert result.matched_by == "order_label_short"

    def test_label_beats_generic_nine_digit(self) -> None:
        result = self.recognizer.recognize("Order # 123456 - 1\nRef 000232569-2")
        assert isinstance(result, Found)
        assert result.value == "123456-1"
        assert result.matched_by == "order_label_long"

    def test_order_number_label(self) -> None:
        result = self.recognizer.recognize("Order Number: 000232569 - 1")
        assert isinstance(result, Found)
        assert result.value == "000232569-1"

    def test_invalid_labeled_candidate_falls_through(self) -> None:
        result = self.recognizer.recognize("Order #123456789\nEJR123456-1")
        assert isinstance(result, Found)
        assert result.value == "EJR123456-1"
        assert result.matched_by == "long_prefix"

    def test_multi_segment_kept_whole(self) -> None:
        result = self.recognizer.recognize("Order #000235334-1-3")
        assert isinstance(result, Found)
        assert result.value == "000235334-1-3"
        assert result.matched_by == "nine_digit_multi_segment"

    def test_multi_segment_with_dash_variants_and_spaces(self) -> None:
        result = self.recognizer.recognize("000235334 – 1 — 3")
        assert isinstance(result, Found)
        assert result.value == "000235334-1-3"

    def test_spaced_suffix(self) -> None:
        result = self.recognizer.recognize("Ref: 000232569 - 1")
        assert isinstance(result, Found)
        assert result.value == "000232569-1"

    def test_em_dash_suffix(self) -> None:
        result = self.recognizer.recognize("R3817—1")
        assert isinstance(result, Found)
        assert result.value == "R3817-1"

    def test_hash_marker(self) -> None:
        result = self.recognizer.recognize("Ref #AL5862-1")
        assert isinstance(result, Found)
        assert result.value == "AL5862-1"
        assert result.matched_by == "hash_prefixed"

    def test_standalone_pattern_handles_trailing_noise(self) -> None:
        result = self.recognizer.recognize("Ship EJR123456-1a")
        assert isinstance(result, Found)
        assert result.value == "EJR123456-1"
        assert result.matched_by == "standalone_long_prefix"

    def test_tracking_number_not_mistaken_for_order(self) -> None:
        result = self.recognizer.recognize("9205 5000 1234 5678 9012 34")
        assert isinstance(result, NotFound)

    def test_deterministic(self) -> None:
        text = "Order #R3817-1"
        assert self.recognizer.recognize(text) == self.recognizer.recognize(text)


class TestNotFoundDiagnostics:
    """Diagnostics carried by a failed recognition."""

    def setup_method(self) -> None:
        self.recognizer = OrderNumberRecognizer()

    def test_empty_text_lists_all_patterns(self) -> None:
        result = self.recognizer.recognize("")
        assert isinstance(result, NotFound)
        assert result.kind == IdentifierKind.ORDER_NUMBER
        assert result.diagnostics.attempted_patterns == tuple(p.name for p in ORDER_PATTERNS)
        assert result.diagnostics.rejected == ()

    def test_normalized_text_in_diagnostics(self) -> None:
        result = self.recognizer.recognize("nothing — here")
        assert isinstance(result, NotFound)
        assert result.diagnostics.normalized_text == "nothing - here"


class TestPatternTable:
    """Structure of the pattern and format tables."""

    def test_priorities_follow_order(self) -> None:
        assert [p.priority for p in ORDER_PATTERNS] == list(range(len(ORDER_PATTERNS)))

    def test_names_unique(self) -> None:
        names = [p.name for p in ORDER_PATTERNS]
        assert len(names) == len(set(names))

    def test_formats_require_suffix(self) -> None:
        for fmt in ORDER_NUMBER_FORMATS:
            assert not any(fmt.matches(v) for v in ("123456789", "R3817", "2000000289"))

    def test_duplicate_pattern_names_rejected(self) -> None:
        with pytest.raises(ValueError):
            OrderNumberRecognizer(patterns=ORDER_PATTERNS + ORDER_PATTERNS[:1])

    def test_build_patterns_duplicate_names(self) -> None:
        with pytest.raises(ValueError):
            build_patterns([("a", r"\d", 0), ("a", r"\w", 0)])

    def test_build_patterns_invalid_regex(self) -> None:
        with pytest.raises(re.error):
            build_patterns([("broken", r"(\d", 0)])

    def test_capture_whole_match(self) -> None:
        pattern = IdentifierPattern("whole", 0, re.compile(r"R\d{4}-\d"), group=0)
        match = pattern.regex.search("x R3817-1 y")
        assert match is not None
        assert pattern.capture(match) == "R3817-1"

    def test_capture_falls_back_without_groups(self) -> None:
        pattern = IdentifierPattern("nogroup", 0, re.compile(r"\d{6}-\d"))
        match = pattern.regex.search("123456-1")
        assert match is not None
        assert pattern.capture(match) == "123456-1"

    def test_custom_table(self) -> None:
        patterns = build_patterns([("only_short", r"\b(R\d{4}-\d)\b", 0)])
        recognizer = OrderNumberRecognizer(patterns=patterns)
        assert isinstance(recognizer.recognize("EJR123456-1"), NotFound)
        result = recognizer.recognize("R3817-1")
        assert isinstance(result, Found)
        assert result.matched_by == "only_short"

    def test_found_values_always_validate(self) -> None:
        recognizer = OrderNumberRecognizer()
        texts = [
            "Order #R3817-1",
            "#EL649453EL - 2",
            "Order Number: mh123456-1",
            "000235334-1-3",
            "123456 - 7",
        ]
        for text in texts:
            result = recognizer.recognize(text)
            assert isinstance(result, Found)
            assert recognizer.match_format(result.value) == result.family

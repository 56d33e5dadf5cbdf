"""Tests for PR comment formatting."""

from datetime import datetime, timedelta, timezone

import pytest

from ai_pr_review.github.formatter import (
    AI_REVIEW_MARKER,
    MAX_COMMENT_LENGTH,
    TRUNCATION_NOTICE,
    format_footer,
    format_header,
    format_review_comment,
    model_display_name,
)


class TestModelDisplayName:
    """Tests for header model names."""

    @pytest.mark.parametrize(
        "model,expected",
        [
            ("google/gemini-2.5-pro", "Gemini 2.5 pro"),
            ("gpt-4o", "Gpt 4o"),
            ("anthropic/claude-sonnet-4", "Claude sonnet 4"),
            ("meta-llama/llama-3.1-70b-instruct:free", "Llama 3.1 70b instruct:free"),
            ("openrouter/auto/x-model", "X model"),
            ("", ""),
        ],
    )
    def test_display_name(self, model, expected):
        assert model_display_name(model) == expected


class TestFormatReviewComment:
    """Tests for the complete comment."""

    def test_header_body_footer(self, fixed_now):
        comment = format_review_comment("google/gemini-2.5-pro", "Looks good.", now=fixed_now)

        assert comment.startswith(f"{AI_REVIEW_MARKER} Gemini 2.5 pro\n\n")
        assert "Looks good." in comment
        assert "`google/gemini-2.5-pro`" in comment
        assert "on 2025-03-14 at 09:05 UTC" in comment
        assert TRUNCATION_NOTICE not in comment

    def test_footer_uses_utc(self):
        local = datetime(2025, 3, 14, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert "on 2025-03-15 at 04:30 UTC" in format_footer("m", local)

    def test_short_review_untouched(self, fixed_now):
        review = "x" * 1000
        comment = format_review_comment("m", review, now=fixed_now)
        assert comment == format_header("m") + review + format_footer("m", fixed_now)

    def test_exact_fit_not_truncated(self, fixed_now):
        overhead = len(format_header("m")) + len(format_footer("m", fixed_now))
        review = "y" * (500 - overhead)
        comment = format_review_comment("m", review, now=fixed_now, max_length=500)
        assert len(comment) == 500
        assert TRUNCATION_NOTICE not in comment

    def test_long_review_truncated(self, fixed_now):
        model = "google/gemini-2.5-pro"
        comment = format_review_comment(model, "z" * 100_000, now=fixed_now)
        footer = format_footer(model, fixed_now)

        assert len(comment) <= MAX_COMMENT_LENGTH
        assert comment.endswith(TRUNCATION_NOTICE + footer)
        # Body keeps everything but the safety margin
        assert len(comment) == MAX_COMMENT_LENGTH - 100

    @pytest.mark.parametrize("length", [0, 1, 599, 600, 601, 5000])
    def test_never_exceeds_budget(self, fixed_now, length):
        comment = format_review_comment("google/gemini-2.5-pro", "a" * length, now=fixed_now, max_length=600)
        assert len(comment) <= 600

    def test_default_timestamp(self):
        comment = format_review_comment("m", "ok")
        assert datetime.now(timezone.utc).strftime("%Y-%m-%d") in comment

    def test_huge_model_id_stays_within_budget(self, fixed_now):
        model = "x" * 70_000
        comment = format_review_comment(model, "Looks good.", now=fixed_now)

        assert len(comment) <= MAX_COMMENT_LENGTH
        assert comment.startswith(AI_REVIEW_MARKER)
        assert "Looks good." in comment
        assert f"`{'x' * 101}`" not in comment

    def test_tiny_budget_is_still_respected(self, fixed_now):
        comment = format_review_comment("google/gemini-2.5-pro", "a" * 50, now=fixed_now, max_length=120)
        assert len(comment) == 120

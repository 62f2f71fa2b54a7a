"""Tests for z-score anomaly scoring."""

from decimal import Decimal

import pytest

from transaction_analytics.config import AnalyticsConfig, Config
from transaction_analytics.models.transaction import Transaction
from transaction_analytics.processing.anomaly_scorer import AnomalyScorer, score_anomalies


def create_transaction(amount: str, description: str = "Purchase") -> Transaction:
    """Helper to create a Transaction for testing."""
    return Transaction(
        date="2024-03-01",
        description=description,
        amount=Decimal(amount),
        category="shopping",
    )


class TestAnomalyScorer:
    """Tests for AnomalyScorer."""

    def test_empty_batch(self) -> None:
        """Test that an empty batch has no statistics and no scores."""
        scorer = AnomalyScorer()

        assert scorer.statistics([]) is None
        assert scorer.scores([]) == []
        assert score_anomalies([]) == []

    def test_two_record_example(self) -> None:
        """Test mean 200 and population std dev 100 give scores -1 and 1."""
        transactions = [create_transaction("-100"), create_transaction("-300")]
        scorer = AnomalyScorer()

        stats = scorer.statistics(transactions)

        assert stats is not None
        assert stats.count == 2
        assert stats.mean == Decimal("200")
        assert stats.std_dev == Decimal("100")
        assert scorer.scores(transactions) == [-1.0, 1.0]

    def test_population_not_sample_std_dev(self) -> None:
        """Test that the variance divides by N, not N-1."""
        # abs amounts 2, 4, 4, 4, 5, 5, 7, 9: mean 5, population std dev 2
        amounts = ["-2", "4", "-4", "4", "-5", "5", "-7", "9"]
        transactions = [create_transaction(a) for a in amounts]

        stats = AnomalyScorer().statistics(transactions)

        assert stats is not None
        assert stats.mean == Decimal("5")
        assert stats.std_dev == Decimal("2")
        assert AnomalyScorer().scores(transactions)[-1] == 2.0

    def test_singleton_scores_zero(self) -> None:
        """Test that a single record scores 0."""
        assert AnomalyScorer().scores([create_transaction("-42.50")]) == [0.0]

    def test_equal_magnitudes_score_zero(self) -> None:
        """Test that equal absolute amounts give zero std dev and zero scores."""
        transactions = [
            create_transaction("-10.00"),
            create_transaction("10"),
            create_transaction("-10.0"),
        ]

        assert AnomalyScorer().scores(transactions) == [0.0, 0.0, 0.0]

    def test_all_zero_amounts(self) -> None:
        """Test that a batch of zero amounts scores 0 without dividing by zero."""
        transactions = [create_transaction("0"), create_transaction("0")]

        assert AnomalyScorer().scores(transactions) == [0.0, 0.0]

    def test_sign_of_amount_ignored(self) -> None:
        """Test that income and expense of equal size score the same."""
        transactions = [
            create_transaction("-100"),
            create_transaction("100"),
            create_transaction("-400"),
        ]

        scores = AnomalyScorer().scores(transactions)

        assert scores[0] == scores[1]
        assert scores[0] < 0
        assert scores[2] > 0

    def test_scores_rounded_to_two_places(self) -> None:
        """Test rounding of scores to two decimals."""
        # abs amounts 1, 2, 3: mean 2, std dev sqrt(2/3) = 0.8165 -> +-1.22
        transactions = [create_transaction("-1"), create_transaction("-2"), create_transaction("-3")]

        assert AnomalyScorer().scores(transactions) == [-1.22, 0.0, 1.22]

    def test_round_half_away_from_zero(self) -> None:
        """Test that exact halves round away from zero, not to even."""
        # mean 5, std dev 2: z-scores -1.5, -0.5, 0, 1, 2
        config = Config(analytics=AnalyticsConfig(score_decimal_places=0))
        amounts = ["-2", "4", "-4", "4", "-5", "5", "-7", "9"]
        transactions = [create_transaction(a) for a in amounts]

        scores = AnomalyScorer(config).scores(transactions)

        assert scores == [-2.0, -1.0, -1.0, -1.0, 0.0, 0.0, 1.0, 2.0]

    def test_uneven_batch_scores(self) -> None:
        """Test scores for a batch with one larger amount."""
        # abs amounts 0, 0, 0, 8: mean 2, std dev sqrt(12)
        transactions = [create_transaction("0")] * 3 + [create_transaction("-8")]

        assert AnomalyScorer().scores(transactions) == [-0.58, -0.58, -0.58, 1.73]

    def test_configurable_decimal_places(self) -> None:
        """Test that score precision follows configuration."""
        config = Config(analytics=AnalyticsConfig(score_decimal_places=3))
        transactions = [create_transaction("-1"), create_transaction("-2"), create_transaction("-3")]

        assert AnomalyScorer(config).scores(transactions) == [-1.225, 0.0, 1.225]

    def test_scores_change_as_batch_grows(self) -> None:
        """Test that scores are relative to the current batch only."""
        first = [create_transaction("-100"), create_transaction("-300")]
        grown = first + [create_transaction("-5000")]

        before = AnomalyScorer().scores(first)
        after = AnomalyScorer().scores(grown)

        assert before[1] == 1.0
        assert after[1] < 0

    def test_score_anomalies_sets_field(self) -> None:
        """Test that score_anomalies returns records carrying their score."""
        transactions = [create_transaction("-100"), create_transaction("-300")]

        result = score_anomalies(transactions)

        assert [t.anomaly_score for t in result] == [-1.0, 1.0]
        assert [t.description for t in result] == ["Purchase", "Purchase"]
        assert isinstance(result[0].anomaly_score, float)

    @pytest.mark.parametrize("count", [2, 5, 50])
    def test_outlier_is_positive_and_largest(self, count: int) -> None:
        """Test that a single large outlier receives the highest positive score."""
        transactions = [create_transaction("-10") for _ in range(count)]
        transactions.append(create_transaction("-10000", description="Car"))

        scores = AnomalyScorer().scores(transactions)

        assert scores[-1] == max(scores)
        assert scores[-1] > 0

"""
Score aggregation for tutoring sessions.

Accumulates per-verdict results into running statistics and produces a
ScoreSummary at any point in the session's life.

Accuracy is marks-weighted (obtained / possible). Per-topic accuracy is
count based (correct / total). Average time is a true running mean over
every recorded attempt. Items carrying a time limit also feed an
on-time rate.
"""

from __future__ import annotations

from dataclasses import dataclass

from aristotle.core.models import AnswerAttempt, Item, ScoreSummary, TopicScore, Verdict

# Revision thresholds
LOW_ACCURACY_THRESHOLD = 0.6
WEAK_TOPIC_THRESHOLD = 0.7
TIME_MANAGEMENT_THRESHOLD = 0.7


@dataclass
class _TopicTally:
    correct: int = 0
    total: int = 0


class ScoreAggregator:
    """Running statistics for one session."""

    def __init__(self):
        self.marks_possible = 0
        self.marks_obtained = 0
        self.items_answered = 0
        self.items_correct = 0
        self.current_streak = 0
        self.best_streak = 0
        self.timed_items = 0
        self.items_on_time = 0
        self._mean_time = 0.0
        self._topics: dict[str, _TopicTally] = {}

    @property
    def accuracy(self) -> float:
        """Cumulative marks-weighted accuracy; 0 before anything is scored."""
        if self.marks_possible == 0:
            return 0.0
        return self.marks_obtained / self.marks_possible

    @property
    def average_time(self) -> float:
        return self._mean_time

    def record(self, item: Item, attempt: AnswerAttempt, verdict: Verdict) -> None:
        """Fold one judged attempt into the totals."""
        self.items_answered += 1
        self.marks_possible += item.marks

        # Incremental mean: m_n = m_{n-1} + (x_n - m_{n-1}) / n
        self._mean_time += (attempt.elapsed_seconds - self._mean_time) / self.items_answered

        if item.time_limit_seconds is not None:
            self.timed_items += 1
            if attempt.elapsed_seconds <= item.time_limit_seconds:
                self.items_on_time += 1

        tally = self._topics.setdefault(item.topic, _TopicTally())
        tally.total += 1

        if verdict.is_correct:
            self.marks_obtained += item.marks
            self.items_correct += 1
            tally.correct += 1
            self.current_streak += 1
            self.best_streak = max(self.best_streak, self.current_streak)
        else:
            self.current_streak = 0

    def summary(self) -> ScoreSummary:
        """Snapshot of the current totals."""
        return ScoreSummary(
            marks_possible=self.marks_possible,
            marks_obtained=self.marks_obtained,
            average_time_seconds=self._mean_time,
            items_answered=self.items_answered,
            items_correct=self.items_correct,
            current_streak=self.current_streak,
            best_streak=self.best_streak,
            timed_items=self.timed_items,
            items_on_time=self.items_on_time,
            topics={
                topic: TopicScore(correct=t.correct, total=t.total)
                for topic, t in self._topics.items()
            },
        )


def revision_suggestions(summary: ScoreSummary) -> list[str]:
    """
    Study advice derived from a summary.

    Returns:
        One line per weakness found, or a single encouragement line.
    """
    suggestions = []

    if summary.items_answered and summary.accuracy < LOW_ACCURACY_THRESHOLD:
        suggestions.append("Focus on fundamental concepts and practice more basic problems")

    weak_topics = [
        topic for topic, score in sorted(summary.topics.items())
        if score.accuracy < WEAK_TOPIC_THRESHOLD
    ]
    if weak_topics:
        suggestions.append(f"Review these topics: {', '.join(weak_topics)}")

    if summary.timed_items and summary.on_time_rate < TIME_MANAGEMENT_THRESHOLD:
        suggestions.append("Work on time management - practice timed mock tests")

    if not suggestions:
        suggestions.append("Great job! Keep practicing to maintain your performance")
    return suggestions

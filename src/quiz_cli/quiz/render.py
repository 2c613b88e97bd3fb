"""Rich presentation for quiz rounds.

Everything here is cosmetic: the session and the interaction port carry the
semantics, the renderer only decides how they look on a terminal.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import AnswerOutcome, PerformanceTier, QuizResults, percentage_for
from .session import QuizSession

__all__ = ["Renderer", "TIER_MESSAGES", "progress_bar"]

PROGRESS_WIDTH = 30

TIER_MESSAGES: dict[PerformanceTier, tuple[str, str]] = {
    PerformanceTier.PERFECT: ("🏆", "Perfect score! Amazing!"),
    PerformanceTier.GREAT: ("🌟", "Great job! Well done!"),
    PerformanceTier.GOOD: ("👍", "Good effort! Keep learning!"),
    PerformanceTier.FAIR: ("📚", "Not bad! Room for improvement."),
    PerformanceTier.NEEDS_PRACTICE: (
        "💪",
        "Keep practicing! You'll get better!",
    ),
}


def progress_bar(position: int, total: int, width: int = PROGRESS_WIDTH) -> str:
    """Return a fixed-width bar such as ``[██████░░░░] 60%``."""

    fraction = position / total if total else 0.0
    filled = min(width, int(fraction * width + 0.5))
    percent = percentage_for(position, total)
    return f"[{'█' * filled}{'░' * (width - filled)}] {percent}%"


class Renderer:
    def __init__(
        self,
        console: Console,
        *,
        clear_screen: bool = True,
        show_explanations: bool = True,
    ) -> None:
        self.console = console
        self.clear_screen = clear_screen
        self.show_explanations = show_explanations

    def banner(self) -> None:
        if self.clear_screen:
            self.console.clear()
        title = Text.assemble(
            ("📚 QUIZ CLI", "bold cyan"),
            "\n",
            ("Test your programming knowledge!", "dim"),
        )
        self.console.print(
            Panel(title, box=box.DOUBLE, border_style="cyan", expand=False)
        )

    def starting(self) -> None:
        self.console.print()
        self.console.print("Starting quiz...", style="blue")
        self.console.print("Select your answer by entering the number.", style="dim")

    def question_header(self, session: QuizSession) -> None:
        self.console.print()
        self.console.print(
            Text(progress_bar(session.position, session.total), style="dim")
        )
        self.console.print(
            Text(
                f"Question {session.position + 1} of {session.total}",
                style="dim",
            )
        )

    def feedback(self, outcome: AnswerOutcome) -> None:
        self.console.print()
        if outcome.is_correct:
            self.console.print(Text("✓ Correct!", style="bold green"))
        else:
            self.console.print(Text("✗ Incorrect!", style="bold red"))
            line = Text("The correct answer was: ", style="blue")
            line.append(outcome.correct_option or "", style="default")
            self.console.print(line)
        if self.show_explanations and outcome.explanation:
            self.console.print(Text(f"💡 {outcome.explanation}", style="dim"))

    def results(self, results: QuizResults) -> None:
        self.console.print()
        self.console.rule(Text("📊 QUIZ RESULTS", style="bold magenta"))

        overview = Table(show_header=False, box=None, padding=(0, 2))
        overview.add_column("Metric", style="bold")
        overview.add_column("Value")
        overview.add_row("Category:", Text(results.category, style="cyan"))
        overview.add_row(
            "Score:",
            f"{results.score}/{results.total} ({results.percentage}%)",
        )
        self.console.print()
        self.console.print(overview)

        emoji, message = TIER_MESSAGES[results.tier]
        self.console.print()
        self.console.print(Text(f"  {emoji} {message}", style="yellow"))
        self.console.print()
        self.console.rule(style="magenta")

        if not results.incorrect:
            return
        self.console.print()
        self.console.print(Text("📝 Review these questions:", style="bold yellow"))
        for number, item in enumerate(results.incorrect, start=1):
            self.console.print()
            self.console.print(Text(f"{number}. {item.prompt}"))
            mine = Text("   Your answer: ", style="red")
            mine.append(item.selected_option, style="default")
            right = Text("   Correct: ", style="green")
            right.append(item.correct_option, style="default")
            self.console.print(mine)
            self.console.print(right)

    def farewell(self) -> None:
        self.console.print()
        self.console.print(
            Text("Thanks for playing! Keep learning! 🚀", style="bold green")
        )

    def interrupted(self) -> None:
        self.console.print()
        self.console.print("Session interrupted.", style="bold yellow")

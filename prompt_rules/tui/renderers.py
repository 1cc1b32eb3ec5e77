from rich.console import Console
from rich.text import Text

from prompt_rules.hooks.build_check import CheckReport
from prompt_rules.rules.models import MatchReport, Rule
from prompt_rules.tui.enums import UIStyle
from prompt_rules.tui.sections import UISection
from prompt_rules.tui.tables import CheckTable, MatchTable, RulesTable
from prompt_rules.utils import compact_home_path


class RulesConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_rules(self, rules: list[Rule], source: str) -> None:
        if not rules:
            self.console.print(
                UISection.note(
                    "rules",
                    f"No rules defined in {compact_home_path(source)}.",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "rules",
                RulesTable.rules_table(rules),
                style=UIStyle.BLUE.value,
                subtitle=compact_home_path(source),
            )
        )
        self.console.print(
            UISection.note(
                "valid",
                f"{len(rules)} rule(s) loaded without errors.",
                style=UIStyle.GREEN.value,
            )
        )

    def render_match(self, report: MatchReport, augmented: str | None = None) -> None:
        self.console.print(
            UISection.wrap(
                "match overview",
                MatchTable.summary_block(report),
                style=UIStyle.BLUE.value,
            )
        )
        if report.results:
            self.console.print(
                UISection.wrap(
                    "matched rules",
                    MatchTable.results_table(report),
                    style=UIStyle.CYAN.value,
                )
            )
        else:
            self.console.print(
                UISection.note("matched rules", "No rules matched.", style=UIStyle.DIM.value)
            )

        if report.errors:
            self.console.print(UISection.bullets("errors", report.errors, style=UIStyle.RED.value))
        if report.skipped:
            self.console.print(
                UISection.bullets("skipped", report.skipped, style=UIStyle.YELLOW.value)
            )
        if augmented is not None and report.results:
            self.console.print(
                UISection.note("augmented prompt", Text(augmented), style=UIStyle.MAGENTA.value)
            )

    def render_check(self, report: CheckReport) -> None:
        if report.results:
            self.console.print(
                UISection.wrap(
                    "build check",
                    CheckTable.results_table(report),
                    style=UIStyle.RED.value if report.failures else UIStyle.GREEN.value,
                )
            )
        else:
            self.console.print(
                UISection.note("build check", "Nothing to check.", style=UIStyle.DIM.value)
            )
        if report.skipped:
            self.console.print(
                UISection.bullets("skipped", report.skipped, style=UIStyle.YELLOW.value)
            )

from rich.table import Column, Table
from rich.text import Text

from prompt_rules.hooks.build_check import CheckReport
from prompt_rules.rules.models import MatchReport, Rule
from prompt_rules.tui.enums import (
    CHECK_STATUS_STYLE,
    ENFORCEMENT_STYLE,
    PRIORITY_STYLE,
    UIStyle,
)


def _styled(value: str, style: str) -> str:
    return f"[{style}]{value}[/{style}]"


def _triggers_summary(rule: Rule) -> str:
    parts: list[str] = []
    if rule.prompt_triggers is not None:
        prompt = rule.prompt_triggers
        parts.append(f"keywords={len(prompt.keywords)} intents={len(prompt.intent_patterns)}")
    if rule.file_triggers is not None:
        files = rule.file_triggers
        parts.append(
            f"paths={len(files.path_patterns)} excl={len(files.path_exclusions)} "
            f"content={len(files.content_patterns)}"
        )
    return "; ".join(parts)


class RulesTable:
    @staticmethod
    def rules_table(rules: list[Rule]) -> Table:
        table = Table(
            Column(header="Rule", overflow="fold"),
            Column(header="Type", width=10),
            Column(header="Enforcement", width=12),
            Column(header="Priority", width=9),
            Column(header="Triggers", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for rule in rules:
            table.add_row(
                Text(rule.id),
                rule.classification.value,
                _styled(rule.enforcement.value, ENFORCEMENT_STYLE[rule.enforcement]),
                _styled(rule.priority.value, PRIORITY_STYLE[rule.priority]),
                _triggers_summary(rule),
            )
        return table


class MatchTable:
    @staticmethod
    def summary_block(report: MatchReport):
        chips = [f"{key}={value}" for key, value in report.summary().items() if value > 0]
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Rules matched", str(len(report.results)))
        table.add_row("Counts", "  ".join(chips) if chips else "none")
        return table

    @staticmethod
    def results_table(report: MatchReport) -> Table:
        table = Table(
            Column(header="#", width=3),
            Column(header="Rule", overflow="fold"),
            Column(header="Enforcement", width=12),
            Column(header="Priority", width=9),
            Column(header="Matched on", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for index, result in enumerate(report.results, start=1):
            rule = result.rule
            table.add_row(
                str(index),
                Text(rule.id),
                _styled(rule.enforcement.value, ENFORCEMENT_STYLE[rule.enforcement]),
                _styled(rule.priority.value, PRIORITY_STYLE[rule.priority]),
                ", ".join(result.reasons()),
            )
        return table


class CheckTable:
    @staticmethod
    def results_table(report: CheckReport) -> Table:
        table = Table(
            Column(header="Tool", width=10),
            Column(header="Status", width=13),
            Column(header="Target", overflow="ellipsis", max_width=60),
            Column(header="Output", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for result in report.results:
            style = CHECK_STATUS_STYLE.get(result.status, UIStyle.WHITE.value)
            output = result.output.splitlines()
            table.add_row(
                result.tool,
                _styled(result.status.value, style),
                Text(result.target),
                Text("\n".join(output[:8])),
            )
        return table

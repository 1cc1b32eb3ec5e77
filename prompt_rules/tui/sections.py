from typing import Iterable, Optional

from rich.panel import Panel
from rich.text import Text

from prompt_rules.tui.enums import UIStyle
from prompt_rules.utils import compact_home_paths_in_text


class UISection:
    @staticmethod
    def wrap(title: str, body, style: str = UIStyle.BLUE.value, subtitle: Optional[str] = None) -> Panel:
        return Panel(body, title=title, subtitle=subtitle, border_style=style, padding=(0, 1))

    @staticmethod
    def note(title: str, body, style: str) -> Panel:
        return Panel(body, title=title, border_style=style, padding=(0, 1))

    @staticmethod
    def bullets(title: str, items: Iterable[object], style: str) -> Panel:
        """One ``- item`` line per entry, rendered as plain text so brackets survive."""
        lines = [f"- {compact_home_paths_in_text(str(item))}" for item in items]
        return UISection.note(title, Text("\n".join(lines)), style=style)

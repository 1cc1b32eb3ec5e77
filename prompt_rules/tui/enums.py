from enum import Enum

from prompt_rules.hooks.build_check import CheckStatus
from prompt_rules.rules.models import Enforcement, Priority


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


ENFORCEMENT_STYLE = {
    Enforcement.BLOCK: UIStyle.RED.value,
    Enforcement.SUGGEST: UIStyle.CYAN.value,
}

PRIORITY_STYLE = {
    Priority.HIGH: UIStyle.MAGENTA.value,
    Priority.MEDIUM: UIStyle.YELLOW.value,
    Priority.LOW: UIStyle.DIM.value,
}

CHECK_STATUS_STYLE = {
    CheckStatus.OK: UIStyle.GREEN.value,
    CheckStatus.FAILED: UIStyle.RED.value,
    CheckStatus.MISSING_TOOL: UIStyle.YELLOW.value,
}

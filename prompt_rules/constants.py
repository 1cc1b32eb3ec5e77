from typing import Final


PROJECT_DIR_ENV: Final[str] = "CLAUDE_PROJECT_DIR"
RULES_FILE_ENV: Final[str] = "PROMPT_RULES_FILE"
CACHE_DIR_ENV: Final[str] = "PROMPT_RULES_CACHE_DIR"
LENIENT_ENV: Final[str] = "PROMPT_RULES_LENIENT"

RULES_RELATIVE_PATH: Final[str] = ".claude/skills/skill-rules.json"
CACHE_RELATIVE_PATH: Final[str] = ".claude/prompt-rules-cache"

RULES_ENVELOPE_KEYS: Final[tuple[str, ...]] = ("rules", "skills")
YAML_SUFFIXES: Final[tuple[str, ...]] = (".yaml", ".yml")

MAX_SNAPSHOT_BYTES: Final[int] = 256 * 1024

PROMPT_HOOK_EVENT: Final[str] = "UserPromptSubmit"
EDIT_TOOL_NAMES: Final[tuple[str, ...]] = ("Edit", "MultiEdit", "Write", "NotebookEdit")

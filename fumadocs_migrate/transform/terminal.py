"""Terminal fences: command/output merging and shell prompt annotation."""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

# Static banner inserted in front of `bun test` output that lacks one. The
# commit hash is not real captured output.
BUN_TEST_BANNER = "bun test v$BUN_LATEST_VERSION (9c68abdb)"

_NOT_FENCE = r"(?:(?!```).)*"

_POWERSHELL_THEN_TXT_RE = re.compile(
    rf"```powershell([^\n]*)\n({_NOT_FENCE})```\s*\n+\s*```txt\n", re.DOTALL
)
_TERMINAL_THEN_OUTPUT_RE = re.compile(
    rf"```(bash|sh|shell|zsh)([ \t])([^\n]*terminal[^\n]*)\n({_NOT_FENCE})```"
    rf"\s*\n+\s*```txts?\n({_NOT_FENCE})```",
    re.DOTALL,
)
_BUN_TEST_RE = re.compile(r"bun\s+test")

# (stat, pattern, replacement) applied after merging
_LANG_FIXES: tuple[tuple[str, re.Pattern, str], ...] = (
    ("fence-lang-fixed", re.compile(r"```env(\s)"), r"```ini\1"),
    ("fence-lang-fixed", re.compile(r"```txts(\s)"), r"```txt\1"),
    ("fence-lang-fixed", re.compile(r"```txg(\s)"), r"```txt\1"),
    ("fence-lang-fixed", re.compile(r"```css(\s)"), r"```scss\1"),
    ("fence-lang-fixed", re.compile(r'```txt\s+title="\.env"'), '```ini title=".env"'),
    ("fence-lang-fixed", re.compile(r"```txt[ \t]+\.env(\s)"), r"```ini .env\1"),
    ("env-typo-fixed", re.compile(r"\bbun_BE_BUN="), "BUN_BE_BUN="),
)


class TerminalOutputMerger(Transform):
    """Merges a ``terminal`` shell fence with the ``txt`` output fence after it.

    PowerShell fences followed by output are kept apart. Also fixes a handful
    of fence language tags that the highlighter does not know.
    """

    name = "terminal-merge"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        # Retag PowerShell output as `text` so the merge below skips it
        content = _POWERSHELL_THEN_TXT_RE.sub(
            lambda m: f"```powershell{m.group(1)}\n{m.group(2)}```\n\n```text\n", content
        )

        def _merge(m: re.Match) -> str:
            lang, space, attrs, command, output = m.groups()
            stats.increment("terminal-output-merged")
            # a fence merged earlier may already carry the banner
            if _BUN_TEST_RE.search(command) and "bun test v" not in command + output:
                stats.increment("terminal-banner-inserted")
                body = f"{command}\n{BUN_TEST_BANNER}\n\n{output}"
            else:
                body = f"{command}\n{output}"
            return f"```{lang}{space}{attrs}\n{body}```"

        content = _TERMINAL_THEN_OUTPUT_RE.sub(_merge, content)

        content = content.replace("```text\n", "```txt\n")

        for stat, pattern, replacement in _LANG_FIXES:
            content, n = pattern.subn(replacement, content)
            stats.increment(stat, n)
        return content


# -- Prompt annotation --------------------------------------------------------


class LineState(Enum):
    NO_COMMAND = "no-command"
    AFTER_COMMAND = "after-command"
    IN_OUTPUT = "in-output"


_OUTPUT_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"^[✓✗×⚠➜→]"),
    re.compile(r"^\d+ (pass|fail|skip)"),
    re.compile(r"^-{3,}"),
    re.compile(r"^\|"),
    re.compile(r"^[└├│─]"),
    re.compile(r"^(packed|dependencies|Current|Target|Latest|Package)\s"),
    re.compile(r"^(you|shouldn)", re.IGNORECASE),
    re.compile(r"^(bun|npm|node)\s+(\w+\s+)*v[\d.$]"),
    re.compile(r"^\./[^:]+:\s+(valid|satisfies|error|warning)"),
)

_KNOWN_COMMANDS = (
    "bun", "npm", "npx", "bunx", "yarn", "pnpm", "node", "git", "cd", "ls", "mkdir",
    "touch", "rm", "cp", "mv", "curl", "wget", "docker", "cargo", "go", "python",
    "pip", "echo", "export", "source", "railway", "uname", "sudo", "cowsay", "brew",
    "scoop", "apt", "apt-get", "yum", "dnf", "setcap", "systemctl", "set", "vercel",
    "codesign",
)
_KNOWN_COMMAND_RE = re.compile(r"^(" + "|".join(re.escape(c) for c in _KNOWN_COMMANDS) + r")\s")
_BUN_EXECUTABLE_RE = re.compile(r"^bun-[a-z0-9-]+(\s|$)")
_EXPORT_ENV_RE = re.compile(r"^(export|source)\s+[A-Z_]+=")
_ENV_PREFIX_RE = re.compile(r"^[A-Z_]+=")
_ENV_PREFIXED_TOOL_RE = re.compile(r"\s+(bun|npm|node|git)")
_ENV_ASSIGNMENT_RE = re.compile(r"^[A-Z_]+=.+")
_URLISH_RE = re.compile(r"[:/]")
_RELATIVE_PATH_RE = re.compile(r"^\./")
_VERSIONED_PATH_OUTPUT_RE = re.compile(r"\s+@\d")
_LEADING_SPACE_RE = re.compile(r"^(\s*)")

_SHELL_FENCE_RE = re.compile(r"```(bash|sh|zsh)([^\n]*)\n(.*?)```", re.DOTALL)
_POWERSHELL_FENCE_RE = re.compile(r"```powershell([^\n]*)\n(.*?)```", re.DOTALL)


def looks_like_output(line: str) -> bool:
    return any(p.search(line) for p in _OUTPUT_PATTERNS)


def looks_like_command(line: str) -> bool:
    """Allow-list check for a shell command line (without prompt)."""
    if _KNOWN_COMMAND_RE.match(line) or _BUN_EXECUTABLE_RE.match(line) or _EXPORT_ENV_RE.match(line):
        return True
    if _ENV_PREFIX_RE.match(line) and _ENV_PREFIXED_TOOL_RE.search(line):
        return True
    if _ENV_ASSIGNMENT_RE.match(line) and len(line) > 20 and _URLISH_RE.search(line):
        return True
    return bool(_RELATIVE_PATH_RE.match(line)) and not _VERSIONED_PATH_OUTPUT_RE.search(line)


def _leading_space(line: str) -> str:
    return _LEADING_SPACE_RE.match(line).group(1)


class PromptScanner:
    """Single forward pass over the lines of one shell fence.

    States move NO_COMMAND → AFTER_COMMAND on the first command, and into
    IN_OUTPUT on an output-looking line, on prose after a command, or on any
    unrecognised line that follows a blank line after a command. Only an
    explicit ``$`` prompt leaves IN_OUTPUT.
    """

    def __init__(self) -> None:
        self.state = LineState.NO_COMMAND
        self.blank_after_command = False
        self.prompts_added = 0

    def _enter_command(self) -> None:
        self.state = LineState.AFTER_COMMAND
        self.blank_after_command = False

    def feed(self, line: str) -> str:
        trimmed = line.strip()

        if not trimmed:
            if self.state is not LineState.NO_COMMAND:
                self.blank_after_command = True
            return line

        if trimmed.startswith("# Output:"):
            return f"{_leading_space(line)}{trimmed[2:]}"
        if trimmed.startswith(("#", "//", ">")):
            return line

        if trimmed.startswith("$"):
            self._enter_command()
            return line

        if looks_like_output(trimmed):
            self.state = LineState.IN_OUTPUT
            return line

        if self.state is LineState.IN_OUTPUT:
            return line

        if looks_like_command(trimmed):
            self._enter_command()
            self.prompts_added += 1
            return f"{_leading_space(line)}$ {trimmed}"

        if self.blank_after_command:
            self.state = LineState.IN_OUTPUT
        elif self.state is LineState.AFTER_COMMAND and "A" <= trimmed[0] <= "Z" and len(trimmed) > 30:
            self.state = LineState.IN_OUTPUT
        return line


def annotate_shell_lines(code: str) -> tuple[str, int]:
    scanner = PromptScanner()
    lines = [scanner.feed(line) for line in code.split("\n")]
    return "\n".join(lines), scanner.prompts_added


def annotate_powershell_lines(code: str) -> tuple[str, int]:
    """Add ``> `` to PowerShell commands and unwrap ``# OUTPUT: `` markers.

    A fence that already has a ``> `` prompt is taken as annotated and left
    alone, so unwrapped output lines are never prompted on a later run.
    """
    if any(line.lstrip().startswith("> ") for line in code.split("\n")):
        return code, 0

    added = 0
    out = []
    for line in code.split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(("#", ">", "//")):
            if trimmed.startswith("# OUTPUT: "):
                line = f"{_leading_space(line)}{trimmed[len('# OUTPUT: '):]}"
            out.append(line)
        elif trimmed[0].isascii() and trimmed[0].isalpha():
            added += 1
            out.append(f"{_leading_space(line)}> {trimmed}")
        else:
            out.append(line)
    return "\n".join(out), added


class TerminalPromptAnnotator(Transform):
    """Prefixes shell commands with ``$ `` and PowerShell commands with ``> ``."""

    name = "prompts"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        def _powershell(m: re.Match) -> str:
            code, added = annotate_powershell_lines(m.group(2))
            stats.increment("powershell-prompt-added", added)
            return f"```powershell{m.group(1)}\n{code}```"

        def _shell(m: re.Match) -> str:
            code, added = annotate_shell_lines(m.group(3))
            stats.increment("terminal-dollar-added", added)
            return f"```{m.group(1)}{m.group(2)}\n{code}```"

        content = _POWERSHELL_FENCE_RE.sub(_powershell, content)
        return _SHELL_FENCE_RE.sub(_shell, content)

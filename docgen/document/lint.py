"""Markdown lint checks for rebuilt chapters, using pymarkdownlnt."""

from __future__ import annotations

from dataclasses import dataclass

from pymarkdown.api import PyMarkdownApi


@dataclass
class LintIssue:
    """A single markdown lint issue."""

    line: int
    column: int
    rule_id: str
    rule_name: str
    message: str
    extra_info: str | None = None

    def describe(self) -> str:
        """One-line description, e.g. "3:1 MD022 (blanks-around-headings) ..."."""
        text = f"{self.line}:{self.column} {self.rule_id} ({self.rule_name}) {self.message}"
        if self.extra_info:
            text += f" [{self.extra_info}]"
        return text


@dataclass
class LintResult:
    """Result of linting one markdown text."""

    issues: list[LintIssue]


class MarkdownLinter:
    """Scans markdown for style issues with pymarkdownlnt.

    Rules can be disabled by id (e.g. "md013" for line length, which long
    section paragraphs trip constantly).
    """

    DEFAULT_DISABLED_RULES = ("md013",)

    def __init__(self, disabled_rules: tuple[str, ...] | None = None):
        self._api = PyMarkdownApi()
        rules = self.DEFAULT_DISABLED_RULES if disabled_rules is None else disabled_rules
        for rule in rules:
            self._api.disable_rule_by_identifier(rule)

    def lint(self, content: str) -> LintResult:
        """Scan content for markdown issues.

        Args:
            content: Markdown content to lint.

        Returns:
            LintResult with list of issues found.
        """
        if not content:
            return LintResult(issues=[])

        result = self._api.scan_string(content)
        issues = [
            LintIssue(
                line=failure.line_number,
                column=failure.column_number,
                rule_id=failure.rule_id,
                rule_name=failure.rule_name,
                message=failure.rule_description,
                extra_info=failure.extra_error_information or None,
            )
            for failure in result.scan_failures
        ]
        return LintResult(issues=issues)

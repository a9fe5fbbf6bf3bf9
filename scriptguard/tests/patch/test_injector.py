"""
test_injector.py - Tests for the workflow text edits
"""

from scriptguard.core import Finding
from scriptguard.patch.injector import (
    add_envvar_to_global_env,
    inject,
    replace_unsafe_var_with_envvar,
)
from scriptguard.patch.patterns import classify
from scriptguard.patch.result import FailureReason


def _pattern(snippet):
    pattern = classify(snippet)
    assert pattern is not None
    return pattern


def test_replace_within_run_block(existing_env_workflow_content):
    """Only the contiguous block after the run: line is rewritten."""
    lines = existing_env_workflow_content.split("\n")
    original = list(lines)

    replace_unsafe_var_with_envvar(lines, _pattern("github.event.pull_request.title"), 12)

    assert lines[13] == '          echo "Title: $PR_TITLE"'
    # the blank line ends the block, the later use is left alone
    assert lines[16] == original[16]
    changed = [i for i, (a, b) in enumerate(zip(original, lines)) if a != b]
    assert changed == [13]


def test_replace_skips_block_after_comment():
    lines = [
        "      - run: |",
        '          # echo "${{ github.event.issue.title }}"',
        '          echo "${{ github.event.issue.title }}"',
    ]
    original = list(lines)
    replace_unsafe_var_with_envvar(lines, _pattern("github.event.issue.title"), 0)
    assert lines == original


def test_replace_stops_at_shallower_line():
    lines = [
        '        run: echo "${{ github.head_ref }}"',
        '      - run: echo "${{ github.head_ref }}"',
    ]
    replace_unsafe_var_with_envvar(lines, _pattern("github.head_ref"), 0)
    assert lines[0] == '        run: echo "$HEAD_REF"'
    # "- " counts as indentation, so the next step is at the same level
    assert lines[1] == '      - run: echo "$HEAD_REF"'

    lines = [
        '          run: echo "${{ github.head_ref }}"',
        '      - run: echo "${{ github.head_ref }}"',
    ]
    replace_unsafe_var_with_envvar(lines, _pattern("github.head_ref"), 0)
    assert lines[1] == '      - run: echo "${{ github.head_ref }}"'


def test_replace_all_occurrences_on_a_line():
    lines = ['      - run: echo "${{ github.event.issue.title }}" "${{github.event.issue.title}}"']
    replace_unsafe_var_with_envvar(lines, _pattern("github.event.issue.title"), 0)
    assert lines[0] == '      - run: echo "$ISSUE_TITLE" "$ISSUE_TITLE"'


def test_add_envvar_creates_global_env(comment_workflow_content):
    lines = comment_workflow_content.split("\n")
    pattern = _pattern("github.event.comment.body")

    result = add_envvar_to_global_env(lines, pattern, "github.event.comment.body")

    assert result.ok
    assert result.value[3:7] == [
        "env:",
        "  COMMENT_BODY: ${{ github.event.comment.body }}",
        "",
        "jobs:",
    ]


def test_add_envvar_appends_to_existing_env(existing_env_workflow_content):
    lines = existing_env_workflow_content.split("\n")
    pattern = _pattern("github.event.pull_request.title")

    result = add_envvar_to_global_env(lines, pattern, "github.event.pull_request.title")

    assert result.ok
    assert result.value[4:8] == [
        "env:",
        "  FOO: bar",
        "  PR_TITLE: ${{ github.event.pull_request.title }}",
        "",
    ]


def test_add_envvar_keeps_indentation_style(four_space_workflow_content):
    lines = four_space_workflow_content.split("\n")
    result = add_envvar_to_global_env(lines, _pattern("github.head_ref"), "github.head_ref")
    assert result.ok
    assert result.value[4] == "    HEAD_REF: ${{ github.head_ref }}"


def test_add_envvar_without_on_key():
    lines = ["jobs:", "  a:", '    - run: echo "${{ github.head_ref }}"']
    result = add_envvar_to_global_env(lines, _pattern("github.head_ref"), "github.head_ref")
    assert not result.ok
    assert result.reason is FailureReason.MALFORMED_DOCUMENT


def test_add_envvar_without_jobs_key():
    lines = ["on: push", "steps:", '  - run: echo "${{ github.head_ref }}"']
    result = add_envvar_to_global_env(lines, _pattern("github.head_ref"), "github.head_ref")
    assert not result.ok
    assert result.reason is FailureReason.MALFORMED_DOCUMENT


def test_add_envvar_env_on_last_line():
    lines = ["on: push", "jobs:", "  a:", "    runs-on: x", "env:"]
    result = add_envvar_to_global_env(lines, _pattern("github.head_ref"), "github.head_ref")
    assert not result.ok
    assert result.reason is FailureReason.NO_INSERTION_ROOM


def test_inject_does_not_modify_input(comment_workflow_content, comment_workflow_patched):
    lines = comment_workflow_content.split("\n")
    original = list(lines)
    finding = Finding(path="workflow.yml", snippet=" github.event.comment.body ", offset=8)

    result = inject(lines, finding, _pattern(finding.snippet))

    assert result.ok
    assert lines == original
    assert "\n".join(result.value) == comment_workflow_patched


def test_inject_only_adds_lines(
    comment_workflow_content, existing_env_workflow_content
):
    created = inject(
        comment_workflow_content.split("\n"),
        Finding(path="a.yml", snippet="github.event.comment.body", offset=8),
        _pattern("github.event.comment.body"),
    )
    appended = inject(
        existing_env_workflow_content.split("\n"),
        Finding(path="b.yml", snippet="github.event.pull_request.title", offset=13),
        _pattern("github.event.pull_request.title"),
    )

    # new block: label, declaration and blank separator
    assert len(created.value) == len(comment_workflow_content.split("\n")) + 3
    assert len(appended.value) == len(existing_env_workflow_content.split("\n")) + 1


def test_inject_invalid_offset(comment_workflow_content):
    lines = comment_workflow_content.split("\n")
    pattern = _pattern("github.event.comment.body")

    for offset in (0, -3, len(lines) + 1):
        finding = Finding(path="a.yml", snippet="github.event.comment.body", offset=offset)
        result = inject(lines, finding, pattern)
        assert result.reason is FailureReason.INVALID_OFFSET


ISSUE_WORKFLOW = """on:
  issues:

jobs:
  a:
    steps:
      - run: echo "${{ format('{0}', github.event.issue.title) }}"
"""


def test_inject_expression_with_braces():
    """Single braces inside the expression do not stop the replacement."""
    snippet = " format('{0}', github.event.issue.title) "
    finding = Finding(path="a.yml", snippet=snippet, offset=7)

    result = inject(ISSUE_WORKFLOW.split("\n"), finding, _pattern(snippet))

    assert result.ok
    assert result.value[4] == "  ISSUE_TITLE: ${{ format('{0}', github.event.issue.title) }}"
    assert result.value[-2] == '      - run: echo "$ISSUE_TITLE"'


def test_replace_braces_do_not_cross_expressions():
    lines = ["      - run: echo \"${{ format('{0}', github.sha) }}\" \"${{ github.event.issue.title }}\""]
    replace_unsafe_var_with_envvar(lines, _pattern("github.event.issue.title"), 0)
    assert lines[0] == "      - run: echo \"${{ format('{0}', github.sha) }}\" \"$ISSUE_TITLE\""


def test_inject_snippet_with_whitespace_padding():
    """Tabs and newlines around the expression are trimmed like spaces."""
    content = ISSUE_WORKFLOW.replace("format('{0}', github.event.issue.title)", "github.event.issue.title")
    lines = content.split("\n")
    snippet = "\ngithub.event.issue.title\t"
    finding = Finding(path="a.yml", snippet=snippet, offset=7)

    result = inject(lines, finding, _pattern(snippet))

    assert result.ok
    assert len(result.value) == len(lines) + 3
    assert result.value[4] == "  ISSUE_TITLE: ${{ github.event.issue.title }}"


def test_add_envvar_already_declared(existing_env_workflow_content):
    """An identical declaration is reused instead of being repeated."""
    content = existing_env_workflow_content.replace(
        "  FOO: bar\n", "  FOO: bar\n  PR_TITLE: ${{github.event.pull_request.title}}\n"
    )
    lines = content.split("\n")
    finding = Finding(path="ci.yml", snippet="github.event.pull_request.title", offset=14)

    result = inject(lines, finding, _pattern(finding.snippet))

    assert result.ok
    assert len(result.value) == len(lines)
    assert result.value[14] == '          echo "Title: $PR_TITLE"'
    assert [l for l in result.value if l.lstrip().startswith("PR_TITLE:")] == [
        "  PR_TITLE: ${{github.event.pull_request.title}}"
    ]


def test_add_envvar_declared_with_other_value(existing_env_workflow_content):
    content = existing_env_workflow_content.replace("  FOO: bar\n", "  FOO: bar\n  PR_TITLE: fixed\n")
    finding = Finding(path="ci.yml", snippet="github.event.pull_request.title", offset=14)

    result = inject(content.split("\n"), finding, _pattern(finding.snippet))

    assert not result.ok
    assert result.reason is FailureReason.ENVVAR_CONFLICT


def test_inject_keeps_crlf_line_endings(
    comment_workflow_content, comment_workflow_patched, existing_env_workflow_content
):
    created = inject(
        comment_workflow_content.replace("\n", "\r\n").split("\n"),
        Finding(path="a.yml", snippet="github.event.comment.body", offset=8),
        _pattern("github.event.comment.body"),
    )
    assert "\n".join(created.value) == comment_workflow_patched.replace("\n", "\r\n")

    appended = inject(
        existing_env_workflow_content.replace("\n", "\r\n").split("\n"),
        Finding(path="b.yml", snippet="github.event.pull_request.title", offset=13),
        _pattern("github.event.pull_request.title"),
    )
    assert appended.value[6] == "  PR_TITLE: ${{ github.event.pull_request.title }}\r"
    assert all(line.endswith("\r") for line in appended.value[:-1])

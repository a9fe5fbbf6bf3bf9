"""
conftest.py - Pytest fixtures for scriptguard tests
"""

import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory that is removed after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def comment_workflow_content():
    """Workflow echoing an issue comment, without a global env block."""
    return """on:
  issue_comment:

jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - run: echo "${{ github.event.comment.body }}"
"""


@pytest.fixture
def comment_workflow_patched():
    """Expected result of fixing comment_workflow_content."""
    return """on:
  issue_comment:

env:
  COMMENT_BODY: ${{ github.event.comment.body }}

jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - run: echo "$COMMENT_BODY"
"""


@pytest.fixture
def existing_env_workflow_content():
    """Workflow with a global env block and a multi-line run script."""
    return """name: CI
on:
  pull_request_target:

env:
  FOO: bar

jobs:
  greet:
    runs-on: ubuntu-latest
    steps:
      - name: Greet
        run: |
          echo "Title: ${{ github.event.pull_request.title }}"
          echo "done"

          echo "again ${{ github.event.pull_request.title }}"
"""


@pytest.fixture
def four_space_workflow_content():
    """Workflow indented with four spaces and no newline at end of file."""
    return (
        "on:\n"
        "    push:\n"
        "env:\n"
        "    A: b\n"
        "jobs:\n"
        "    x:\n"
        "        steps:\n"
        "            - run: echo ${{ github.head_ref }}"
    )


@pytest.fixture
def insecure_workflow_content():
    """Workflow with several kinds of untrusted input."""
    return """name: Insecure Workflow

on:
  pull_request_target:
  discussion:

jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
        with:
          ref: ${{ github.event.pull_request.head.ref }}
      - name: Run command
        run: |
          echo "Running with input ${{ github.event.pull_request.title }}"
          echo "Again ${{ github.event.pull_request.title }}"
          echo "Sha ${{ github.sha }}"
      - name: Discussion
        run: echo "${{ github.event.discussion.title }}"
"""


@pytest.fixture
def safe_workflow_content():
    """Workflow without any script injection."""
    return """name: Safe Workflow

on:
  push:

jobs:
  build:
    runs-on: ubuntu-latest
    env:
      TITLE: ${{ github.event.pull_request.title }}
    steps:
      - run: echo "$TITLE"
"""


@pytest.fixture
def mock_repo(temp_dir, comment_workflow_content, insecure_workflow_content, safe_workflow_content):
    """Create a mock repository with workflow files."""
    workflows_dir = Path(temp_dir) / ".github" / "workflows"
    workflows_dir.mkdir(parents=True, exist_ok=True)

    (workflows_dir / "comment.yml").write_text(comment_workflow_content)
    (workflows_dir / "insecure.yaml").write_text(insecure_workflow_content)
    (workflows_dir / "safe.yml").write_text(safe_workflow_content)
    (Path(temp_dir) / "README.md").write_text("# Mock Repository\n")

    return temp_dir

"""
yaml_handler.py - Utilities for YAML processing

This module provides the YAML handling used by the detector: a loader that
keeps GitHub Actions keys such as ``on`` as strings, and helpers to walk the
composed node graph, which carries the line of every key.
"""

from typing import Any, Dict, Iterator, Optional, Tuple, cast

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode


class WorkflowLoader(yaml.SafeLoader):
    """Safe loader with YAML 1.2 style booleans"""


# PyYAML follows the YAML 1.1 specification which treats plain strings such
# as ``on``, ``off``, ``yes`` and ``no`` as booleans. Workflows use ``on`` as
# the trigger key, which would otherwise load as ``True``.
for first_char, resolvers in list(WorkflowLoader.yaml_implicit_resolvers.items()):
    WorkflowLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"
    ]


def load_yaml(content: str) -> Any:
    """
    Load YAML content

    Raises:
        yaml.YAMLError: If YAML parsing fails
    """
    return yaml.load(content, Loader=WorkflowLoader)


def compose_yaml(content: str) -> Optional[Node]:
    """
    Compose YAML content into a node graph with position marks

    Raises:
        yaml.YAMLError: If YAML parsing fails
    """
    return cast(Optional[Node], yaml.compose(content, Loader=WorkflowLoader))


def iter_mapping_pairs(node: Optional[Node]) -> Iterator[Tuple[ScalarNode, Node]]:
    """
    Yield every (key, value) pair of every mapping below a node

    Only scalar keys are yielded. Pairs are produced in document order.

    Args:
        node: Root node, as returned by compose_yaml
    """
    if isinstance(node, MappingNode):
        for key, value in node.value:
            if isinstance(key, ScalarNode):
                yield key, value
            yield from iter_mapping_pairs(value)
    elif isinstance(node, SequenceNode):
        for item in node.value:
            yield from iter_mapping_pairs(item)


def is_github_actions_workflow(yaml_content: Any) -> bool:
    """
    Check if YAML content is a GitHub Actions workflow

    Args:
        yaml_content: YAML content as loaded by load_yaml

    Returns:
        True if the content has both ``on`` and ``jobs`` keys
    """
    if not isinstance(yaml_content, dict):
        return False

    workflow = cast(Dict[str, Any], yaml_content)
    return "on" in workflow and "jobs" in workflow

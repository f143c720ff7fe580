"""
Placeholder syntax and key extraction.

A placeholder is a key wrapped in triple angle brackets, e.g. <<<subject>>>
or <<<global.author>>>. Keys are trimmed; a placeholder whose key is empty
after trimming is left alone as literal text.
"""

import re
from typing import Iterable, List, Set

from commons_batch.models.enums import Namespace

PLACEHOLDER_LEFT = "<<<"
PLACEHOLDER_RIGHT = ">>>"

# Non-greedy, never spans a line break
PLACEHOLDER_PATTERN = re.compile(re.escape(PLACEHOLDER_LEFT) + r"(.*?)" + re.escape(PLACEHOLDER_RIGHT))


def extract_template_keys(template: str) -> Set[str]:
    """
    Extract the distinct placeholder keys referenced by a template.

    Args:
        template: Template string with <<<key>>> placeholders

    Returns:
        Set of trimmed keys; empty keys and unterminated delimiters
        contribute nothing

    Example:
        >>> sorted(extract_template_keys("A <<<x>>> B <<< y.z >>> C <<<x>>>"))
        ['x', 'y.z']
    """
    if not template:
        return set()

    return {
        match.group(1).strip()
        for match in PLACEHOLDER_PATTERN.finditer(template)
        if match.group(1).strip()
    }


def editable_keys(*templates: str) -> List[str]:
    """
    Keys a user fills in per image.

    Namespaced keys (global.*, exif.*, utility.*) are filled from other
    layers and are excluded.

    Args:
        templates: Any number of template strings (title, description, ...)

    Returns:
        Sorted list of un-prefixed keys referenced by any of the templates
    """
    keys: Set[str] = set()
    for template in templates:
        keys.update(extract_template_keys(template))
    return sorted(key for key in keys if not Namespace.is_namespaced(key))


def namespaced_keys(templates: Iterable[str], namespace: Namespace) -> List[str]:
    """
    Paths referenced inside one namespace, without the prefix.

    Example:
        >>> namespaced_keys(["<<<global.author>>> <<<exif.Make>>>"], Namespace.GLOBAL)
        ['author']
    """
    paths: Set[str] = set()
    for template in templates:
        for key in extract_template_keys(template):
            key_namespace, path = Namespace.split_key(key)
            if key_namespace is namespace and path:
                paths.add(path)
    return sorted(paths)

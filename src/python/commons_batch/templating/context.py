"""
Layered lookup context for rendering one image.

A TemplateContext holds four layers:
- local: the image's own keys, highest priority for un-prefixed keys
- global_values: values shared by the whole set, reachable as global.*
  and as a fallback for un-prefixed keys
- metadata: extracted file metadata of any depth, reachable as exif.*
- utility: values derived at render time, reachable as utility.*

Prefixed keys resolve only inside their own layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from commons_batch.models.enums import Namespace
from commons_batch.templating.utility import DEFAULT_DATE_FIELDS, UtilityValues, derive_utility_values
from commons_batch.utils import stringify_value


@dataclass(frozen=True)
class TemplateContext:
    """
    Read-only lookup context for one render pass.

    Attributes:
        local: Per-image keys
        global_values: Keys shared by every image in the set
        metadata: Extracted metadata, possibly nested
        utility: Derived utility values
    """
    local: Mapping[str, str] = field(default_factory=dict)
    global_values: Mapping[str, str] = field(default_factory=dict)
    metadata: Mapping[str, Any] = field(default_factory=dict)
    utility: Optional[UtilityValues] = None

    def layer(self, namespace: Namespace) -> Mapping[str, Any]:
        """Get the mapping behind a reserved namespace."""
        if namespace is Namespace.GLOBAL:
            return self.global_values
        if namespace is Namespace.EXIF:
            return self.metadata
        return self.utility.to_dict() if self.utility else {}

    def lookup(self, key: str) -> Optional[str]:
        """
        Resolve a placeholder key to its text.

        Args:
            key: Trimmed placeholder key

        Returns:
            String form of the value, or None when the key is unresolved
            (absent, None, empty or not a scalar)
        """
        namespace, path = Namespace.split_key(key)

        if namespace is not None:
            if not path:
                return None
            return stringify_value(resolve_path(self.layer(namespace), path))

        for layer in (self.local, self.global_values):
            value = stringify_value(_lookup_flat(layer, key))
            if value is not None:
                return value
        return None


def resolve_path(data: Any, path: str) -> Any:
    """
    Resolve a dot-separated path against nested mappings.

    Args:
        data: Root mapping
        path: Path such as "GPS.Latitude"

    Returns:
        The value found, or None when a step hits something that is not a
        mapping (a primitive, a missing key or None)

    Examples:
        >>> resolve_path({"a": {"b": 1}}, "a.b")
        1
        >>> resolve_path({"a": "text"}, "a.b") is None
        True
    """
    current = data
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _lookup_flat(layer: Mapping[str, Any], key: str) -> Any:
    """Exact key first, then the key as a nested path."""
    if key in layer:
        return layer[key]
    if "." in key:
        return resolve_path(layer, key)
    return None


def build_context(
    filename: str,
    index: int,
    local: Optional[Mapping[str, str]] = None,
    global_values: Optional[Mapping[str, str]] = None,
    metadata: Optional[Mapping[str, Any]] = None,
    date_fields: Sequence[str] = DEFAULT_DATE_FIELDS,
) -> TemplateContext:
    """
    Assemble the context for one image.

    The input mappings are copied and never modified.

    Args:
        filename: Filename of the image
        index: Zero-based position of the image in the working order
        local: The image's own keys (may be missing)
        global_values: Values shared by the whole set
        metadata: Extracted metadata of the image
        date_fields: Metadata fields holding the capture time, in priority order

    Returns:
        TemplateContext for a single render pass
    """
    metadata = dict(metadata or {})
    return TemplateContext(
        local=dict(local or {}),
        global_values=dict(global_values or {}),
        metadata=metadata,
        utility=derive_utility_values(filename, index, metadata, date_fields),
    )


def context_to_dict(context: TemplateContext) -> Dict[str, Any]:
    """
    Flatten a context into the nested mapping shown to template authors.

    Local keys sit at the top level next to the reserved namespaces.
    """
    result: Dict[str, Any] = dict(context.local)
    for namespace in Namespace:
        result[namespace.value] = dict(context.layer(namespace))
    return result

"""Template expansion and title normalization for image batches."""

from commons_batch.templating.context import TemplateContext, build_context, context_to_dict, resolve_path
from commons_batch.templating.keys import editable_keys, extract_template_keys, namespaced_keys
from commons_batch.templating.render import (
    DEFAULT_MAX_ITERATIONS,
    MISSING_PLACEHOLDER,
    count_missing,
    has_missing,
    render_template,
)
from commons_batch.templating.title import normalize_title
from commons_batch.templating.utility import UtilityValues, derive_utility_values

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "MISSING_PLACEHOLDER",
    "TemplateContext",
    "UtilityValues",
    "build_context",
    "context_to_dict",
    "count_missing",
    "derive_utility_values",
    "editable_keys",
    "extract_template_keys",
    "has_missing",
    "namespaced_keys",
    "normalize_title",
    "render_template",
    "resolve_path",
]

"""
Template rendering.

Placeholders are substituted in repeated passes so that a value may itself
contain placeholders. Rendering stops at a fixed point or after
max_iterations passes; whatever is still unresolved then becomes the
MISSING_PLACEHOLDER sentinel, which the review step looks for.
"""

import logging
import re

from commons_batch.templating.context import TemplateContext
from commons_batch.templating.keys import PLACEHOLDER_PATTERN

logger = logging.getLogger(__name__)

MISSING_PLACEHOLDER = "<<<missing>>>"
DEFAULT_MAX_ITERATIONS = 10


def render_template(
    template: str,
    context: TemplateContext,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> str:
    """
    Render a template against a context.

    Args:
        template: Template string with <<<key>>> placeholders
        context: Lookup context for one image
        max_iterations: Upper bound on substitution passes

    Returns:
        The rendered text. Every placeholder is either replaced by its
        trimmed value or by MISSING_PLACEHOLDER.

    Raises:
        ValueError: If max_iterations is less than 1

    Example:
        >>> from commons_batch.templating.context import TemplateContext
        >>> ctx = TemplateContext(local={"subject": "Sunset"}, global_values={"author": "Jane"})
        >>> render_template("<<<subject>>> by <<<global.author>>>, <<<license>>>", ctx)
        'Sunset by Jane, <<<missing>>>'
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")

    result = template
    for iteration in range(1, max_iterations + 1):
        is_last = iteration == max_iterations
        previous = result
        result = PLACEHOLDER_PATTERN.sub(lambda match: _substitute(match, context, is_last), result)

        if result == previous:
            logger.debug("Template reached a fixed point after %d pass(es)", iteration)
            break

    # Anything still bracketed after the loop is unresolvable
    return PLACEHOLDER_PATTERN.sub(_mark_missing, result)


def _substitute(match: re.Match, context: TemplateContext, is_last: bool) -> str:
    """Replacement for a single placeholder during one pass."""
    key = match.group(1).strip()
    if not key:
        return match.group(0)

    value = context.lookup(key)
    if value is not None:
        return value.strip()

    return MISSING_PLACEHOLDER if is_last else match.group(0)


def _mark_missing(match: re.Match) -> str:
    if not match.group(1).strip():
        return match.group(0)
    return MISSING_PLACEHOLDER


def count_missing(text: str) -> int:
    """Number of unresolved placeholders in rendered text."""
    return text.count(MISSING_PLACEHOLDER) if text else 0


def has_missing(text: str) -> bool:
    """Check if rendered text still needs values before upload."""
    return count_missing(text) > 0

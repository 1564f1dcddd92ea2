"""
Jinja2-based prompt template loading and rendering.

Templates live in the prompts/ directory at the project root:

    prompts/base/coach_system.j2            system prompt for every coaching call
    prompts/coaching/contextual.j2          per-request coaching prompt
    prompts/coaching/analysis.j2            full profile analysis prompt
    prompts/extraction/strengths_extraction.j2   AI fallback extraction prompt

Usage:
    from strengths_coach.utils.prompt_loader import render_prompt

    prompt = render_prompt(
        "coaching/contextual.j2",
        profile=user_profile,
        request_type="deep_dive",
        message="How do I lead a new team?",
    )
"""

from pathlib import Path
from typing import Any, Iterable, Optional

import structlog
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)

logger = structlog.get_logger(__name__)


def _numbered_strengths_filter(strengths: Iterable[Any], with_domain: bool = True) -> str:
    """Render strengths as ``1. Achiever (Executing)`` lines."""
    lines = []
    for index, strength in enumerate(strengths, start=1):
        domain = getattr(strength, "domain", None)
        if with_domain and domain is not None:
            domain_label = getattr(domain, "value", domain)
            lines.append(f"{index}. {strength.name} ({domain_label})")
        else:
            lines.append(f"{index}. {strength.name}")
    return "\n".join(lines)


def _iso_date_filter(value: Any) -> str:
    """Render a date/datetime as YYYY-MM-DD, passing strings through."""
    if hasattr(value, "isoformat"):
        return value.isoformat()[:10]
    return str(value)


class PromptLoader:
    """
    Manages loading and rendering of Jinja2 prompt templates.

    Templates are loaded from the prompts/ directory relative to the project root.
    """

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        strict_undefined: bool = False,
    ) -> None:
        """
        Initialize PromptLoader with Jinja2 environment.

        Args:
            template_dir: Base directory for templates (defaults to prompts/ in project root)
            strict_undefined: If True, raise error for undefined variables (default: False)
        """
        if template_dir is None:
            # Project root is 2 levels up from this file (strengths_coach/utils/)
            project_root = Path(__file__).parent.parent.parent
            template_dir = project_root / "prompts"

        self.template_dir = template_dir
        self.strict_undefined = strict_undefined

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,  # Prompts are text, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict_undefined else Undefined,
        )

        self.env.filters["numbered_strengths"] = _numbered_strengths_filter
        self.env.filters["iso_date"] = _iso_date_filter

        logger.debug(
            "PromptLoader initialized",
            template_dir=str(self.template_dir),
            strict_undefined=strict_undefined,
        )

    def render(
        self,
        template_name: str,
        correlation_id: Optional[str] = None,
        **variables: Any,
    ) -> str:
        """
        Render a template with provided variables.

        Args:
            template_name: Path relative to prompts/ (e.g., "coaching/contextual.j2")
            correlation_id: Optional correlation ID for logging
            **variables: Template variables as keyword arguments

        Returns:
            Rendered prompt string

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has syntax errors
            UndefinedError: If strict_undefined=True and variable is missing
        """
        log = logger.bind(
            template_name=template_name,
            correlation_id=correlation_id,
        )

        try:
            template = self.env.get_template(template_name)
            rendered = template.render(**variables)
            log.debug(
                "Template rendered",
                rendered_length=len(rendered),
                variables_provided=list(variables.keys()),
            )
            return rendered

        except TemplateNotFound as e:
            log.error(
                "Template not found",
                template_dir=str(self.template_dir),
                error=str(e),
            )
            raise

        except TemplateSyntaxError as e:
            log.error("Template syntax error", error=str(e), lineno=e.lineno)
            raise

        except UndefinedError as e:
            log.error(
                "Undefined variable in template",
                error=str(e),
                variables_provided=list(variables.keys()),
            )
            raise

    def get_system_prompt(
        self,
        prompt_type: str,
        correlation_id: Optional[str] = None,
        **variables: Any,
    ) -> str:
        """
        Load and render a system prompt template from the base/ directory.

        Args:
            prompt_type: Type of system prompt (e.g., "coach_system")
            correlation_id: Optional correlation ID for logging
            **variables: Template variables as keyword arguments

        Returns:
            Rendered system prompt string
        """
        template_name = f"base/{prompt_type}.j2"
        return self.render(template_name, correlation_id=correlation_id, **variables)


# Global instance for convenience
_default_loader: Optional[PromptLoader] = None


def get_default_loader() -> PromptLoader:
    """
    Get or create the default PromptLoader instance.

    Returns:
        Global PromptLoader instance
    """
    global _default_loader
    if _default_loader is None:
        _default_loader = PromptLoader()
    return _default_loader


def render_prompt(
    template_name: str,
    correlation_id: Optional[str] = None,
    **variables: Any,
) -> str:
    """
    Render a prompt template with the default PromptLoader.

    Args:
        template_name: Path relative to prompts/ (e.g., "coaching/contextual.j2")
        correlation_id: Optional correlation ID for logging
        **variables: Template variables as keyword arguments

    Returns:
        Rendered prompt string
    """
    loader = get_default_loader()
    return loader.render(template_name, correlation_id=correlation_id, **variables)


def get_system_prompt(prompt_type: str, **variables: Any) -> str:
    """Render a base/ system prompt with the default PromptLoader."""
    return get_default_loader().get_system_prompt(prompt_type, **variables)

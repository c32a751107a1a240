"""Template entity exports."""

from .template_models import Template, TemplateId

__all__ = ["Template", "TemplateId"]

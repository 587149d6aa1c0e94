"""Outfit generation pipeline (capture, compile, synthesize, merge)."""

from outfit_engines.pipeline.models import GenerationResult, HostDocuments  # noqa: F401
from outfit_engines.pipeline.service import OutfitManager  # noqa: F401

"""Prompt classification against the backend catalog.

The classifier is a general chat model asked to answer with a single backend
name. Its answer is an unreliable channel: it is decoded by exact match
against the catalog, and anything else (prose, a hallucinated name, a failed
call) degrades to the default decision instead of an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from .catalog import BackendDescriptor
from .prompts import routing_prompt

logger = logging.getLogger("modelgate.router")


class TextClassifier(Protocol):
    def generate_text(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class RoutingDecision:
    backend_name: str | None
    raw_answer: str | None = None

    @classmethod
    def use_default(cls, raw_answer: str | None = None) -> "RoutingDecision":
        return cls(backend_name=None, raw_answer=raw_answer)

    @property
    def is_default(self) -> bool:
        return self.backend_name is None


def match_backend(answer: str, catalog: tuple[BackendDescriptor, ...]) -> str | None:
    for descriptor in catalog:
        if answer == descriptor.name:
            return descriptor.name
    return None


class Router:
    def __init__(self, classifier: TextClassifier, catalog: tuple[BackendDescriptor, ...]) -> None:
        self.classifier = classifier
        self.catalog = catalog

    def classify(self, prompt: str, catalog: tuple[BackendDescriptor, ...] | None = None) -> RoutingDecision:
        used_catalog = self.catalog if catalog is None else catalog
        try:
            answer = self.classifier.generate_text(routing_prompt(prompt, used_catalog)).strip()
        except Exception as exc:
            logger.warning(
                "routing_failed",
                extra={"extra_fields": {"error_kind": exc.__class__.__name__, "error": str(exc)}},
            )
            return RoutingDecision.use_default()

        chosen = match_backend(answer, used_catalog)
        if chosen is None:
            logger.info("routing_unmatched", extra={"extra_fields": {"answer": answer[:200]}})
            return RoutingDecision.use_default(raw_answer=answer)

        logger.info("routing_decision", extra={"extra_fields": {"backend": chosen}})
        return RoutingDecision(backend_name=chosen, raw_answer=answer)

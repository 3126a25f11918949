"""Applies registered rules to raw snippet text."""

import logging
from typing import Optional, Union

from iac_doctor.models import BestPractice, Finding, Provider
from iac_doctor.rules.registry import RuleRegistry, default_registry

logger = logging.getLogger(__name__)


class RuleEvaluator:
    """Evaluates rules and best-practice patterns against a text sample.

    Each rule is evaluated on its own; no rule sees another's outcome, so the
    result set does not depend on evaluation order.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None) -> None:
        """Initialize the evaluator.

        Args:
            registry: Rule catalogue to use. Defaults to the built-in rules.
        """
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def evaluate(
        self,
        text: str,
        provider: Union[Provider, str, None],
        resource_type: str,
    ) -> list[Finding]:
        """Evaluate applicable rules against the text.

        Args:
            text: Raw snippet text.
            provider: Provider of the snippet.
            resource_type: Resource type of the snippet.

        Returns:
            One Finding per violated rule, in registry order.
        """
        text = text or ""
        rules = self._registry.rules_for(provider, resource_type)
        if not rules:
            logger.debug(f"No rules for provider={provider!r} resource_type={resource_type!r}")
            return []

        findings = [rule.to_finding() for rule in rules if rule.is_violated(text)]
        logger.debug(f"{len(findings)} of {len(rules)} rules violated for {resource_type!r}")
        return findings

    def suggest(
        self,
        text: str,
        provider: Union[Provider, str, None],
        resource_type: str,
    ) -> list[BestPractice]:
        """Collect best-practice suggestions for the text.

        Suggestions are independent of findings and of the score.

        Args:
            text: Raw snippet text.
            provider: Provider of the snippet.
            resource_type: Resource type of the snippet.

        Returns:
            Suggestions in registry order.
        """
        text = text or ""
        return [
            practice.to_suggestion()
            for practice in self._registry.practices_for(provider, resource_type)
            if practice.is_applicable(text)
        ]

"""Deterministic resource name generation.

Names follow ``<prefix>-<org>-<project>-<purpose>-<env>-<geo>-<instance>``,
e.g. ``rg-dp-authr-datarg-nonprod-eus-01``. Each kind's ``NamingRule`` is then
applied: separator removal and lower-casing, the length ceiling, a hash suffix
for globally unique kinds, and start/end/minimum-length repairs.

Generation is a pure function of the naming context, the purpose token and the
conventions. Hash suffixes are the first characters of the SHA-256 digest of
the untruncated candidate, so the same inputs always give the same name.
"""

import hashlib
import logging
import re
from typing import Optional

from .context import NamingContext
from .conventions import NamingConventions, NamingRule

logger = logging.getLogger(__name__)

FILLER = "x"

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")
_SEPARATOR_CHARS = "-_."


def derive_purpose(construct_id: str) -> str:
    """Purpose token for a construct id: case-folded, alphanumerics only.

    ``"DataRG"`` becomes ``"datarg"`` and ``"web-subnet"`` becomes ``"websubnet"``.
    """
    return _NON_ALPHANUMERIC.sub("", construct_id.casefold())


class ResourceNameGenerator:
    """Generates provider-compliant names from a naming context."""

    def __init__(self, conventions: Optional[NamingConventions] = None) -> None:
        self.conventions = conventions or NamingConventions()

    def generate_name(
        self,
        kind: str,
        context: NamingContext,
        purpose: Optional[str] = None,
    ) -> str:
        """Generate the name for a resource of ``kind``.

        Args:
            kind: Resource kind (``"rg"``, ``"st"``, ``"kv"``...)
            context: Stack naming context
            purpose: Purpose token, omitted from the name when empty

        Returns:
            A name satisfying the kind's naming rule
        """
        rule = self.conventions.rule_for(kind)
        separator = self._separator_for(rule)
        parts = [
            rule.prefix,
            context.organization.resource_name,
            context.project.resource_name,
            purpose or "",
            context.environment.resource_name,
            context.geography.abbreviation,
            context.instance.resource_name,
        ]
        candidate = separator.join(part for part in parts if part)
        name = self.apply_rule(candidate, rule)
        logger.debug(f"Generated {kind} name '{name}' from candidate '{candidate}'")
        return name

    def apply_rule(self, candidate: str, rule: NamingRule) -> str:
        """Fit a candidate name to ``rule``."""
        name = candidate.lower() if rule.lowercase else candidate
        if rule.remove_hyphens:
            name = re.sub(f"[{re.escape(_SEPARATOR_CHARS)}]", "", name)
        if not rule.allow_consecutive_hyphens:
            name = re.sub(r"-{2,}", "-", name)

        name = self._repair_start(name, rule)
        if rule.globally_unique:
            name = self._append_hash(name, rule)
        else:
            name = self._truncate(name, rule.max_length)
        name = self._repair_end(name)
        while len(name) < rule.min_length:
            name += FILLER
        return name

    def _separator_for(self, rule: NamingRule) -> str:
        if rule.remove_hyphens:
            return ""
        if rule.separator is not None:
            return rule.separator
        return self.conventions.separator

    def _append_hash(self, name: str, rule: NamingRule) -> str:
        joiner = self._separator_for(rule)
        digest = hashlib.sha256(name.encode("utf-8")).hexdigest()
        digest = digest[: min(self.conventions.hash_length, rule.max_length)]
        budget = rule.max_length - len(digest) - len(joiner)
        if budget <= 0:
            return digest
        base = self._truncate(name, budget)
        if not base:
            return digest
        return f"{base}{joiner}{digest}"

    @staticmethod
    def _truncate(name: str, max_length: int) -> str:
        if len(name) <= max_length:
            return name
        return name[:max_length].rstrip(_SEPARATOR_CHARS)

    @staticmethod
    def _repair_start(name: str, rule: NamingRule) -> str:
        name = name.lstrip(_SEPARATOR_CHARS)
        if rule.must_start_with_letter and not name[:1].isalpha():
            name = FILLER + name
        return name

    @staticmethod
    def _repair_end(name: str) -> str:
        name = name.rstrip(_SEPARATOR_CHARS)
        return name or FILLER

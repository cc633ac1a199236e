"""
Step 4 — Keyphrase frequency features.
For every dictionary group, count how many of its pattern variants occur in
a report's text of interest (case-insensitive). Each variant adds at most 1.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from packages.shared.errors import ConfigurationError
from packages.shared.models import KeyphraseDictionary


@dataclass(frozen=True)
class KeyphraseGroup:
    name: str
    patterns: tuple[re.Pattern[str], ...]


def compile_dictionary(dictionary: KeyphraseDictionary) -> list[KeyphraseGroup]:
    """Compile every variant once per run. Uncompilable variants are a configuration error."""
    groups: list[KeyphraseGroup] = []
    for name, variants in dictionary.features.items():
        compiled: list[re.Pattern[str]] = []
        for variant in variants:
            try:
                compiled.append(re.compile(variant, re.IGNORECASE))
            except re.error as exc:
                raise ConfigurationError(
                    f"Keyphrase '{variant}' in group '{name}' is not a valid pattern: {exc}"
                ) from exc
        groups.append(KeyphraseGroup(name=name, patterns=tuple(compiled)))
    return groups


def count_keyphrases(text: str, groups: list[KeyphraseGroup]) -> dict[str, int]:
    """Return {group name: number of variants found in text}, in dictionary order."""
    src = text or ""
    return {g.name: sum(1 for rex in g.patterns if rex.search(src)) for g in groups}


def extract_nlp_features(texts: list[str], groups: list[KeyphraseGroup]) -> list[dict[str, int]]:
    return [count_keyphrases(t, groups) for t in texts]

# src/extraction/models.py — v1
"""Extraction result types and the classifier's wire schema."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from instrctl.core.models import Occurrence, Principle

ExtractionMethod = Literal["classifier", "heuristic"]
ClassifierErrorKind = Literal["transport", "timeout", "parse", "empty"]


class ExtractResult(BaseModel):
    """Principles and occurrences read from one document."""

    principles: list[Principle] = Field(default_factory=list)
    occurrences: list[Occurrence] = Field(default_factory=list)
    method: ExtractionMethod = "heuristic"


class ClassifiedPrinciple(BaseModel):
    """One principle as returned by the LLM classifier."""

    strength: str
    statement: str
    title: str | None = None
    tags: list[str] = Field(default_factory=list)
    rationale: str | None = None
    examples: list[str] = Field(default_factory=list)
    start_line: int | None = None
    end_line: int | None = None

    @field_validator("strength")
    @classmethod
    def normalize_strength(cls, v: str) -> str:
        return "_".join(v.split()).upper()

    @field_validator("statement")
    @classmethod
    def strip_statement(cls, v: str) -> str:
        return v.strip()


class ClassifierResponse(BaseModel):
    """Expected JSON payload: {"principles": [...]}."""

    principles: list[ClassifiedPrinciple] = Field(default_factory=list)


@dataclass(frozen=True)
class ClassifierError:
    """Why a classifier call produced no usable principles."""

    kind: ClassifierErrorKind
    message: str


@dataclass(frozen=True)
class ClassifierOutcome:
    """Either classified principles or the error that prevented them."""

    principles: tuple[ClassifiedPrinciple, ...] = ()
    error: ClassifierError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.principles)

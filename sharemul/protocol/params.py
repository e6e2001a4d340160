"""Validated session parameters."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

from sharemul.config import NUM_PARTICIPANTS, PRIME, THRESHOLD
from sharemul.crypto.field import PrimeField


class SessionParams(BaseModel):
    """Field, threshold and participant set for one session.

    The prime is taken on trust; only ``prime >= 2`` is checked.
    """

    prime: int = PRIME
    threshold: int = THRESHOLD
    participant_ids: List[int] = Field(
        default_factory=lambda: list(range(1, NUM_PARTICIPANTS + 1))
    )

    @field_validator("prime")
    @classmethod
    def _prime_at_least_two(cls, v: int) -> int:
        if v < 2:
            raise ValueError(f"prime must be >= 2, got {v}")
        return v

    @field_validator("threshold")
    @classmethod
    def _threshold_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"threshold must be >= 1, got {v}")
        return v

    @field_validator("participant_ids")
    @classmethod
    def _ids_positive(cls, v: List[int]) -> List[int]:
        bad = [i for i in v if i < 1]
        if bad:
            raise ValueError(f"participant ids must be positive, got {bad}")
        return v

    @model_validator(mode="after")
    def _check_group(self) -> "SessionParams":
        residues = [i % self.prime for i in self.participant_ids]
        if 0 in residues or len(set(residues)) != len(residues):
            raise ValueError(
                f"participant ids must be distinct and nonzero mod {self.prime}: "
                f"{self.participant_ids}"
            )
        if len(self.participant_ids) < self.threshold:
            raise ValueError(
                f"need >= threshold={self.threshold} participants, "
                f"got {len(self.participant_ids)}"
            )
        return self

    @property
    def field(self) -> PrimeField:
        return PrimeField(self.prime)

    @property
    def supports_multiplication(self) -> bool:
        """True when n >= 2k - 1 (room for the degree-2(k-1) intermediate)."""
        return len(self.participant_ids) >= 2 * self.threshold - 1

"""Share distribution and reconstruction for a group of participants.

``ShareExchange`` plays the driver's role for one sharing round:

1. dealers generate their polynomials,
2. every participant receives a share from every dealer,
3. every participant folds what it received,
4. any threshold-sized subset reconstructs via Lagrange weights at 0.

Participants are exchanged in memory; ordering is sequential, and step 1
finishes for all dealers before step 2 starts.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sharemul.crypto.field import FieldElement
from sharemul.crypto.lagrange import weights_at
from sharemul.errors import InvalidParticipants
from sharemul.party.participant import Participant, Reduction
from sharemul.protocol.transcript import Transcript

logger = logging.getLogger(__name__)


class ShareExchange:
    """Orchestrates one round of sharing among in-memory participants."""

    def __init__(
        self,
        participants: Iterable[Participant],
        threshold: int,
        transcript: Optional[Transcript] = None,
        label: str = "share",
    ) -> None:
        self.participants: Dict[int, Participant] = {}
        for p in participants:
            if p.id in self.participants:
                raise InvalidParticipants(f"Duplicate participant id {p.id}")
            self.participants[p.id] = p
        if threshold < 1:
            raise ValueError(f"Invalid threshold: k={threshold}")
        if len(self.participants) < threshold:
            raise InvalidParticipants(
                f"Need >= k={threshold} participants, got {len(self.participants)}"
            )
        fields = {p.field for p in self.participants.values()}
        if len(fields) > 1:
            raise ValueError(f"Participants live in different fields: {fields}")
        # An id congruent to 0 would be handed P(0), the dealer's secret.
        field = next(iter(fields))
        zero_ids = [i for i in self.participants if field(i).is_zero()]
        if zero_ids:
            raise InvalidParticipants(
                f"Participant ids {zero_ids} are 0 mod {field.prime} and would receive the secret"
            )
        self.threshold = threshold
        self.transcript = transcript if transcript is not None else Transcript()
        self.label = label

    @property
    def ids(self) -> List[int]:
        return list(self.participants)

    @property
    def field(self):
        return next(iter(self.participants.values())).field

    def _select(self, ids: Optional[Sequence[int]]) -> List[Participant]:
        if ids is None:
            return list(self.participants.values())
        unknown = [i for i in ids if i not in self.participants]
        if unknown:
            raise InvalidParticipants(f"Unknown participant ids {unknown}")
        return [self.participants[i] for i in ids]

    # ---- rounds ----

    def generate_polynomials(self, dealer_ids: Optional[Sequence[int]] = None) -> None:
        """Let each dealer (default: everyone) fix its sharing polynomial."""
        for dealer in self._select(dealer_ids):
            dealer.generate_polynomial(self.threshold)
            self.transcript.record("polynomial", self.label, participant=dealer.id,
                                   degree=self.threshold - 1)

    def distribute(self, dealer_ids: Optional[Sequence[int]] = None) -> None:
        """Every participant receives one share from every dealer.

        Dealers default to the participants that hold a polynomial.  A
        dealer's own share was recorded when its polynomial was generated.
        """
        if dealer_ids is None:
            dealers = [p for p in self.participants.values() if p.has_polynomial]
        else:
            dealers = self._select(dealer_ids)
        for receiver in self.participants.values():
            for dealer in dealers:
                if dealer.id == receiver.id:
                    continue
                receiver.receive_share(dealer)
                self.transcript.record("share", self.label, sender=dealer.id,
                                       receiver=receiver.id)

    def fold(self, reduction: Reduction) -> Dict[int, FieldElement]:
        """Fold every participant's shares with *reduction*."""
        folded = {}
        for p in self.participants.values():
            folded[p.id] = p.fold_shares(reduction)
            self.transcript.record("fold", self.label, participant=p.id,
                                   senders=sorted(p.shares))
        return folded

    def folded_shares(self, ids: Optional[Sequence[int]] = None) -> Dict[int, FieldElement]:
        return {p.id: p.folded_share for p in self._select(ids)}

    def reconstruct(self, ids: Sequence[int]) -> FieldElement:
        """Σ weight_i · folded_i over the subset *ids*.

        Exact only when ``len(ids) >= threshold``; smaller subsets are
        computed anyway but the result is meaningless.
        """
        group = self._select(ids)
        if len(group) < self.threshold:
            logger.warning(
                "reconstructing from %d shares, below threshold k=%d; result is not reliable",
                len(group), self.threshold,
            )
        weights = weights_at([p.id for p in group], self.field)
        result = self.field.zero
        for p in group:
            result = result + weights[p.id] * p.folded_share
        self.transcript.record("reconstruct", self.label, participants=[p.id for p in group])
        logger.info("%s: reconstructed from participants %s", self.label, [p.id for p in group])
        return result

"""Hash-chained protocol transcript.

Every protocol event (polynomial generated, share sent, fold, reconstruct)
is appended as an entry that commits to the digest of the previous one,
so any later edit to the history breaks ``verify_chain``.  Entries carry
participant ids and round labels only, never share values.
"""

from __future__ import annotations

import hashlib
import json
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

GENESIS = "0" * 64


def _digest(seq: int, timestamp: float, event: str, label: str,
            data: Dict[str, Any], prev_hash: str) -> str:
    body = json.dumps(
        {
            "seq": seq,
            "timestamp": timestamp,
            "event": event,
            "label": label,
            "data": data,
            "prev_hash": prev_hash,
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(body.encode()).hexdigest()


@dataclass
class TranscriptEntry:
    seq: int
    timestamp: float
    event: str
    label: str
    data: Dict[str, Any]
    prev_hash: str
    entry_hash: str


class Transcript:
    """Append-only record of protocol messages for one or more rounds."""

    def __init__(self) -> None:
        self._entries: List[TranscriptEntry] = []

    @property
    def head(self) -> str:
        """Digest of the latest entry (genesis when empty)."""
        return self._entries[-1].entry_hash if self._entries else GENESIS

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, event: str, label: str = "", **data: Any) -> TranscriptEntry:
        seq = len(self._entries)
        ts = time.time()
        prev = self.head
        entry = TranscriptEntry(
            seq=seq,
            timestamp=ts,
            event=event,
            label=label,
            data=data,
            prev_hash=prev,
            entry_hash=_digest(seq, ts, event, label, data, prev),
        )
        self._entries.append(entry)
        return entry

    def entries(self, event: Optional[str] = None) -> List[Dict[str, Any]]:
        return [asdict(e) for e in self._entries if event is None or e.event == event]

    def verify_chain(self) -> bool:
        """Recompute every digest and link."""
        prev = GENESIS
        for seq, e in enumerate(self._entries):
            if e.seq != seq or e.prev_hash != prev:
                return False
            if e.entry_hash != _digest(e.seq, e.timestamp, e.event, e.label, e.data, e.prev_hash):
                return False
            prev = e.entry_hash
        return True

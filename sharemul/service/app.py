"""Engine FastAPI application.

Exposes the sharing engine to an external driver.  Participants still
live in this process; the HTTP layer only carries the driver's requests.

Endpoints:
- POST /weights             – Lagrange weights for a point set
- GET  /binomial/{n}/{k}    – C(n, k) mod p from the precomputed table
- POST /sum                 – additive sharing session + reconstruction
- POST /product             – two-secret multiplication session + reconstruction
- GET  /transcript          – hash-chained protocol transcript
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ValidationError

from sharemul.config import BINOMIAL_CAPACITY, NUM_PARTICIPANTS, PRIME, THRESHOLD
from sharemul.crypto.binomial import BinomialTable
from sharemul.crypto.field import PrimeField
from sharemul.crypto.lagrange import weights_at
from sharemul.crypto.polynomial import fixed_coefficients
from sharemul.errors import ShareMulError
from sharemul.protocol.exchange import ShareExchange
from sharemul.protocol.params import SessionParams
from sharemul.protocol.session import run_additive_session, run_product_session
from sharemul.protocol.transcript import Transcript


# ------ request models ------


class WeightsRequest(BaseModel):
    points: List[int]
    target_x: int = 0


class SessionRequest(BaseModel):
    """Shared fields of /sum and /product.

    ``secrets`` maps dealer id → secret.  ``coefficients`` optionally pins
    each dealer's random coefficients; omitted means fresh randomness.
    ``reconstruct_with`` defaults to the first ``threshold`` participants.
    """

    threshold: int = THRESHOLD
    participant_ids: List[int] = list(range(1, NUM_PARTICIPANTS + 1))
    secrets: Dict[int, int]
    coefficients: Optional[Dict[int, List[int]]] = None
    reconstruct_with: Optional[List[int]] = None


class ProductRequest(SessionRequest):
    reshare_coefficients: Optional[Dict[int, List[int]]] = None


class TranscriptResponse(BaseModel):
    entries: List[Dict[str, Any]]
    chain_valid: bool


# ------ state ------


class EngineState:
    """Per-app state: the field, its binomial table and the transcript.

    The transcript is shared by every request to the app and is append-only;
    it grows with each /sum and /product call for the lifetime of the state.
    Build a fresh ``EngineState`` to start a new record.
    """

    def __init__(self, prime: int = PRIME, binomial_capacity: int = BINOMIAL_CAPACITY) -> None:
        self.field = PrimeField(prime)
        self.binomial = BinomialTable(min(binomial_capacity, prime), self.field)
        self.transcript = Transcript()


def _params(state: EngineState, req: SessionRequest) -> SessionParams:
    try:
        return SessionParams(
            prime=state.field.prime,
            threshold=req.threshold,
            participant_ids=req.participant_ids,
        )
    except ValidationError as exc:
        raise HTTPException(400, str(exc))


def _summary(exchange: ShareExchange, reconstruct_with: Optional[List[int]]) -> Dict[str, Any]:
    ids = reconstruct_with or exchange.ids[: exchange.threshold]
    result = exchange.reconstruct(ids)
    return {
        "shares": {str(i): s.value for i, s in exchange.folded_shares().items()},
        "reconstructed_from": ids,
        "result": result.value,
    }


def create_app(state: EngineState | None = None) -> FastAPI:
    """Build the FastAPI app around *state* (fresh state when omitted)."""
    if state is None:
        state = EngineState()

    app = FastAPI(title="sharemul engine")
    app.state.engine = state

    @app.post("/weights")
    async def weights(req: WeightsRequest):
        try:
            w = weights_at(req.points, state.field, req.target_x)
        except ShareMulError as exc:
            raise HTTPException(400, str(exc))
        return {
            "prime": state.field.prime,
            "target_x": req.target_x,
            "weights": {str(p): v.value for p, v in w.items()},
        }

    @app.get("/binomial/{n}/{k}")
    async def binomial(n: int, k: int):
        try:
            value = state.binomial.choose(n, k)
        except ValueError as exc:
            raise HTTPException(400, str(exc))
        return {"n": n, "k": k, "value": value.value}

    @app.post("/sum")
    async def additive(req: SessionRequest):
        params = _params(state, req)
        source = fixed_coefficients(state.field, req.coefficients) if req.coefficients else None
        try:
            exchange = run_additive_session(params, req.secrets, source, state.transcript)
            return _summary(exchange, req.reconstruct_with)
        except (ShareMulError, ValueError) as exc:
            raise HTTPException(400, str(exc))

    @app.post("/product")
    async def product(req: ProductRequest):
        params = _params(state, req)
        deal = fixed_coefficients(state.field, req.coefficients) if req.coefficients else None
        reshare = (
            fixed_coefficients(state.field, req.reshare_coefficients)
            if req.reshare_coefficients
            else None
        )
        try:
            exchange = run_product_session(params, req.secrets, deal, reshare, state.transcript)
            return _summary(exchange, req.reconstruct_with)
        except (ShareMulError, ValueError) as exc:
            raise HTTPException(400, str(exc))

    @app.get("/transcript", response_model=TranscriptResponse)
    async def transcript():
        return TranscriptResponse(
            entries=state.transcript.entries(),
            chain_valid=state.transcript.verify_chain(),
        )

    return app


app = create_app()

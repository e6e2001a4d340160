"""Global configuration for sharemul."""

import os

# ---------- Finite-field prime ----------
# Default field is the Mersenne prime M61, which fits a 64-bit machine word.
# All arithmetic is mod PRIME unless a PrimeField is passed explicitly.
PRIME = int(os.environ.get("SHAREMUL_PRIME", str(2**61 - 1)))

# Small field used by the demo driver (matches the worked examples).
DEMO_PRIME = 17

# ---------- Sharing parameters ----------
NUM_PARTICIPANTS = 3   # N
THRESHOLD = 2          # K  (need >= K shares to reconstruct)

# ---------- Binomial table ----------
BINOMIAL_CAPACITY = int(os.environ.get("SHAREMUL_BINOMIAL_CAPACITY", "1024"))

# ---------- Logging ----------
LOG_LEVEL = os.environ.get("SHAREMUL_LOG_LEVEL", "INFO")

"""
Error Taxonomy
==============

Typed failure reasons shared by every proof in the package.

Hierarchy:
----------
- ProofError: common base class, never raised directly
- InvalidStatement: malformed public input, witness outside its declared
  range, or an inconsistent set of security parameters
- SamplingFailed: a bounded rejection-sampling loop ran out of attempts
- VerificationFailed: an algebraic or range check did not hold
- MalformedProof: the proof does not have the expected shape

Callers decide what a rejection means for the surrounding signing protocol
(abort, blame, retry with fresh randomness); the library never silently
corrects or partially accepts a proof.
"""


class ProofError(Exception):
    """Base class for all errors raised by paillier_zk."""


class InvalidStatement(ProofError):
    """The statement (or the witness paired with it) is not well formed."""


class SamplingFailed(ProofError):
    """Rejection sampling exhausted its attempt budget."""

    def __init__(self, what: str, attempts: int):
        super().__init__(f"could not sample {what} within {attempts} attempts")
        self.what = what
        self.attempts = attempts


class VerificationFailed(ProofError):
    """A verifier check failed. ``check`` names the failing equation."""

    def __init__(self, check: str, detail: str = ""):
        message = f"check '{check}' failed"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.check = check


class MalformedProof(ProofError):
    """The proof is structurally invalid (missing fields, wrong lengths)."""

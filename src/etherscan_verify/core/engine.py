"""Public verifier engine composed from focused mixins."""

from .base import VerifierBase
from .pipeline import VerifierPipelineMixin


class ContractVerifier(
    VerifierBase,
    VerifierPipelineMixin,
):
    """Verifier engine with modular flow-oriented implementation."""

    pass

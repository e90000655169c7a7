"""
Gavel - Governance computation engine for deliberative assemblies

Quorum and majority arithmetic, proxy delegation with chain and capacity
guards, role-gated meeting lifecycle, and single-use anonymous ballot tokens.

Ground rules:
- A decision is only as good as the snapshot it was computed from
- Validation happens before any write (fail closed)
- Every read and write is scoped to a tenant
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

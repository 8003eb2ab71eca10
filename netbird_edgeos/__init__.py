"""NetBird provisioning for EdgeOS (Python-first, reconcile-on-boot).

Core design goals:
- Idempotent convergence passes, safe to repeat on every boot
- Ephemeral footprint rebuilt only from the persistent store (/config)
- No restart of a healthy service
- Best-effort, unconditional teardown
- Centralized logging
"""

__all__ = []

"""Dotfiles bootstrap installer (Python-first, step-driven).

Core design goals:
- Fixed step order, filtered by --only/--skip
- Idempotent steps: rerunning is the recovery path
- Fail fast on fatal steps, warn and continue on optional ones
- Dry-run prints commands without executing them
- Centralized logging
"""

__all__ = []

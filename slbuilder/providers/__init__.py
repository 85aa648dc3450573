"""Cloud provider clients."""

from .wait import wait_for_ready

__all__ = ["wait_for_ready"]

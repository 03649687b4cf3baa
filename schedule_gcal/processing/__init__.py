"""Sync processing: per-day reconciliation."""

from schedule_gcal.processing.reconciler import Reconciler, build_remote_key_map

__all__ = ["Reconciler", "build_remote_key_map"]

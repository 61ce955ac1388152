"""Reconcile token spend with token savings."""

"""Governance: audit trail of record mutations."""

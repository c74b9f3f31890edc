"""
Pydantic schema package.

Domain-specific schema modules live here, e.g.:
- auth.py
- residents.py
- gate_entries.py
- bills.py
"""

"""
API Routers - Organized endpoint handlers for the Bloodcamp API.

Each router handles a specific domain:
- camps: Start/end camps, past camps, inventory reconcile
- donors: Donor contributions (each write adjusts camp inventory)
- requests: Hospital request triage
- dashboard: One-shot coordinator dashboard snapshot
"""

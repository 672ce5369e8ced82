"""
Bloodcamp - Core business logic for blood-donation camp coordination.

This package contains:
- models: Domain models (Camp, Donor, BloodRequest, blood types, statuses)
- data: PocketBase repositories, batch writes and live queries
- services: Camp lifecycle, inventory ledger, donor registry, request triage
- workflow: Facade composing the services for one coordinator
- dashboard: Live view model with derived views and session state
"""

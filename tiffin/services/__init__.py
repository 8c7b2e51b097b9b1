"""
                        Services Module

Capability adapters standing in for what a browser would provide.
Each capability has an in-memory/fixed implementation (development,
tests) and a real one, selected by a cached factory.

Services:
    - storage: persisted session values (token, role, user)
    - location: current geographic coordinates
    - notifications: user-facing toasts
"""

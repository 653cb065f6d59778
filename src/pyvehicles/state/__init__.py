"""State/store layer.

This package is the single owner of mutable registry state: every vehicle's
latest position lives in a :class:`~pyvehicles.state.store.VehicleStore`.
"""

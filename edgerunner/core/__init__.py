"""Core mathematics and configuration for the EdgeRunner Kelly calculator.

This package contains pure building blocks, leaf to root:

- ``errors``    — typed failure taxonomy shared by every component
- ``odds_math`` — odds notation variants, conversion, implied probability
- ``edge``      — edge and expected value against the market price
- ``kelly``     — Kelly criterion sizing and fractional presets
- ``settings``  — display precision and defaults, env-overridable

Nothing in this package imports from ``edgerunner.services`` or the FastAPI
app.  All modules are side-effect-free and unit-testable in isolation.
"""

"""State layer.

Owns the probe registry, the refresh schedule and the depletion model
that turns raw readings into per-product forecasts.
"""

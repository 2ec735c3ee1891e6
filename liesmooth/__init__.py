"""Lie groups (Tn, SO2, SO3, SE2, bundles), tangent-space differentiation,
Runge-Kutta integration on groups and Bezier splines."""

__version__ = "0.1.0"
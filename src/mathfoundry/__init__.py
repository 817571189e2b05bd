"""MathFoundry content-unlock and feature-access engine."""

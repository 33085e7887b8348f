"""Simulation core (engine, selection policies, metrics, visualisation).

The sub-modules are kept lightweight to ease unit testing; only `visualize`
pulls in matplotlib.
"""

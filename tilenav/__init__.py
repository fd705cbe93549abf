"""Grid navigation: tile graphs, A* paths and routes, and FSM-driven agents."""

__version__ = "0.1.0"

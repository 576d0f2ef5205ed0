"""Sensor network model: nodes, energy costs, generation and the network facade."""

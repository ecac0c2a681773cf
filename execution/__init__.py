"""Coordinator execution layer: models, agent registry, dispatch and safety."""

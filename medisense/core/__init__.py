"""
MediSense core: route scoring and selection, explanation generation and
risk scenario simulation.
"""

"""
HTTP routers for blockrisk.
"""

from .risk_simulator import router as risk_simulator_router

__all__ = ['risk_simulator_router']

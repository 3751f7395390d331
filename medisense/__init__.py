"""
MediSense - medical logistics route risk and optimization service.
"""
__version__ = "2.2.0"

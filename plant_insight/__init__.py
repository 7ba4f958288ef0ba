# Plant Insight
"""
Plant identification and agronomy advisory service.

Exports:
- app: FastAPI application (see `plant_insight.main`)
"""
__version__ = "0.1.0"

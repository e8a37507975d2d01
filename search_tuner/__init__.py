"""
Search Tuner - configurable multi-field relevance scoring.

- scoring: BM25 + field weights + match multipliers, with per-field breakdown
- documents: Document model and JSON corpus loading
- main: FastAPI service for searching and tuning the scoring configuration
"""

__version__ = "0.1.0"

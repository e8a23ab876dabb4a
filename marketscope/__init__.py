"""
MarketScope Marketing Intelligence

Backend for a marketing-operations dashboard that:
1. Stores company, competitor and content records
2. Pulls SEO authority metrics from the Moz Links API
3. Generates competitive, positioning and content insights with Claude
4. Normalizes and persists every AI artifact before it reaches the UI
"""

__version__ = "0.2.0"

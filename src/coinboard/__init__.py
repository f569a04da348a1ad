"""Coin supply screener: ticker snapshot ingestion, sort/filter views, related coins."""

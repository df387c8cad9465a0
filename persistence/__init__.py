"""
Test run data structures and Parquet persistence.
"""

"""Scoring pipeline for clinical screening instruments.

Implements the per-instrument flow:
  Response Scorer → Score Aggregator (sections, adjustments)
  → Risk Calculator (base mapping, demographic deltas, confidence interval)
  and the cross-instrument Composite Risk Calculator.
"""

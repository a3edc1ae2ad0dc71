"""
Verification-tiered ad estimation.

extract identifiers -> fetch document -> scan evidence -> classify tier ->
estimate counts, once per company. See pipeline.AdEstimationPipeline.
"""

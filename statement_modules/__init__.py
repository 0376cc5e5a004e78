"""
Statement modules.

Statement-specific rule-sets built on ``statement_kernel``, plus the
reporting service, configuration, data sources and exporters.
"""

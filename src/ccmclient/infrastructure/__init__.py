"""
Infrastructure layer - transports, session registry, configuration, logging.
"""

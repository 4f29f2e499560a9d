"""
Interface layer - the ccmclient command line.
"""

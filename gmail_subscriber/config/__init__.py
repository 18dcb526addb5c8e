"""
Module: config
Description: Package initialization for application configuration.
"""

"""Core functionality for delivery-tool"""

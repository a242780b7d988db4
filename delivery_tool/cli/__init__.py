"""Command line interface for delivery-tool"""

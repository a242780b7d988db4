"""Built-in data sources and assignment strategies"""

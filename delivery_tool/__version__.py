"""Version information for delivery-tool package"""

__version__ = "1.0.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))
__author__ = "delivery-tool contributors"
__license__ = "EPL-2.0"

"""Application version metadata."""

__app_name__ = "ClosetRental"
__company__ = "Closet Rental"
__version__ = "1.0.0"

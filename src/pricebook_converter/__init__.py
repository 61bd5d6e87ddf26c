"""pricebook-converter: stream a pricebook XML into another currency."""

__version__ = "0.1.0"

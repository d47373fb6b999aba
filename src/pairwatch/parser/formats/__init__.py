from pairwatch.parser.formats.alternative import AlternativeParser
from pairwatch.parser.formats.array import ArrayFormatParser
from pairwatch.parser.formats.strict import StrictParser

__all__ = ["AlternativeParser", "ArrayFormatParser", "StrictParser"]

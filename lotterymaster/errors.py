"""Exception taxonomy shared by every LotteryMaster component."""


class LotteryError(Exception):
    """Base class for all LotteryMaster errors."""


# -- Programmer errors ----------------------------------------------------

class UnknownGameError(LotteryError, ValueError):
    """The game id is not one of the registered profiles."""


class UnknownZoneError(LotteryError, ValueError):
    """The zone / position selector does not exist for the game."""


class DatasetNotFoundError(LotteryError, FileNotFoundError):
    """No dataset file exists at the requested location."""


# -- Acquisition ----------------------------------------------------------

class AcquisitionError(LotteryError):
    """Raised inside the scraper; always converted into a ScrapeResult."""


class TransportError(AcquisitionError):
    """The source could not be reached (timeout, connection, HTTP status)."""


class EmptyPayloadError(AcquisitionError):
    """The source answered without a body."""


class NoValidDataError(AcquisitionError):
    """Not a single row survived extraction."""


class WriteError(AcquisitionError):
    """The dataset could not be written to (or cleaned from) disk."""


# -- Analysis providers ---------------------------------------------------

class ProviderError(LotteryError):
    """The analysis provider failed; not recoverable locally."""


class ProviderTimeoutError(ProviderError):
    pass


class ProviderAuthError(ProviderError):
    pass


class ProviderRateLimitError(ProviderError):
    pass


class InvalidResponseShapeError(LotteryError):
    """The provider answered, but without the fields the contract requires."""


class ParseError(LotteryError):
    """The structured JSON block in a provider reply is missing or malformed."""

ERR_NOT_READY = "NOT_READY"
ERR_NO_FRAME = "NO_FRAME"
ERR_NO_EXAMPLES = "NO_EXAMPLES"
ERR_INVALID_STATE = "INVALID_STATE"
ERR_UNKNOWN_LABEL = "UNKNOWN_LABEL"
ERR_UNKNOWN = "UNKNOWN"


class KnnRpsError(Exception):
    code = ERR_UNKNOWN


class NotReady(KnnRpsError):
    """Feature extractor or classifier not initialised yet."""
    code = ERR_NOT_READY


class NoFrame(KnnRpsError):
    """Camera produced no usable frame this cycle."""
    code = ERR_NO_FRAME


class NoExamples(KnnRpsError):
    """Prediction requested while the classifier holds no examples."""
    code = ERR_NO_EXAMPLES


class InvalidState(KnnRpsError):
    """Round requested before the player has been classified."""
    code = ERR_INVALID_STATE

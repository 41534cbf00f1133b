class JShapeError(Exception):
    pass


class JDecodeError(JShapeError):
    """
    The underlying tokenizer rejected the input (malformed or truncated json).
    """
    pass


class JStructureError(JShapeError):
    """
    A token showed up where the grammar doesn't allow it.
    """

    def __init__(self, expected: str, found: object):
        super().__init__(f"expected {expected}, found {found}")
        self.expected = expected
        self.found = found


class JTrailingDataError(JStructureError):
    """
    More than one document in an input that was expected to hold exactly one.
    """

    def __init__(self, found: object):
        super().__init__("end of input", found)

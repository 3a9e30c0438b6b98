"""Exceptions raised by the parsing and input layers."""


class ZxcliError(Exception):
    pass


class UsageError(ZxcliError):
    """Arguments that are malformed or conflict with each other."""


class InputError(ZxcliError):
    """The encode payload could not be resolved."""
